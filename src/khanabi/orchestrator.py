"""Session runner: feeds protocol lines through the turn engine."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Iterable

from .game import GameState, apply_command, create_game, reject_command, summarize
from .metrics import compute_game_metrics
from .models import KhanabiConfig, KhanabiSessionRecord, TurnLog
from .parsing import parse_command

logger = logging.getLogger(__name__)


def build_record(state: GameState, game_id: str | None = None) -> KhanabiSessionRecord:
    """Build a record for the game held in a state."""
    if game_id is None:
        game_id = str(uuid.uuid4())[:8]

    record = KhanabiSessionRecord(
        game_id=game_id,
        timestamp=datetime.utcnow(),
        config=state.config,
        initial_deck=list(state.initial_deck),
        turns=list(state.turn_history),
        summary=summarize(state),
    )
    record.metrics = compute_game_metrics(record)
    return record


def run_session(
    lines: Iterable[str],
    config: KhanabiConfig | None = None,
    emit_fn: Callable[[str, dict[str, Any]], None] | None = None,
) -> list[KhanabiSessionRecord]:
    """
    Run every command in a session and collect one record per game.

    A game's record is produced when it finishes, or at end of input if it
    is still running. A Start during a running game abandons that game.

    Args:
        lines: Protocol lines, one command each
        config: Session configuration
        emit_fn: Optional callback for "turn" and "game_over" events

    Returns:
        Records for every game played, in order
    """
    if config is None:
        config = KhanabiConfig()

    state = create_game(config)
    records: list[KhanabiSessionRecord] = []

    def _emit(event: str, payload: dict[str, Any]) -> None:
        if emit_fn is not None:
            emit_fn(event, payload)

    def _close_game() -> None:
        record = build_record(state)
        records.append(record)
        _emit("game_over", {
            "game_id": record.game_id,
            "summary": record.summary.model_dump(),
            "line": str(record.summary),
        })

    for line_number, line in enumerate(lines, start=1):
        raw = line.strip()
        if not raw:
            continue

        command, error = parse_command(raw, config)
        turn_log: TurnLog | None
        if command is None:
            logger.warning(f"Line {line_number}: {error}")
            state, result, turn_log = reject_command(state, error or "unparseable", raw=raw)
        else:
            state, result, turn_log = apply_command(state, command, raw=raw)

        if turn_log is None:
            continue

        _emit("turn", {
            "line": line_number,
            "turn_number": turn_log.turn_number,
            "player_id": turn_log.player_id,
            "result": result.model_dump(),
            "correctly_played_cards": state.correctly_played_cards,
            "risked_turns": state.risked_turns,
        })

        if state.is_finished:
            _close_game()

    if state.is_active:
        state = state.model_copy(update={"finish_reason": "end_of_input"})
        logger.info(f"End of input during an active game: {summarize(state)}")
        _close_game()

    return records
