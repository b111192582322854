"""Turn engine for Khanabi."""

from __future__ import annotations

import logging
from copy import deepcopy

from pydantic import BaseModel, Field

from .board import Board
from .deck import Deck
from .models import (
    Color,
    Command,
    CommandResult,
    DropCommand,
    FinishReason,
    GameSummary,
    KhanabiConfig,
    PlayCommand,
    StartCommand,
    TellCommand,
    TurnLog,
)
from .player import Player

logger = logging.getLogger(__name__)


class GameState(BaseModel):
    """Everything the engine tracks for one two-player game."""

    config: KhanabiConfig

    # Two live players, swapped after each successful turn
    current_player: Player
    next_player: Player

    deck: Deck = Field(default_factory=Deck)
    board: Board = Field(default_factory=Board)

    # Counters. Start resets turns to -1, so Start itself is turn 0.
    turns: int = -1
    risked_turns: int = 0
    correctly_played_cards: int = 0

    # A state that has never seen Start counts as finished
    is_finished: bool = True
    finish_reason: FinishReason | None = None

    initial_deck: list[str] = Field(default_factory=list)
    turn_history: list[TurnLog] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return not self.is_finished

    def player(self, player_id: int) -> Player:
        for p in (self.current_player, self.next_player):
            if p.player_id == player_id:
                return p
        raise ValueError(f"Unknown player: {player_id}")


def _copy_state(state: GameState) -> GameState:
    """Deep-copy everything but the turn history, whose logs are never mutated."""
    new_state = state.model_copy(
        update={
            name: deepcopy(getattr(state, name))
            for name in GameState.model_fields
            if name != "turn_history"
        }
    )
    new_state.turn_history = list(state.turn_history)
    return new_state


def create_game(config: KhanabiConfig | None = None) -> GameState:
    """Create an idle game with players 1 and 2. Send a StartCommand to begin."""
    if config is None:
        config = KhanabiConfig()
    return GameState(
        config=config,
        current_player=Player(player_id=1),
        next_player=Player(player_id=2),
    )


def apply_start(state: GameState, command: StartCommand) -> tuple[GameState, CommandResult]:
    """Reset counters, board, deck and both hands for a new game."""
    new_state = _copy_state(state)

    if state.is_active:
        logger.info("Start received during an active game; abandoning it at turn %d", state.turns)

    new_state.turns = -1
    new_state.correctly_played_cards = 0
    new_state.risked_turns = 0
    new_state.is_finished = False
    new_state.finish_reason = None
    new_state.turn_history = []

    new_state.board = Board()
    new_state.deck = Deck.from_cards(command.cards)
    new_state.initial_deck = [str(card) for card in command.cards]

    hand_size = new_state.config.hand_size
    dealt_current = new_state.current_player.deal(new_state.deck, hand_size)
    dealt_next = new_state.next_player.deal(new_state.deck, hand_size)

    logger.info(
        f"New game: {len(command.cards)} cards, dealt {dealt_current}+{dealt_next}, "
        f"{len(new_state.deck)} left in deck"
    )

    return new_state, CommandResult(
        success=True,
        message=f"Started a game with {len(command.cards)} cards",
    )


def apply_play(state: GameState, command: PlayCommand) -> tuple[GameState, CommandResult]:
    """Play a card. A placed card is replaced from the deck."""
    new_state = _copy_state(state)
    player = new_state.current_player

    if not player.has_position(command.position):
        return state, CommandResult(
            success=False,
            message=f"Invalid card position: {command.position}",
        )

    placed, risked, card = player.play_card(command.position, new_state.board)

    if not placed:
        top = new_state.board.top_ranks()[card.color]
        return new_state, CommandResult(
            success=False,
            message=f"Cannot place {card}: {card.color.value} stack is at {top}",
            card=card,
            was_placed=False,
            was_risked=risked,
        )

    new_state.correctly_played_cards += 1
    if risked:
        new_state.risked_turns += 1

    drew = player.take_card(new_state.deck)
    message = f"Placed {card}" + (" (risked)" if risked else "")
    if not drew:
        message += ", but there was no card to draw"

    return new_state, CommandResult(
        success=drew,
        message=message,
        card=card,
        was_placed=True,
        was_risked=risked,
        drew_card=drew,
    )


def apply_drop(state: GameState, command: DropCommand) -> tuple[GameState, CommandResult]:
    """Discard a card and draw a replacement."""
    new_state = _copy_state(state)
    player = new_state.current_player

    if not player.has_position(command.position):
        return state, CommandResult(
            success=False,
            message=f"Invalid card position: {command.position}",
        )

    card = player.drop_card(command.position)
    drew = player.take_card(new_state.deck)

    return new_state, CommandResult(
        success=drew,
        message=f"Dropped {card}" if drew else f"Dropped {card}, but there was no card to draw",
        card=card,
        drew_card=drew,
    )


def apply_tell(state: GameState, command: TellCommand) -> tuple[GameState, CommandResult]:
    """Hint the opponent. The claim must name exactly the matching positions."""
    new_state = _copy_state(state)
    giver = new_state.current_player
    opponent = new_state.next_player

    if command.hint_type == "color":
        color = Color(command.value)
        valid, error = giver.tell_color(color, opponent, command.positions)
        label = color.value
    else:
        valid, error = giver.tell_rank(int(command.value), opponent, command.positions)
        label = str(command.value)

    if not valid:
        return state, CommandResult(
            success=False,
            message=f"Invalid {command.hint_type} hint {label}: {error}",
            positions=list(command.positions),
        )

    return new_state, CommandResult(
        success=True,
        message=f"Told player {opponent.player_id} {command.hint_type}={label} at positions {sorted(set(command.positions))}",
        positions=sorted(set(command.positions)),
    )


def check_terminal(state: GameState, result: CommandResult | None = None) -> tuple[bool, FinishReason | None]:
    """
    Check whether the game ends after a command.

    Returns:
        (is_game_over, reason)
        Reasons: "failed_command", "deck_empty", "board_full", None (not over)
    """
    if result is not None and not result.success:
        return True, "failed_command"
    if state.deck.is_empty():
        return True, "deck_empty"
    if state.board.is_full():
        return True, "board_full"
    return False, None


def _switch_players(state: GameState) -> None:
    # The first command after Start keeps the same player
    if state.turns <= 0:
        return
    state.current_player, state.next_player = state.next_player, state.current_player


def _finish_turn(
    state: GameState,
    new_state: GameState,
    command: Command | None,
    result: CommandResult,
    raw: str = "",
) -> tuple[GameState, TurnLog]:
    if new_state is state:
        new_state = _copy_state(state)

    player_id = new_state.current_player.player_id
    new_state.turns += 1

    turn_log = TurnLog(
        turn_number=new_state.turns,
        player_id=player_id,
        command=command,
        raw=raw,
        result=result,
        correctly_played_after=new_state.correctly_played_cards,
        risked_turns_after=new_state.risked_turns,
    )
    new_state.turn_history.append(turn_log)
    logger.debug(f"Turn {new_state.turns} (player {player_id}): {result.message}")

    game_over, reason = check_terminal(new_state, result)
    if game_over:
        new_state.is_finished = True
        new_state.finish_reason = reason
        logger.info(f"Game over ({reason}): {summarize(new_state)}")
    else:
        _switch_players(new_state)

    return new_state, turn_log


def apply_command(
    state: GameState,
    command: Command,
    raw: str = "",
) -> tuple[GameState, CommandResult, TurnLog | None]:
    """
    Apply a command to the game state.

    Only Start is accepted while the game is finished; anything else is
    ignored and produces no turn log.

    Returns:
        (new_state, result, turn_log)
    """
    if isinstance(command, StartCommand):
        new_state, result = apply_start(state, command)
    elif state.is_finished:
        logger.warning(f"Ignoring {command.command_type} command: no active game")
        return state, CommandResult(success=False, message="No active game"), None
    elif isinstance(command, PlayCommand):
        new_state, result = apply_play(state, command)
    elif isinstance(command, DropCommand):
        new_state, result = apply_drop(state, command)
    elif isinstance(command, TellCommand):
        new_state, result = apply_tell(state, command)
    else:
        new_state, result = state, CommandResult(
            success=False,
            message=f"Unknown command type: {type(command)}",
        )

    new_state, turn_log = _finish_turn(state, new_state, command, result, raw)
    return new_state, result, turn_log


def reject_command(
    state: GameState,
    error: str,
    raw: str = "",
) -> tuple[GameState, CommandResult, TurnLog | None]:
    """Count a malformed command as a failed turn of the active game."""
    result = CommandResult(success=False, message=f"Malformed command: {error}")
    if state.is_finished:
        return state, result, None
    new_state, turn_log = _finish_turn(state, state, None, result, raw)
    return new_state, result, turn_log


def summarize(state: GameState) -> GameSummary:
    return GameSummary(
        turns=state.turns,
        correctly_played_cards=state.correctly_played_cards,
        risked_turns=state.risked_turns,
        finish_reason=state.finish_reason,
    )
