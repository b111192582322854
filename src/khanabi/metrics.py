"""Metrics calculation for Khanabi games."""

from __future__ import annotations

from typing import Any

from .models import (
    DropCommand,
    KhanabiSessionRecord,
    PlayCommand,
    TellCommand,
    TurnLog,
)


def _empty_player_stats() -> dict[str, int]:
    return {
        "plays": 0,
        "plays_placed": 0,
        "plays_risked": 0,
        "drops": 0,
        "hints": 0,
        "hints_rejected": 0,
    }


def compute_turn_metrics(turns: list[TurnLog]) -> dict[str, Any]:
    """
    Compute metrics from a turn log.

    Returns dict with:
    - total_turns: Commands counted as turns (Start is turn 0)
    - plays_attempted / plays_placed / plays_failed
    - risky_plays: Placed cards played without enough knowledge
    - risk_rate: risky_plays / plays_placed
    - drops
    - hints_given / color_hints / rank_hints / hints_rejected
    - malformed_commands
    - per_player: Per-player breakdown
    """
    plays_attempted = 0
    plays_placed = 0
    risky_plays = 0
    drops = 0
    color_hints = 0
    rank_hints = 0
    hints_rejected = 0
    malformed = 0

    per_player: dict[int, dict[str, int]] = {}

    for turn in turns:
        command = turn.command
        result = turn.result
        stats = per_player.setdefault(turn.player_id, _empty_player_stats())

        if command is None:
            malformed += 1
        elif isinstance(command, PlayCommand):
            plays_attempted += 1
            stats["plays"] += 1
            if result.was_placed:
                plays_placed += 1
                stats["plays_placed"] += 1
                if result.was_risked:
                    risky_plays += 1
                    stats["plays_risked"] += 1
        elif isinstance(command, DropCommand):
            drops += 1
            stats["drops"] += 1
        elif isinstance(command, TellCommand):
            stats["hints"] += 1
            if not result.success:
                hints_rejected += 1
                stats["hints_rejected"] += 1
            elif command.hint_type == "color":
                color_hints += 1
            else:
                rank_hints += 1

    total_turns = turns[-1].turn_number if turns else 0

    return {
        "total_turns": total_turns,
        "plays_attempted": plays_attempted,
        "plays_placed": plays_placed,
        "plays_failed": plays_attempted - plays_placed,
        "risky_plays": risky_plays,
        "risk_rate": risky_plays / plays_placed if plays_placed > 0 else 0.0,
        "drops": drops,
        "hints_given": color_hints + rank_hints,
        "color_hints": color_hints,
        "rank_hints": rank_hints,
        "hints_rejected": hints_rejected,
        "malformed_commands": malformed,
        "per_player": {str(pid): stats for pid, stats in sorted(per_player.items())},
    }


def compute_game_metrics(record: KhanabiSessionRecord) -> dict[str, Any]:
    """Compute metrics for a finished game record."""
    metrics = compute_turn_metrics(record.turns)
    metrics["correctly_played_cards"] = record.summary.correctly_played_cards
    metrics["finish_reason"] = record.summary.finish_reason
    return metrics
