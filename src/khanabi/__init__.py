"""Khanabi: rule engine for a two-player cooperative Hanabi variant."""

from .models import (
    Color,
    CardKnowledge,
    CardInfo,
    Card,
    HandSlot,
    PlayCommand,
    DropCommand,
    TellCommand,
    StartCommand,
    Command,
    CommandResult,
    TurnLog,
    GameSummary,
    KhanabiConfig,
    KhanabiSessionRecord,
)
from .board import Board
from .deck import Deck
from .player import Player, validate_hint
from .game import (
    GameState,
    create_game,
    apply_command,
    reject_command,
    check_terminal,
    summarize,
)
from .parsing import parse_command, parse_card_code, parse_deck
from .orchestrator import run_session
from .visibility import view_for_player, assert_no_leaks

__all__ = [
    # Models
    "Color",
    "CardKnowledge",
    "CardInfo",
    "Card",
    "HandSlot",
    "PlayCommand",
    "DropCommand",
    "TellCommand",
    "StartCommand",
    "Command",
    "CommandResult",
    "TurnLog",
    "GameSummary",
    "KhanabiConfig",
    "KhanabiSessionRecord",
    # Components
    "Board",
    "Deck",
    "Player",
    "validate_hint",
    # Game
    "GameState",
    "create_game",
    "apply_command",
    "reject_command",
    "check_terminal",
    "summarize",
    # Protocol
    "parse_command",
    "parse_card_code",
    "parse_deck",
    "run_session",
    # Visibility
    "view_for_player",
    "assert_no_leaks",
]
