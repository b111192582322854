"""Data models for the Khanabi rule engine."""

from __future__ import annotations

import os
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_serializer, model_validator


class Color(str, Enum):
    """Card colors. Declaration order is the board's stack order."""
    RED = "Red"
    GREEN = "Green"
    YELLOW = "Yellow"
    BLUE = "Blue"
    WHITE = "White"

    @property
    def letter(self) -> str:
        return self.value[0]


class CardKnowledge(str, Enum):
    """What the holder has been told about one of their cards."""
    KNOWS_NOTHING = "knows_nothing"
    KNOWS_COLOR = "knows_color"
    KNOWS_RANK = "knows_rank"
    KNOWS_ALL = "knows_all"


COLORS: list[Color] = list(Color)
MAX_RANK = 5
RANKS: list[int] = list(range(1, MAX_RANK + 1))

# Each stack holds a rank-0 sentinel below the real cards
SENTINEL_RANK = 0


class CardInfo(BaseModel):
    """Possibility set: what a card could still be, from its holder's side."""

    possible_colors: set[Color] = Field(default_factory=lambda: set(COLORS))
    possible_ranks: set[int] = Field(default_factory=lambda: set(RANKS))

    @field_serializer("possible_colors")
    def serialize_colors(self, value: set[Color]) -> list[str]:
        return [c.value for c in COLORS if c in value]

    @field_serializer("possible_ranks")
    def serialize_ranks(self, value: set[int]) -> list[int]:
        return sorted(value)


class Card(BaseModel):
    """A card with a fixed identity and a mutable possibility set."""

    color: Color = Field(frozen=True)
    rank: int = Field(ge=SENTINEL_RANK, le=MAX_RANK, frozen=True)
    info: CardInfo = Field(default_factory=CardInfo)

    def __str__(self) -> str:
        return f"{self.color.letter}{self.rank}"


class HandSlot(BaseModel):
    """One hand position: the card and what its holder knows about it."""

    card: Card
    knowledge: CardKnowledge = CardKnowledge.KNOWS_NOTHING


# Commands

class PlayCommand(BaseModel):
    """Play the card at a 0-indexed hand position."""

    command_type: Literal["play"] = "play"
    position: int


class DropCommand(BaseModel):
    """Discard the card at a 0-indexed hand position."""

    command_type: Literal["drop"] = "drop"
    position: int


class TellCommand(BaseModel):
    """Hint the opponent: these positions, and only these, share a color or rank."""

    command_type: Literal["tell"] = "tell"
    hint_type: Literal["color", "rank"]
    value: Color | int
    positions: list[int] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_value_matches_type(self) -> "TellCommand":
        if self.hint_type == "color" and not isinstance(self.value, Color):
            raise ValueError(f"Color hint needs a color, got {self.value!r}")
        if self.hint_type == "rank":
            if isinstance(self.value, Color) or self.value not in RANKS:
                raise ValueError(f"Rank hint needs a rank in 1..{MAX_RANK}, got {self.value!r}")
        return self


class StartCommand(BaseModel):
    """Begin a new game with this deck, in draw order."""

    command_type: Literal["start"] = "start"
    cards: list[Card]


Command = Annotated[
    PlayCommand | DropCommand | TellCommand | StartCommand,
    Field(discriminator="command_type"),
]


class CommandResult(BaseModel):
    """Result of applying a command."""

    success: bool
    message: str
    card: Card | None = None  # Card played or dropped
    was_placed: bool | None = None  # For play: did the card extend its stack?
    was_risked: bool | None = None  # For play: made without enough knowledge?
    drew_card: bool | None = None  # For play/drop: was a replacement drawn?
    positions: list[int] | None = None  # For tell: claimed positions


class TurnLog(BaseModel):
    """Log of a single processed command."""

    turn_number: int
    player_id: int
    command: Command | None
    raw: str = ""  # Input line, kept for malformed commands
    result: CommandResult

    # Counters after the command
    correctly_played_after: int
    risked_turns_after: int


class KhanabiConfig(BaseModel):
    """Configuration for a Khanabi session."""

    hand_size: int = Field(default=5, ge=1)
    lenient_card_codes: bool = False  # Unknown color letters fall back to Blue

    @classmethod
    def from_env(cls, **overrides: Any) -> "KhanabiConfig":
        """Build a config from KHANABI_* environment variables.

        Raises pydantic.ValidationError (a ValueError) for unusable values.
        """
        values: dict[str, Any] = {}
        hand_size = os.environ.get("KHANABI_HAND_SIZE")
        if hand_size:
            values["hand_size"] = hand_size.strip()
        lenient = os.environ.get("KHANABI_LENIENT_CARD_CODES")
        if lenient:
            values["lenient_card_codes"] = lenient.strip().lower() in ("1", "true", "yes", "on")
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


FinishReason = Literal["failed_command", "deck_empty", "board_full", "end_of_input"]


class GameSummary(BaseModel):
    """Final score report for one game."""

    turns: int
    correctly_played_cards: int
    risked_turns: int
    finish_reason: FinishReason | None = None

    def __str__(self) -> str:
        return f"Turn: {self.turns}, cards: {self.correctly_played_cards}, with risk: {self.risked_turns}"


class KhanabiSessionRecord(BaseModel):
    """Complete record of one game within a session."""

    game_id: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    config: KhanabiConfig
    initial_deck: list[str]
    turns: list[TurnLog]
    summary: GameSummary
    metrics: dict[str, Any] = Field(default_factory=dict)

    def to_filename(self) -> str:
        ts = self.timestamp.strftime("%Y%m%d_%H%M%S")
        return f"khanabi_game_{self.game_id}_{ts}.json"

    def save(self, directory: str) -> str:
        """Save record JSON to a directory. Returns the written filepath."""
        from pathlib import Path
        import json

        d = Path(directory)
        d.mkdir(parents=True, exist_ok=True)
        fp = d / self.to_filename()
        data = self.model_dump(mode="json")
        data["timestamp"] = self.timestamp.isoformat()
        with open(fp, "w") as f:
            json.dump(data, f, indent=2)
        return str(fp)
