"""Parsing for the line-oriented Khanabi command protocol."""

from __future__ import annotations

from pydantic import ValidationError

from .models import (
    COLORS,
    Card,
    Color,
    Command,
    DropCommand,
    KhanabiConfig,
    PlayCommand,
    StartCommand,
    TellCommand,
)

# Token counts before the payload of each command
START_PREFIX = 5  # Start + 4 ignored fields
TELL_PREFIX = 5  # Tell, kind, value + 2 ignored fields
POSITION_INDEX = 2  # Play/Drop <ignored> <position>

COLOR_BY_LETTER: dict[str, Color] = {c.letter: c for c in COLORS}


def parse_color_name(name: str) -> Color:
    """Match a color name such as 'Red' (case-insensitive)."""
    for color in COLORS:
        if color.value.lower() == name.lower():
            return color
    raise ValueError(f"Unknown color: {name!r}")


def parse_card_code(code: str, lenient: bool = False) -> Card:
    """
    Parse a two-character card code like 'R3'.

    Args:
        code: Color letter (B/G/R/W/Y) followed by a rank digit
        lenient: Map unknown color letters to Blue instead of failing

    Raises:
        ValueError: If the code cannot be parsed
    """
    if len(code) != 2:
        raise ValueError(f"Card code must be two characters: {code!r}")

    letter, digit = code[0], code[1]
    color = COLOR_BY_LETTER.get(letter)
    if color is None:
        if not lenient:
            raise ValueError(f"Unknown color letter in card code: {code!r}")
        color = Color.BLUE

    if not digit.isdigit():
        raise ValueError(f"Card rank must be a digit: {code!r}")
    rank = int(digit)
    if rank < 1:
        raise ValueError(f"Card rank must be at least 1: {code!r}")

    # Ranks above the maximum fail model validation
    return Card(color=color, rank=rank)


def parse_deck(codes: list[str], lenient: bool = False) -> list[Card]:
    """Parse card codes into a deck in draw order."""
    return [parse_card_code(code, lenient=lenient) for code in codes]


def _parse_position(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ValueError(f"Position must be an integer: {token!r}") from None


def _parse_command(tokens: list[str], config: KhanabiConfig) -> Command:
    verb = tokens[0]

    if verb in ("Play", "Drop"):
        if len(tokens) <= POSITION_INDEX:
            raise ValueError(f"{verb} needs a position")
        position = _parse_position(tokens[POSITION_INDEX])
        if verb == "Play":
            return PlayCommand(position=position)
        return DropCommand(position=position)

    if verb == "Tell":
        if len(tokens) < 3:
            raise ValueError("Tell needs a hint kind and a value")
        kind, raw_value = tokens[1], tokens[2]
        positions = [_parse_position(t) for t in tokens[TELL_PREFIX:]]
        if kind == "color":
            return TellCommand(hint_type="color", value=parse_color_name(raw_value), positions=positions)
        if kind == "rank":
            try:
                rank = int(raw_value)
            except ValueError:
                raise ValueError(f"Rank must be an integer: {raw_value!r}") from None
            return TellCommand(hint_type="rank", value=rank, positions=positions)
        raise ValueError(f"Unknown hint kind: {kind!r}")

    if verb == "Start":
        cards = parse_deck(tokens[START_PREFIX:], lenient=config.lenient_card_codes)
        return StartCommand(cards=cards)

    raise ValueError(f"Unknown command: {verb!r}")


def parse_command(line: str, config: KhanabiConfig | None = None) -> tuple[Command | None, str | None]:
    """
    Parse one protocol line into a command.

    Supported forms:
        Start <x> <x> <x> <x> <card>...
        Play <x> <position>
        Drop <x> <position>
        Tell color <ColorName> <x> <x> <position>...
        Tell rank <rank> <x> <x> <position>...

    Returns:
        (command, error_message)
    """
    if config is None:
        config = KhanabiConfig()

    tokens = line.split()
    if not tokens:
        return None, "Empty command"

    try:
        return _parse_command(tokens, config), None
    except ValidationError as e:
        return None, f"Invalid {tokens[0]} command: {e.errors()[0]['msg']}"
    except ValueError as e:
        return None, str(e)
