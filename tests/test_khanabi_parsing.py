"""Tests for Khanabi command and card-code parsing."""

import pytest
from pydantic import TypeAdapter, ValidationError

from src.khanabi.models import (
    Color,
    Command,
    DropCommand,
    KhanabiConfig,
    PlayCommand,
    StartCommand,
    TellCommand,
)
from src.khanabi.parsing import (
    parse_card_code,
    parse_color_name,
    parse_command,
    parse_deck,
)


class TestCardCodes:
    """Tests for card code parsing."""

    def test_all_color_letters(self):
        parsed = parse_deck(["B1", "G2", "R3", "W4", "Y5"])
        assert [c.color for c in parsed] == [
            Color.BLUE, Color.GREEN, Color.RED, Color.WHITE, Color.YELLOW,
        ]
        assert [c.rank for c in parsed] == [1, 2, 3, 4, 5]

    def test_unknown_letter_is_an_error(self):
        with pytest.raises(ValueError):
            parse_card_code("X3")

    def test_unknown_letter_falls_back_to_blue_when_lenient(self):
        card = parse_card_code("X3", lenient=True)
        assert card.color == Color.BLUE
        assert card.rank == 3

    @pytest.mark.parametrize("code", ["R0", "R6", "R", "R12", "Rx"])
    def test_bad_ranks_and_lengths(self, code):
        with pytest.raises(ValueError):
            parse_card_code(code)


class TestColorNames:
    """Tests for hint color names."""

    def test_case_insensitive(self):
        assert parse_color_name("Red") == Color.RED
        assert parse_color_name("white") == Color.WHITE
        assert parse_color_name("YELLOW") == Color.YELLOW

    def test_unknown_color(self):
        with pytest.raises(ValueError):
            parse_color_name("Purple")


class TestParseCommand:
    """Tests for protocol lines."""

    def test_play(self):
        command, error = parse_command("Play card 3")
        assert error is None
        assert command == PlayCommand(position=3)

    def test_drop(self):
        command, error = parse_command("Drop card 0")
        assert error is None
        assert command == DropCommand(position=0)

    def test_tell_color(self):
        command, error = parse_command("Tell color Red to player 2 4")
        assert error is None
        assert isinstance(command, TellCommand)
        assert command.hint_type == "color"
        assert command.value == Color.RED
        assert command.positions == [2, 4]

    def test_tell_rank(self):
        command, error = parse_command("Tell rank 3 to player 0 1")
        assert error is None
        assert command.hint_type == "rank"
        assert command.value == 3
        assert command.positions == [0, 1]

    def test_tell_without_positions(self):
        command, error = parse_command("Tell rank 5 to player")
        assert error is None
        assert command.positions == []

    def test_start(self):
        command, error = parse_command("Start new game with deck R1 G1 B1")
        assert error is None
        assert isinstance(command, StartCommand)
        assert [str(c) for c in command.cards] == ["R1", "G1", "B1"]

    def test_start_with_unknown_letter(self):
        command, error = parse_command("Start new game with deck R1 Q1")
        assert command is None
        assert "Q1" in error

        command, error = parse_command(
            "Start new game with deck R1 Q1",
            KhanabiConfig(lenient_card_codes=True),
        )
        assert error is None
        assert command.cards[1].color == Color.BLUE

    def test_extra_whitespace(self):
        command, error = parse_command("  Play   card    1  ")
        assert error is None
        assert command == PlayCommand(position=1)

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "Jump card 1",
            "Play card",
            "Play card one",
            "Tell colour Red to player 0",
            "Tell color Purple to player 0",
            "Tell rank 9 to player 0",
            "Tell rank three to player 0",
            "Tell rank 2 to player x",
            "Tell color",
            "Start new game with deck R9",
        ],
    )
    def test_malformed(self, line):
        command, error = parse_command(line)
        assert command is None
        assert error


class TestCommandUnion:
    """Tests for validating stored commands by their command_type tag."""

    @pytest.mark.parametrize(
        "data,expected",
        [
            ({"command_type": "play", "position": 1}, PlayCommand(position=1)),
            ({"command_type": "drop", "position": 2}, DropCommand(position=2)),
            (
                {"command_type": "tell", "hint_type": "rank", "value": 3, "positions": [0]},
                TellCommand(hint_type="rank", value=3, positions=[0]),
            ),
            (
                {"command_type": "tell", "hint_type": "color", "value": "White", "positions": []},
                TellCommand(hint_type="color", value=Color.WHITE, positions=[]),
            ),
        ],
    )
    def test_tag_selects_model(self, data, expected):
        command = TypeAdapter(Command).validate_python(data)
        assert type(command) is type(expected)
        assert command == expected

    def test_parsed_command_survives_json(self):
        command, _ = parse_command("Tell rank 4 to player 1 3")
        adapter = TypeAdapter(Command)

        restored = adapter.validate_json(adapter.dump_json(command))

        assert isinstance(restored, TellCommand)
        assert restored == command

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValidationError):
            TypeAdapter(Command).validate_python({"command_type": "jump", "position": 1})
