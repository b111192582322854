"""Tests for the run_khanabi command-line entry point."""

import sys

import pytest

from scripts.run_khanabi import build_parser, main


START = "Start new game with deck R1 G1 B1 Y1 W1 R2 G2 B2 Y2 W2 R3 G3"


class TestArguments:
    """Tests for argument parsing."""

    def test_hand_size(self):
        args = build_parser().parse_args(["--hand-size", "3"])
        assert args.hand_size == 3

    @pytest.mark.parametrize("value", ["0", "-1", "five"])
    def test_bad_hand_size_is_a_usage_error(self, value, capsys):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--hand-size", value])
        assert exc.value.code == 2
        assert "--hand-size" in capsys.readouterr().err


class TestMain:
    """Tests for running the CLI end to end."""

    def test_bad_hand_size_in_env_is_a_usage_error(self, monkeypatch, capsys):
        monkeypatch.setenv("KHANABI_HAND_SIZE", "abc")
        monkeypatch.setattr(sys, "argv", ["run_khanabi.py"])

        with pytest.raises(SystemExit) as exc:
            main()

        assert exc.value.code == 2
        err = capsys.readouterr().err
        assert "Invalid configuration" in err
        assert "Traceback" not in err

    def test_prints_one_summary_per_game(self, monkeypatch, capsys, tmp_path):
        commands = tmp_path / "commands.txt"
        commands.write_text(f"{START}\nPlay card 0\nPlay card 0\n")
        monkeypatch.delenv("KHANABI_HAND_SIZE", raising=False)
        monkeypatch.setattr(sys, "argv", ["run_khanabi.py", "-q", str(commands)])

        main()

        assert capsys.readouterr().out.splitlines() == ["Turn: 2, cards: 2, with risk: 2"]
