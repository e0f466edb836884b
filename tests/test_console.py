"""Tests for the output collaborator (cli/console.py).

Rich writes to stderr, captured with ``capsys``.  The plain fallback is
exercised by making the Rich import fail.
"""

from __future__ import annotations

import sys
from unittest.mock import patch

import pytest

from cmdsig.cli.console import ConsoleOutput, get_rich_console
from cmdsig.core.protocols import PromptDisplay
from cmdsig.exceptions import EnvironmentError


@pytest.fixture
def no_rich():
    with patch.dict(sys.modules, {"rich": None, "rich.console": None}):
        yield


class TestRichOutput:
    def test_error_with_hint(self, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleOutput(ansi=False).error("Command 'x' is not defined.", hint="Did you mean 'y'?")
        err = capsys.readouterr().err
        assert "Error: Command 'x' is not defined." in err
        assert "Hint: Did you mean 'y'?" in err

    def test_warning_prefix(self, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleOutput(ansi=False).warn("Aborted by user.")
        assert "Warning: Aborted by user." in capsys.readouterr().err

    def test_markup_in_message_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleOutput(ansi=False).info("[bold]literal[/bold]")
        assert "[bold]literal[/bold]" in capsys.readouterr().err

    def test_nothing_on_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        output = ConsoleOutput(ansi=False)
        output.success("Done")
        output.show("? Name?")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Done" in captured.err
        assert "? Name?" in captured.err

    def test_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleOutput(ansi=False).table(["Command", "Description"], [["greet", "Say hi"]], title="Commands")
        err = capsys.readouterr().err
        assert "Commands" in err
        assert "greet" in err
        assert "Say hi" in err

    def test_ansi_toggle(self) -> None:
        output = ConsoleOutput()
        assert output.ansi is True
        output.ansi = False
        assert output.ansi is False

    def test_satisfies_prompt_display(self) -> None:
        assert isinstance(ConsoleOutput(), PromptDisplay)


class TestPlainFallback:
    def test_missing_rich(self, no_rich) -> None:
        with pytest.raises(EnvironmentError, match="rich is not installed"):
            get_rich_console()

    def test_error_falls_back_to_print(self, no_rich, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleOutput().error("Broken.", hint="Fix it.")
        assert capsys.readouterr().err == "Error: Broken.\nHint: Fix it.\n"

    def test_info_falls_back_to_print(self, no_rich, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleOutput().info("cmdsig 0.1.0")
        assert capsys.readouterr().err == "cmdsig 0.1.0\n"

    def test_table_falls_back_to_columns(self, no_rich, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleOutput().table(["Command", "Aliases"], [["greet", "hi"]], title="Available commands")
        assert capsys.readouterr().err.splitlines() == [
            "Available commands",
            "Command  Aliases",
            "-------  -------",
            "greet    hi     ",
        ]

    def test_show_falls_back_to_print(self, no_rich, capsys: pytest.CaptureFixture[str]) -> None:
        ConsoleOutput().show("? Continue? (y/n)")
        assert capsys.readouterr().err == "? Continue? (y/n)\n"
