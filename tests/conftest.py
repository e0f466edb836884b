"""Shared pytest fixtures and configuration for the cmdsig test suite.

Guidelines
----------
* No real terminal: prompts are driven by ``ScriptedInputSource``.
* No real editor or subprocess: the editor boundary is mocked.
* Tests must not leak environment changes (``CMDSIG_ENV`` is pinned).
"""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from cmdsig.config import ENV_VAR
from cmdsig.core.models import BoundInvocation
from cmdsig.core.prompt_engine import Prompter
from cmdsig.infra.input_sources import ScriptedInputSource


class RecordingDisplay:
    """``PromptDisplay`` that keeps every rendered frame."""

    def __init__(self) -> None:
        self.frames: list[str] = []

    def show(self, text: str) -> None:
        self.frames.append(text)


class FakeEditor:
    """``EditorLauncher`` returning canned ``(status, content)`` results."""

    def __init__(self, results: Iterable[tuple[int, str]]) -> None:
        self._results = list(results)
        self.buffers: list[str] = []

    def edit(self, initial: str) -> tuple[int, str]:
        self.buffers.append(initial)
        return self._results.pop(0)


class RecordingHandler:
    """``CommandHandler`` that records invocations and optionally fails."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.calls: list[BoundInvocation] = []
        self.error = error

    def execute(self, invocation: BoundInvocation) -> None:
        self.calls.append(invocation)
        if self.error is not None:
            raise self.error


class RecordingOutput:
    """Output collaborator that records messages instead of printing."""

    def __init__(self) -> None:
        self.ansi = True
        self.messages: list[tuple[str, str, str | None]] = []
        self.tables: list[tuple[str | None, list[str], list[list[str]]]] = []
        self.frames: list[str] = []

    def log(self, level: str, message: str, *, hint: str | None = None) -> None:
        self.messages.append((level, message, hint))

    def error(self, message: str, *, hint: str | None = None) -> None:
        self.log("error", message, hint=hint)

    def warn(self, message: str, *, hint: str | None = None) -> None:
        self.log("warn", message, hint=hint)

    def info(self, message: str) -> None:
        self.log("info", message)

    def success(self, message: str) -> None:
        self.log("success", message)

    def table(self, header, rows, *, title=None) -> None:
        self.tables.append((title, list(header), [list(row) for row in rows]))

    def show(self, text: str) -> None:
        self.frames.append(text)

    def of(self, level: str) -> list[str]:
        """Messages logged at *level*, in order."""
        return [message for kind, message, _ in self.messages if kind == level]

    def hints(self) -> list[str | None]:
        return [hint for _, _, hint in self.messages]


@pytest.fixture(autouse=True)
def _pinned_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(ENV_VAR, "test")
    monkeypatch.delenv("NO_COLOR", raising=False)


@pytest.fixture
def output() -> RecordingOutput:
    return RecordingOutput()


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def make_prompter(display: RecordingDisplay):
    """Factory: ``make_prompter(["answer", ...], editor=None)``."""

    def _make(
        answers: Iterable[str | None],
        *,
        editor: FakeEditor | None = None,
    ) -> tuple[Prompter, ScriptedInputSource]:
        source = ScriptedInputSource(answers)
        return Prompter(source, display, editor=editor), source

    return _make
