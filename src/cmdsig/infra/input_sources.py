"""Input sources satisfying :class:`~cmdsig.core.protocols.InputSource`.

* :class:`QuestionaryInputSource` reads from the live terminal.
* :class:`ScriptedInputSource` replays a fixed sequence of answers, for
  tests and unattended runs.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import Any

from cmdsig.exceptions import EnvironmentError


def _import_questionary() -> Any:
    """Import questionary lazily for terminal input."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


class QuestionaryInputSource:
    """Read answers from the terminal via questionary.

    ``questionary``'s ``ask()`` returns ``None`` on Ctrl+C, which is
    exactly the interruption signal the prompt engine expects.
    """

    def read_line(self, prompt: str, *, secret: bool = False) -> str | None:
        questionary = _import_questionary()
        if secret:
            return questionary.password(prompt, qmark="").ask()
        return questionary.text(prompt, qmark="").ask()


class ScriptedInputSource:
    """Replay *answers* one per ``read_line`` call.

    A ``None`` entry simulates the user interrupting the prompt.  Running
    out of answers raises ``EOFError``, which the engine also treats as
    an interruption.

    Attributes
    ----------
    requests : list[tuple[str, bool]]
        ``(prompt, secret)`` for every read, in order.
    """

    def __init__(self, answers: Iterable[str | None]) -> None:
        self._answers: deque[str | None] = deque(answers)
        self.requests: list[tuple[str, bool]] = []

    @property
    def remaining(self) -> int:
        return len(self._answers)

    def read_line(self, prompt: str, *, secret: bool = False) -> str | None:
        self.requests.append((prompt, secret))
        if not self._answers:
            raise EOFError("No scripted answers left.")
        return self._answers.popleft()
