"""Protocols (interfaces) consumed by the core layer.

Core code depends ONLY on these protocols, never on concrete
terminals, editors, or command classes.  Any object with the right
methods satisfies them structurally (no inheritance required).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from cmdsig.core.models import BoundInvocation


@runtime_checkable
class CommandHandler(Protocol):
    """Contract for the application logic behind a command."""

    def execute(self, invocation: BoundInvocation) -> object:
        """Run the command with its bound arguments and flags.

        The return value is ignored unless it is awaitable, in which
        case the dispatcher drives it to completion first.  Any
        exception raised is reported as
        :class:`~cmdsig.exceptions.HandlerExecutionError`.
        """
        ...  # pragma: no cover


@runtime_checkable
class InputSource(Protocol):
    """Contract for whatever supplies answers to prompts."""

    def read_line(self, prompt: str, *, secret: bool = False) -> str | None:
        """Block until one line of input is available.

        Parameters
        ----------
        prompt:
            Short marker displayed next to the input cursor.
        secret:
            When ``True`` the input must not be echoed.

        Returns
        -------
        str | None
            The line without its terminator, or ``None`` when the
            user interrupted input.  Raising ``KeyboardInterrupt`` or
            ``EOFError`` is treated the same as returning ``None``.
        """
        ...  # pragma: no cover


@runtime_checkable
class PromptDisplay(Protocol):
    """Contract for rendering prompt questions and annotations."""

    def show(self, text: str) -> None:
        ...  # pragma: no cover


@runtime_checkable
class EditorLauncher(Protocol):
    """Contract for the external editing collaborator."""

    def edit(self, initial: str) -> tuple[int, str]:
        """Open *initial* in an editor and wait for it to exit.

        Returns
        -------
        tuple[int, str]
            The editor's exit status and the final buffer content.
        """
        ...  # pragma: no cover
