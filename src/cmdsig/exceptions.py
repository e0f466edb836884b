"""Custom exception hierarchy for cmdsig.

Every error the framework surfaces inherits from :class:`CmdsigError`
so the dispatcher boundary can render a clean message (and an optional
hint) without leaking stack traces.

Hierarchy
---------
CmdsigError
├── SignatureSyntaxError          registration time, fatal
├── DuplicateCommandError         registration time, fatal
├── UnknownCommandError           dispatch time
├── BindingError                  dispatch time, handler never invoked
│   ├── MissingArgumentError
│   ├── UnexpectedArgumentError
│   ├── UnknownFlagError
│   └── MissingFlagValueError
├── HandlerExecutionError         wraps anything raised by a handler
├── PromptCancelledError          recoverable by the issuing handler
└── EnvironmentError              missing optional dependency or editor
"""

from __future__ import annotations

from collections.abc import Sequence


class CmdsigError(Exception):
    """Base exception for all cmdsig errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the dispatcher can render it uniformly.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Registration ----------------------------------------------------------

class SignatureSyntaxError(CmdsigError):
    """Raised when a signature expression is malformed."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.expression: str | None = expression


class DuplicateCommandError(CmdsigError):
    """Raised when a command name or alias is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Command '{name}' is already registered.")
        self.name: str = name


# --- Dispatch --------------------------------------------------------------

class UnknownCommandError(CmdsigError):
    """Raised when the requested command is not in the registry."""

    def __init__(self, name: str, *, suggestions: Sequence[str] = ()) -> None:
        hint = None
        if suggestions:
            hint = "Did you mean " + ", ".join(f"'{s}'" for s in suggestions) + "?"
        super().__init__(f"Command '{name}' is not defined.", hint=hint)
        self.name: str = name
        self.suggestions: tuple[str, ...] = tuple(suggestions)


class BindingError(CmdsigError):
    """Base class for failures matching tokens against a signature.

    ``name`` is the offending argument or flag as declared (flags
    without their leading marker).
    """

    def __init__(self, message: str, *, name: str, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.name: str = name


class MissingArgumentError(BindingError):
    """Raised when a required argument has no positional token."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required argument '{name}'.", name=name)


class UnexpectedArgumentError(BindingError):
    """Raised for a positional token (or inline value) nothing accepts."""

    def __init__(self, name: str, *, message: str | None = None) -> None:
        super().__init__(message or f"Unexpected argument '{name}'.", name=name)


class UnknownFlagError(BindingError):
    """Raised when a flag token matches no declared flag."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown flag '--{name}'.", name=name)


class MissingFlagValueError(BindingError):
    """Raised when a value-bearing flag is not followed by a value."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing value for flag '--{name}'.", name=name)


class HandlerExecutionError(CmdsigError):
    """Raised when a command handler fails.

    The original exception is always chained as ``__cause__``.
    """

    def __init__(self, command: str, cause: BaseException) -> None:
        super().__init__(
            f"Command '{command}' failed: {type(cause).__name__}: {cause}",
            hint=getattr(cause, "hint", None),
        )
        self.command: str = command


# --- Prompts ---------------------------------------------------------------

class PromptCancelledError(CmdsigError):
    """Raised when the user interrupts a prompt or the editor aborts."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(CmdsigError):
    """Raised when a required runtime dependency is not available."""
