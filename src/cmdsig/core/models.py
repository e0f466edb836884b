"""Domain models for cmdsig.

Signature models are **frozen** dataclasses created once at
registration time and read-only afterwards.  :class:`BoundInvocation`
is created per dispatch.  :class:`PromptSession` is the one mutable
model: it carries the state of a single interactive question.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from cmdsig.utils.casing import camel_key

VALUE_MARKER: str = "@value"
"""Signature placeholder for a flag value with no default."""


def _check_default(owner: str, default: str | None) -> None:
    """Reject defaults that a signature expression cannot spell."""
    if default is None:
        return
    if not default or default != default.strip():
        raise ValueError(f"{owner} cannot have an empty or space-padded default.")
    if default == VALUE_MARKER:
        raise ValueError(f"{owner} cannot use '{VALUE_MARKER}' as a default.")


# ---------------------------------------------------------------------------
# Signature
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ArgumentSpec:
    """A positional input declared in a signature."""

    name: str
    """Argument name as written in the signature."""

    description: str = ""
    """Free text shown in help output."""

    marked_optional: bool = False
    """Whether the signature carries the ``?`` marker."""

    default: str | None = None
    """Concrete default value, or ``None``."""

    def __post_init__(self) -> None:
        _check_default(f"Argument '{self.name}'", self.default)

    @property
    def optional(self) -> bool:
        """A default implies optionality even without the ``?`` marker."""
        return self.marked_optional or self.default is not None

    @property
    def key(self) -> str:
        return camel_key(self.name)


@dataclass(frozen=True, slots=True)
class FlagSpec:
    """A named, order-independent input declared in a signature."""

    name: str
    """Flag name without the leading ``--`` marker."""

    description: str = ""

    expects_value: bool = False
    """``True`` when the flag consumes a value."""

    default: str | None = None
    """Value used when a value-bearing flag is declared but not passed."""

    def __post_init__(self) -> None:
        if self.default is None:
            return
        if not self.expects_value:
            raise ValueError(f"Flag '--{self.name}' takes no value, so it cannot have a default.")
        _check_default(f"Flag '--{self.name}'", self.default)

    @property
    def key(self) -> str:
        return camel_key(self.name)

    @property
    def absent_value(self) -> str | bool | None:
        """Resolved value when the flag does not appear in the input."""
        if self.default is not None:
            return self.default
        return None if self.expects_value else False


@dataclass(frozen=True, slots=True)
class CommandSignature:
    """Structured form of a signature expression.

    ``arguments`` is ordered (positional binding order).  ``flags`` keeps
    declaration order for help output only; binding never depends on it.
    """

    name: str
    arguments: tuple[ArgumentSpec, ...] = ()
    flags: tuple[FlagSpec, ...] = ()

    @property
    def namespace(self) -> str | None:
        """Text before the first ``:`` of the name, if any."""
        head, sep, _ = self.name.partition(":")
        return head if sep else None

    def find_flag(self, name: str) -> FlagSpec | None:
        """Look up a flag by any spelling of its name."""
        key = camel_key(name)
        for flag in self.flags:
            if flag.key == key:
                return flag
        return None


# ---------------------------------------------------------------------------
# Binding result
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BoundInvocation:
    """Arguments and flags resolved for a single dispatch.

    Both mappings are read-only and keyed by camel form.
    """

    command: str
    arguments: Mapping[str, str | None] = field(default_factory=dict)
    flags: Mapping[str, str | bool | None] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", MappingProxyType(dict(self.arguments)))
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))

    def argument(self, name: str) -> str | None:
        """Return an argument value by any spelling of its name."""
        return self.arguments[camel_key(name)]

    def flag(self, name: str) -> str | bool | None:
        """Return a flag value by any spelling of its name."""
        return self.flags[camel_key(name)]


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

class PromptKind(enum.Enum):
    FREE_TEXT = "free-text"
    CONFIRM = "confirm"
    SECURE = "secure"
    SINGLE_CHOICE = "single-choice"
    MULTI_CHOICE = "multi-choice"
    EXTERNAL_EDITOR = "external-editor"


class PromptState(enum.Enum):
    IDLE = "idle"
    RENDERING = "rendering"
    AWAITING_INPUT = "awaiting-input"
    VALIDATING = "validating"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Choice:
    """One selectable entry of a choice prompt."""

    label: str
    """Text shown to the user."""

    value: Hashable
    """Value yielded when the entry is selected."""


Validator = Callable[[str], bool | str]
"""Returns ``True`` to accept, or an error message to reject."""


@dataclass(slots=True)
class PromptSession:
    """State of one interactive question.

    Mutated only by :class:`~cmdsig.core.prompt_engine.PromptEngine`.
    """

    kind: PromptKind
    text: str
    choices: tuple[Choice, ...] = ()
    preselected: frozenset[Hashable] = frozenset()
    default: Any = None
    validate: Validator | None = None
    state: PromptState = PromptState.IDLE
    error: str | None = None
    """Annotation from the last failed validation, shown on re-render."""

    selected: set[Hashable] = field(default_factory=set)
    """Working selection of a multi-choice prompt."""

    result: Any = None
