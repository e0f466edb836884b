"""Core layer: signature parsing, binding, registry and prompt logic.

Rules
-----
* No ``print()`` calls; prompts render through a ``PromptDisplay``.
* No terminal, filesystem or subprocess access.
* No imports from ``cli`` or ``infra``.
* Everything here is deterministic given its injected collaborators.
"""

from cmdsig.core.binder import bind
from cmdsig.core.models import (
    ArgumentSpec,
    BoundInvocation,
    Choice,
    CommandSignature,
    FlagSpec,
    PromptKind,
    PromptSession,
    PromptState,
)
from cmdsig.core.prompt_engine import PromptEngine, Prompter
from cmdsig.core.protocols import CommandHandler, EditorLauncher, InputSource, PromptDisplay
from cmdsig.core.registry import CommandRegistry, RegisteredCommand
from cmdsig.core.signature_parser import parse, render, usage

__all__: list[str] = [
    "ArgumentSpec",
    "BoundInvocation",
    "Choice",
    "CommandHandler",
    "CommandRegistry",
    "CommandSignature",
    "EditorLauncher",
    "FlagSpec",
    "InputSource",
    "PromptDisplay",
    "PromptEngine",
    "PromptKind",
    "PromptSession",
    "PromptState",
    "Prompter",
    "RegisteredCommand",
    "bind",
    "parse",
    "render",
    "usage",
]
