"""Process-wide mapping from command name to signature and handler.

The registry is filled once during start-up and only read afterwards;
there is no removal API.  It is constructed explicitly and handed to
the dispatcher rather than living in a module-level singleton.
"""

from __future__ import annotations

import difflib
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from cmdsig.core.models import CommandSignature
from cmdsig.core.protocols import CommandHandler
from cmdsig.core.signature_parser import parse
from cmdsig.exceptions import DuplicateCommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RegisteredCommand:
    """A signature paired with the handler that executes it."""

    signature: CommandSignature
    handler: CommandHandler
    aliases: tuple[str, ...] = ()
    description: str = ""


class CommandRegistry:
    """Name → :class:`RegisteredCommand` lookup with alias support."""

    def __init__(self) -> None:
        self._commands: dict[str, RegisteredCommand] = {}
        self._lookup: dict[str, RegisteredCommand] = {}

    def register(
        self,
        signature: CommandSignature | str,
        handler: CommandHandler,
        *,
        aliases: Sequence[str] = (),
        description: str = "",
    ) -> RegisteredCommand:
        """Register *handler* under *signature*.

        A string is parsed first, so a malformed expression fails here
        with :class:`~cmdsig.exceptions.SignatureSyntaxError`.

        Raises
        ------
        DuplicateCommandError
            If the name or any alias is already taken.
        """
        if isinstance(signature, str):
            signature = parse(signature)

        for name in (signature.name, *aliases):
            if name in self._lookup:
                raise DuplicateCommandError(name)
        if len(set(aliases)) != len(aliases) or signature.name in aliases:
            raise DuplicateCommandError(signature.name)

        entry = RegisteredCommand(
            signature=signature,
            handler=handler,
            aliases=tuple(aliases),
            description=description,
        )
        self._commands[signature.name] = entry
        for name in (signature.name, *aliases):
            self._lookup[name] = entry
        logger.debug("Registered command %s (aliases=%s)", signature.name, list(aliases))
        return entry

    def resolve(self, name: str) -> RegisteredCommand | None:
        """Return the command registered as *name* (or alias), else ``None``."""
        return self._lookup.get(name)

    def suggest(self, name: str, *, limit: int = 3) -> list[str]:
        """Return registered names and aliases close to *name*."""
        return difflib.get_close_matches(name, list(self._lookup), n=limit, cutoff=0.6)

    def names(self) -> list[str]:
        """Primary command names, sorted."""
        return sorted(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._lookup

    def __iter__(self) -> Iterator[RegisteredCommand]:
        return (self._commands[name] for name in self.names())

    def __len__(self) -> int:
        return len(self._commands)
