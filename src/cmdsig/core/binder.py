"""Match invocation tokens against a command signature.

Binding is a pure, deterministic function of ``(signature, tokens)``:
the same inputs always produce the same :class:`BoundInvocation` or the
same error.  The signature is assumed well-formed (the parser already
enforced its structural rules).

Algorithm
---------
1. Walk the tokens once.  Tokens starting with ``--`` are flags and are
   never eligible for positional binding; a value-bearing flag consumes
   the following token.  Everything else is positional, kept in order.
2. Declared flags absent from the input resolve to their default,
   ``False`` (value-less) or ``None`` (value-bearing).
3. Positional tokens fill arguments in declaration order.
4. All keys are normalised to camel form.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence

from cmdsig.core.models import BoundInvocation, CommandSignature, FlagSpec
from cmdsig.core.signature_parser import FLAG_MARKER
from cmdsig.exceptions import (
    MissingArgumentError,
    MissingFlagValueError,
    UnexpectedArgumentError,
    UnknownFlagError,
)

logger = logging.getLogger(__name__)

_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off"})


def is_flag_token(token: str) -> bool:
    return token.startswith(FLAG_MARKER)


def bind(signature: CommandSignature, tokens: Sequence[str]) -> BoundInvocation:
    """Bind *tokens* to *signature*.

    Raises
    ------
    UnknownFlagError
        A flag token matches no declared flag.
    MissingFlagValueError
        A value-bearing flag is last, or followed by another flag.
    UnexpectedArgumentError
        Positional tokens remain after every argument is filled, or a
        value-less flag carries an inline value that is not boolean.
    MissingArgumentError
        A required argument has no positional token left.
    """
    flags, positionals = _bind_flags(signature, tokens)
    arguments = _bind_arguments(signature, positionals)
    logger.debug("Bound %s: arguments=%s flags=%s", signature.name, arguments, flags)
    return BoundInvocation(command=signature.name, arguments=arguments, flags=flags)


# ---------------------------------------------------------------------------
# Flags
# ---------------------------------------------------------------------------

def _bind_flags(
    signature: CommandSignature,
    tokens: Sequence[str],
) -> tuple[dict[str, str | bool | None], list[str]]:
    """Consume flag tokens; return resolved flags and leftover positionals."""
    passed: dict[str, str | bool] = {}
    positionals: list[str] = []
    index = 0

    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not is_flag_token(token):
            positionals.append(token)
            continue

        name, sep, inline = token[len(FLAG_MARKER):].partition("=")
        flag = signature.find_flag(name) if name else None
        if flag is None:
            raise UnknownFlagError(name)

        if flag.expects_value:
            if sep:
                if not inline:
                    raise MissingFlagValueError(flag.name)
                value: str | bool = inline
            elif index < len(tokens) and not is_flag_token(tokens[index]):
                value = tokens[index]
                index += 1
            else:
                raise MissingFlagValueError(flag.name)
        elif sep:
            value = _inline_boolean(flag, inline)
        else:
            value = True

        # Repeated flags: the last occurrence wins.
        passed[flag.key] = value

    resolved = {flag.key: passed.get(flag.key, flag.absent_value) for flag in signature.flags}
    return resolved, positionals


def _inline_boolean(flag: FlagSpec, text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise UnexpectedArgumentError(
        flag.name,
        message=f"Flag '--{flag.name}' does not take a value (got {text!r}).",
    )


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------

def _bind_arguments(
    signature: CommandSignature,
    positionals: Sequence[str],
) -> dict[str, str | None]:
    remaining = deque(positionals)
    resolved: dict[str, str | None] = {}

    for argument in signature.arguments:
        if remaining:
            resolved[argument.key] = remaining.popleft()
        elif argument.optional:
            resolved[argument.key] = argument.default
        else:
            raise MissingArgumentError(argument.name)

    if remaining:
        raise UnexpectedArgumentError(remaining[0])
    return resolved
