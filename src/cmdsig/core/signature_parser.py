"""Signature expression parser and canonical renderer.

A signature expression declares a command name followed by one
``{ ... }`` block per argument or flag::

    make:model
      { name : Name of the model }
      { table?=users : Backing table }
      { --migration : Also create a migration }
      { --connection=@value : Connection to use }

Grammar
-------
* The text before the first ``{`` is the command name.
* A block whose body starts with ``--`` declares a flag:
  ``--name``, ``--name=@value`` (value required, no default) or
  ``--name=default`` (value required, defaulted).
* Any other block declares an argument: ``name``, ``name?``,
  ``name=default`` or ``name?=default``.  A default implies optional.
* Text after the first unescaped ``:`` is the description.
* A backslash escapes the next character inside a block, so ``\\:``,
  ``\\{`` and ``\\}`` can appear in names, defaults and descriptions.

Every structural rule is checked here, once, so the binder can assume a
well-formed :class:`~cmdsig.core.models.CommandSignature`.
"""

from __future__ import annotations

import re
from typing import NoReturn

from cmdsig.core.models import VALUE_MARKER, ArgumentSpec, CommandSignature, FlagSpec
from cmdsig.exceptions import SignatureSyntaxError

FLAG_MARKER: str = "--"

_ENTRY_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.-]*$")
_ESCAPED = re.compile(r"\\(.)", re.DOTALL)
_SPECIALS = re.compile(r"([\\{}:])")
_DESCRIPTION_SPECIALS = re.compile(r"([\\{}])")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse(expression: str) -> CommandSignature:
    """Compile *expression* into a :class:`CommandSignature`.

    Raises
    ------
    SignatureSyntaxError
        On an empty or whitespace-containing command name, unbalanced
        braces, stray text between blocks, malformed entries, duplicate
        names, or a required argument declared after an optional one.
    """
    name, bodies = _scan(expression)

    arguments: list[ArgumentSpec] = []
    flags: list[FlagSpec] = []
    for body in bodies:
        head, description = _split_description(body)
        if not head:
            _fail(expression, "Empty entry '{}' in signature.")
        if head.startswith(FLAG_MARKER):
            flags.append(_parse_flag(expression, head, description))
        else:
            arguments.append(_parse_argument(expression, head, description))

    _check_unique(expression, "argument", [a.name for a in arguments], [a.key for a in arguments])
    _check_unique(expression, "flag", [f.name for f in flags], [f.key for f in flags])
    _check_order(expression, arguments)

    return CommandSignature(name=name, arguments=tuple(arguments), flags=tuple(flags))


def render(signature: CommandSignature) -> str:
    """Render *signature* back to its canonical expression.

    ``parse(render(sig)) == sig`` holds for every parsed signature.
    """
    parts = [signature.name]
    for argument in signature.arguments:
        head = _escape(argument.name)
        if argument.marked_optional:
            head += "?"
        if argument.default is not None:
            head += f"={_escape(argument.default)}"
        parts.append(_block(head, argument.description))
    for flag in signature.flags:
        head = FLAG_MARKER + _escape(flag.name)
        if flag.expects_value:
            default = VALUE_MARKER if flag.default is None else _escape(flag.default)
            head += f"={default}"
        parts.append(_block(head, flag.description))
    return " ".join(parts)


def usage(signature: CommandSignature) -> str:
    """Return a one-line usage synopsis, e.g. ``greet <name> [--log]``."""
    parts = [signature.name]
    for argument in signature.arguments:
        parts.append(f"[<{argument.name}>]" if argument.optional else f"<{argument.name}>")
    for flag in signature.flags:
        suffix = f" <{flag.name}>" if flag.expects_value else ""
        parts.append(f"[{FLAG_MARKER}{flag.name}{suffix}]")
    return " ".join(parts)


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------

def _scan(expression: str) -> tuple[str, list[str]]:
    """Split *expression* into the command name and raw block bodies."""
    name_chars: list[str] = []
    bodies: list[str] = []
    start: int | None = None
    escaped = False

    for index, char in enumerate(expression):
        if start is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == "{":
                _fail(expression, f"Nested '{{' at offset {index}; blocks cannot be nested.")
            elif char == "}":
                bodies.append(expression[start:index])
                start = None
            continue

        if char == "{":
            start = index + 1
        elif char == "}":
            _fail(expression, f"Unmatched '}}' at offset {index}.")
        elif bodies:
            if not char.isspace():
                _fail(expression, f"Unexpected text {char!r} at offset {index} between blocks.")
        else:
            name_chars.append(char)

    if start is not None:
        _fail(expression, f"Unterminated block opened at offset {start - 1}.")

    name = "".join(name_chars).strip()
    if not name:
        _fail(expression, "Signature is missing a command name.")
    if any(char.isspace() for char in name):
        _fail(expression, f"Command name '{name}' must not contain whitespace.")
    return name, bodies


def _split_description(body: str) -> tuple[str, str]:
    """Split a block body at its first unescaped ``:``."""
    escaped = False
    for index, char in enumerate(body):
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == ":":
            return _unescape(body[:index]).strip(), _unescape(body[index + 1:]).strip()
    return _unescape(body).strip(), ""


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------

def _parse_flag(expression: str, head: str, description: str) -> FlagSpec:
    name, sep, value = head[len(FLAG_MARKER):].partition("=")
    name = name.strip()
    _check_entry_name(expression, "flag", name)
    if not sep:
        return FlagSpec(name=name, description=description)

    value = value.strip()
    if not value:
        _fail(expression, f"Flag '--{name}' declares an empty default.")
    default = None if value == VALUE_MARKER else value
    return FlagSpec(name=name, description=description, expects_value=True, default=default)


def _parse_argument(expression: str, head: str, description: str) -> ArgumentSpec:
    name, sep, value = head.partition("=")
    name = name.strip()
    marked_optional = name.endswith("?")
    if marked_optional:
        name = name[:-1].rstrip()
    _check_entry_name(expression, "argument", name)
    if not sep:
        return ArgumentSpec(name=name, description=description, marked_optional=marked_optional)

    value = value.strip()
    if not value:
        _fail(expression, f"Argument '{name}' declares an empty default.")
    if value == VALUE_MARKER:
        _fail(
            expression,
            f"Argument '{name}' uses '{VALUE_MARKER}', which is only valid on flags.",
        )
    return ArgumentSpec(
        name=name,
        description=description,
        marked_optional=marked_optional,
        default=value,
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _check_entry_name(expression: str, kind: str, name: str) -> None:
    if not _ENTRY_NAME.match(name):
        _fail(expression, f"Invalid {kind} name {name!r}.")


def _check_unique(expression: str, kind: str, names: list[str], keys: list[str]) -> None:
    seen: dict[str, str] = {}
    for name, key in zip(names, keys):
        if key in seen:
            _fail(expression, f"Duplicate {kind} '{name}' (clashes with '{seen[key]}').")
        seen[key] = name


def _check_order(expression: str, arguments: list[ArgumentSpec]) -> None:
    first_optional: ArgumentSpec | None = None
    for argument in arguments:
        if argument.optional:
            first_optional = first_optional or argument
        elif first_optional is not None:
            _fail(
                expression,
                f"Required argument '{argument.name}' cannot follow "
                f"optional argument '{first_optional.name}'.",
            )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _fail(expression: str, message: str) -> NoReturn:
    raise SignatureSyntaxError(
        message,
        expression=expression,
        hint=f"Check the signature: {expression.strip()!r}",
    )


def _unescape(text: str) -> str:
    return _ESCAPED.sub(r"\1", text)


def _escape(text: str) -> str:
    return _SPECIALS.sub(r"\\\1", text)


def _block(head: str, description: str) -> str:
    if not description:
        return f"{{ {head} }}"
    escaped = _DESCRIPTION_SPECIALS.sub(r"\\\1", description)
    return f"{{ {head} : {escaped} }}"
