"""Usage listing and per-command help.

Pure presentation: everything is derived from the registry and the
parsed signatures, then handed to the output collaborator.
"""

from __future__ import annotations

from collections import defaultdict

from cmdsig.cli.console import ConsoleOutput
from cmdsig.core.models import CommandSignature
from cmdsig.core.registry import CommandRegistry, RegisteredCommand
from cmdsig.core.signature_parser import usage

GLOBAL_OPTIONS: tuple[tuple[str, str], ...] = (
    ("--env <name>", "Override the execution environment"),
    ("--no-ansi", "Disable colours and styling"),
    ("--version", "Print the version and exit"),
    ("-h, --help", "List available commands"),
)


# ---------------------------------------------------------------------------
# Grouping (pure)
# ---------------------------------------------------------------------------

def group_by_namespace(registry: CommandRegistry) -> list[tuple[str | None, list[RegisteredCommand]]]:
    """Return commands grouped by namespace, root commands first."""
    groups: dict[str | None, list[RegisteredCommand]] = defaultdict(list)
    for entry in registry:
        groups[entry.signature.namespace].append(entry)
    ordered = sorted(groups, key=lambda ns: (ns is not None, ns or ""))
    return [(namespace, groups[namespace]) for namespace in ordered]


def _default_text(value: object) -> str:
    return "" if value is None or value is False else str(value)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_listing(registry: CommandRegistry, output: ConsoleOutput, *, prog: str, version: str) -> None:
    """Print the global usage line, global options and every command."""
    output.info(f"{prog} {version}")
    output.info(f"Usage: {prog} [global options] <command> [arguments] [flags]")
    output.table(["Option", "Description"], [list(row) for row in GLOBAL_OPTIONS], title="Global options")

    if not len(registry):
        output.info("No commands are registered.")
        return

    for namespace, entries in group_by_namespace(registry):
        rows = [
            [entry.signature.name, ", ".join(entry.aliases), entry.description]
            for entry in entries
        ]
        output.table(["Command", "Aliases", "Description"], rows, title=namespace or "Available commands")


def render_command_help(entry: RegisteredCommand, output: ConsoleOutput, *, prog: str) -> None:
    """Print usage, arguments and flags for one command."""
    signature: CommandSignature = entry.signature
    output.info(f"Usage: {prog} {usage(signature)}")
    if entry.description:
        output.info(entry.description)

    if signature.arguments:
        output.table(
            ["Argument", "Description", "Default"],
            [
                [
                    argument.name + ("" if not argument.optional else " (optional)"),
                    argument.description,
                    _default_text(argument.default),
                ]
                for argument in signature.arguments
            ],
            title="Arguments",
        )
    if signature.flags:
        output.table(
            ["Flag", "Description", "Default"],
            [
                [
                    f"--{flag.name}" + (" <value>" if flag.expects_value else ""),
                    flag.description,
                    _default_text(flag.default),
                ]
                for flag in signature.flags
            ],
            title="Flags",
        )
