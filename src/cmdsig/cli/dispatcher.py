"""Top-level dispatch and the **sole error boundary** of the framework.

``Dispatcher.run(argv)`` resolves the command, binds its tokens, runs
the handler and maps every outcome to an exit code.  It never raises
and never exits the process; :meth:`cmdsig.cli.app.Application.serve`
is the one place that turns the returned code into ``sys.exit``.

Flow
----
1. Leading global options (``--env``, ``--no-ansi``, ``--version``,
   ``--help``) are split off and parsed with :mod:`argparse`.
2. No command → print the command listing, exit 0.
3. Unknown command → :class:`UnknownCommandError`, usage exit code.
4. ``<command> --help`` → per-command help, exit 0.
5. Binding errors → reported with the command's usage line.
6. Handler errors → wrapped in :class:`HandlerExecutionError`.
7. ``sys.exit()`` inside a handler → its code is returned, not raised.

``CMDSIG_ENV`` is set for the duration of one run and restored afterwards.
"""

from __future__ import annotations

import argparse
import asyncio
import inspect
import logging
import os
from collections.abc import Awaitable, Sequence
from typing import Any, NoReturn

from cmdsig.cli import exit_codes
from cmdsig.cli.console import ConsoleOutput
from cmdsig.cli.help import render_command_help, render_listing
from cmdsig.cli.logging_setup import configure_logging
from cmdsig.config import ENV_VAR, Settings
from cmdsig.core.binder import bind
from cmdsig.core.models import BoundInvocation
from cmdsig.core.registry import CommandRegistry, RegisteredCommand
from cmdsig.core.signature_parser import usage
from cmdsig.exceptions import (
    BindingError,
    CmdsigError,
    HandlerExecutionError,
    UnknownCommandError,
)
from cmdsig.version import __version__

logger = logging.getLogger(__name__)

_VALUE_OPTIONS = frozenset({"--env"})
_HELP_TOKENS = frozenset({"--help"})


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------

class _GlobalOptionParser(argparse.ArgumentParser):
    """argparse parser that reports errors instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise CmdsigError(f"Invalid global option: {message}")


def _build_parser(prog: str) -> argparse.ArgumentParser:
    parser = _GlobalOptionParser(prog=prog, add_help=False, allow_abbrev=False)
    parser.add_argument("--env", metavar="NAME", default=None)
    parser.add_argument("--no-ansi", action="store_true")
    parser.add_argument("--version", action="store_true")
    parser.add_argument("-h", "--help", action="store_true")
    return parser


def split_global_options(argv: Sequence[str]) -> tuple[list[str], list[str]]:
    """Split *argv* into leading global options and the command tokens.

    Everything from the first token that does not look like an option
    (the command name) onwards is left untouched.
    """
    index = 0
    while index < len(argv) and argv[index].startswith("-"):
        index += 2 if argv[index] in _VALUE_OPTIONS else 1
    index = min(index, len(argv))
    return list(argv[:index]), list(argv[index:])


# ---------------------------------------------------------------------------
# Dispatcher
# ---------------------------------------------------------------------------

class Dispatcher:
    """Run one command per invocation against an explicit registry.

    Parameters
    ----------
    registry:
        Commands registered during start-up; only read here.
    output:
        Output collaborator receiving every user-facing message.
    settings:
        Base settings; global options are applied on top per run.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        output: ConsoleOutput,
        *,
        settings: Settings | None = None,
        prog: str = "cmdsig",
        version: str = __version__,
    ) -> None:
        self._registry = registry
        self._output = output
        self._base_settings = settings or Settings()
        self.settings: Settings = self._base_settings
        self._prog = prog
        self._version = version
        self._parser = _build_parser(prog)

    def run(self, argv: Sequence[str]) -> int:
        """Dispatch *argv* (without the program name) and return an exit code."""
        previous_environment = os.environ.get(ENV_VAR)
        try:
            return self._dispatch(list(argv))
        except KeyboardInterrupt:
            self._output.warn("Aborted by user.")
            return exit_codes.KEYBOARD_INTERRUPT
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected dispatcher failure")
            self._output.error(
                f"Unexpected error. Please report this issue.\n  {type(exc).__name__}: {exc}"
            )
            return exit_codes.UNEXPECTED_ERROR
        finally:
            _restore_environment(previous_environment)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _dispatch(self, argv: list[str]) -> int:
        global_tokens, tokens = split_global_options(argv)
        try:
            options = self._parser.parse_args(global_tokens)
        except CmdsigError as exc:
            self._report(exc, hint=f"Run '{self._prog} --help' to list commands and options.")
            return exit_codes.USAGE_ERROR

        self._apply_settings(options)

        if options.version:
            self._output.info(f"{self._prog} {self._version}")
            return exit_codes.SUCCESS
        if options.help or not tokens:
            render_listing(self._registry, self._output, prog=self._prog, version=self._version)
            return exit_codes.SUCCESS

        name, *rest = tokens
        entry = self._registry.resolve(name)
        if entry is None:
            self._report(UnknownCommandError(name, suggestions=self._registry.suggest(name)))
            return exit_codes.USAGE_ERROR
        logger.debug("Resolved %r to command %s", name, entry.signature.name)

        if self._wants_help(entry, rest):
            render_command_help(entry, self._output, prog=self._prog)
            return exit_codes.SUCCESS

        try:
            invocation = bind(entry.signature, rest)
        except BindingError as exc:
            self._report(exc, hint=f"Usage: {self._prog} {usage(entry.signature)}")
            return exit_codes.USAGE_ERROR

        try:
            self._execute(entry, invocation)
        except HandlerExecutionError as exc:
            self._report(exc)
            return exit_codes.GENERAL_ERROR
        except SystemExit as exc:
            return self._exit_status(entry, exc)
        return exit_codes.SUCCESS

    def _apply_settings(self, options: argparse.Namespace) -> None:
        self.settings = self._base_settings.with_overrides(
            environment=options.env,
            no_ansi=options.no_ansi,
        )
        os.environ[ENV_VAR] = self.settings.environment
        self._output.ansi = self.settings.ansi
        configure_logging(self.settings.log_level, ansi=self.settings.ansi)

    @staticmethod
    def _wants_help(entry: RegisteredCommand, tokens: Sequence[str]) -> bool:
        if entry.signature.find_flag("help") is not None:
            return False
        return any(token in _HELP_TOKENS for token in tokens)

    def _execute(self, entry: RegisteredCommand, invocation: BoundInvocation) -> None:
        """Run the handler to completion, awaiting it when it is async."""
        name = entry.signature.name
        try:
            outcome = entry.handler.execute(invocation)
            if inspect.isawaitable(outcome):
                asyncio.run(_drive(outcome))
        except KeyboardInterrupt:
            raise
        except Exception as exc:
            logger.debug("Handler for %s raised %r", name, exc)
            raise HandlerExecutionError(name, exc) from exc

    def _exit_status(self, entry: RegisteredCommand, exc: SystemExit) -> int:
        """Map a handler's ``sys.exit()`` to an exit code instead of exiting."""
        code = exc.code
        logger.debug("Handler for %s requested exit %r", entry.signature.name, code)
        if code is None:
            return exit_codes.SUCCESS
        if isinstance(code, int):
            return code
        self._output.error(str(code))
        return exit_codes.GENERAL_ERROR

    def _report(self, exc: CmdsigError, *, hint: str | None = None) -> None:
        self._output.error(str(exc), hint=exc.hint or hint)


def _restore_environment(previous: str | None) -> None:
    if previous is None:
        os.environ.pop(ENV_VAR, None)
    else:
        os.environ[ENV_VAR] = previous


async def _drive(awaitable: Awaitable[Any]) -> Any:
    return await awaitable
