"""Application facade: register commands, then dispatch.

Typical use::

    app = Application("acme")

    @app.command("greet { name? : Name of the user to greet } { --shout : Upper-case it }")
    def greet(invocation):
        name = invocation.arguments["name"] or app.prompt.ask("Who should I greet?")
        app.output.success(name.upper() if invocation.flags["shout"] else name)

    if __name__ == "__main__":
        app.serve()

All process-wide state (registry, prompter, output, settings) is built
once here and handed to the :class:`~cmdsig.cli.dispatcher.Dispatcher`
explicitly.  :meth:`Application.serve` is the only place that exits
the process.
"""

from __future__ import annotations

import inspect
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import NoReturn, TypeVar

from cmdsig.cli.console import ConsoleOutput
from cmdsig.cli.dispatcher import Dispatcher
from cmdsig.config import Settings
from cmdsig.core.models import BoundInvocation, CommandSignature
from cmdsig.core.prompt_engine import Prompter
from cmdsig.core.protocols import CommandHandler, EditorLauncher, InputSource
from cmdsig.core.registry import CommandRegistry, RegisteredCommand
from cmdsig.infra.editor import SubprocessEditor
from cmdsig.infra.input_sources import QuestionaryInputSource
from cmdsig.version import __version__

F = TypeVar("F", bound=Callable[[BoundInvocation], object])


@dataclass(frozen=True, slots=True)
class FunctionHandler:
    """Adapt a plain ``fn(invocation)`` callable to :class:`CommandHandler`."""

    function: Callable[[BoundInvocation], object]

    def execute(self, invocation: BoundInvocation) -> object:
        return self.function(invocation)


class Application:
    """A named command-line application.

    Parameters
    ----------
    name:
        Program name shown in usage and help output.
    settings:
        Defaults to :meth:`Settings.from_env`.
    input_source, editor, output:
        Collaborators; terminal-backed implementations by default.
        Inject scripted ones for tests.
    """

    def __init__(
        self,
        name: str = "cmdsig",
        *,
        version: str = __version__,
        settings: Settings | None = None,
        input_source: InputSource | None = None,
        editor: EditorLauncher | None = None,
        output: ConsoleOutput | None = None,
    ) -> None:
        self.settings: Settings = settings or Settings.from_env()
        self.registry: CommandRegistry = CommandRegistry()
        self.output: ConsoleOutput = output or ConsoleOutput(ansi=self.settings.ansi)
        self.prompt: Prompter = Prompter(
            input_source or QuestionaryInputSource(),
            self.output,
            editor=editor or SubprocessEditor(self.settings.editor),
        )
        self.dispatcher: Dispatcher = Dispatcher(
            self.registry,
            self.output,
            settings=self.settings,
            prog=name,
            version=version,
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        signature: CommandSignature | str,
        handler: CommandHandler,
        *,
        aliases: Sequence[str] = (),
        description: str = "",
    ) -> RegisteredCommand:
        """Register any object with an ``execute(invocation)`` method."""
        return self.registry.register(
            signature,
            handler,
            aliases=aliases,
            description=description,
        )

    def command(
        self,
        expression: str,
        *,
        aliases: Sequence[str] = (),
        description: str | None = None,
    ) -> Callable[[F], F]:
        """Decorator registering a function as a command handler.

        The description defaults to the first line of the docstring.
        The decorated function is returned unchanged.
        """

        def decorator(function: F) -> F:
            summary = description
            if summary is None:
                doc = inspect.getdoc(function) or ""
                summary = doc.splitlines()[0] if doc else ""
            self.register(
                expression,
                FunctionHandler(function),
                aliases=aliases,
                description=summary,
            )
            return function

        return decorator

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    def run(self, argv: Sequence[str] | None = None) -> int:
        """Dispatch *argv* (defaults to ``sys.argv[1:]``) and return the exit code."""
        return self.dispatcher.run(sys.argv[1:] if argv is None else argv)

    def serve(self, argv: Sequence[str] | None = None) -> NoReturn:
        """Run and exit the process with the resulting code."""
        sys.exit(self.run(argv))
