"""Infrastructure: the external editor behind ``edit`` prompts.

The buffer is handed to the user's editor through a temporary file and
read back once the editor process exits.

Rules
-----
* Editor lookup via :func:`shutil.which` before spawning anything.
* The temporary file is always removed.
* OS failures surface as :class:`~cmdsig.exceptions.EnvironmentError`.
"""

from __future__ import annotations

import logging
import os
import platform
import shlex
import shutil
import subprocess
import tempfile
from collections.abc import Mapping
from pathlib import Path

from cmdsig.exceptions import EnvironmentError

logger = logging.getLogger(__name__)


def resolve_editor_command(
    configured: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[str]:
    """Return the editor command line as an argv list.

    Precedence: *configured*, ``$VISUAL``, ``$EDITOR``, then a platform
    default (``notepad`` on Windows, ``vi`` elsewhere).
    """
    env = os.environ if environ is None else environ
    command = configured or env.get("VISUAL") or env.get("EDITOR")
    if not command:
        command = "notepad" if platform.system().lower() == "windows" else "vi"
    return shlex.split(command)


class SubprocessEditor:
    """Concrete :class:`~cmdsig.core.protocols.EditorLauncher`.

    Parameters
    ----------
    command:
        Editor command line; ``None`` resolves it from the environment
        on every call.
    suffix:
        Temporary file suffix, lets editors pick syntax highlighting.
    """

    def __init__(self, command: str | None = None, *, suffix: str = ".txt") -> None:
        self._command = command
        self._suffix = suffix

    def edit(self, initial: str) -> tuple[int, str]:
        """Open *initial* in the editor and return ``(status, content)``.

        Raises
        ------
        EnvironmentError
            When the editor executable cannot be found or started.
        """
        argv = resolve_editor_command(self._command)
        if not argv or shutil.which(argv[0]) is None:
            raise EnvironmentError(
                f"Editor {argv[0] if argv else ''!r} was not found on PATH.",
                hint="Set the VISUAL or EDITOR environment variable.",
            )

        fd, name = tempfile.mkstemp(prefix="cmdsig-", suffix=self._suffix, text=True)
        path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(initial)
            logger.debug("Launching editor %s on %s", argv, path)
            try:
                completed = subprocess.run([*argv, str(path)], check=False)
            except OSError as exc:
                raise EnvironmentError(f"Could not start editor {argv[0]!r}: {exc}") from exc
            logger.debug("Editor exited with status %s", completed.returncode)
            return completed.returncode, path.read_text(encoding="utf-8")
        finally:
            path.unlink(missing_ok=True)
