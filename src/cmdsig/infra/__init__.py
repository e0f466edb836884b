"""Infrastructure layer: terminal input and the external editor.

Rules
-----
* No imports from ``cli``.
* No user-facing output beyond what the terminal widgets draw.
* Every raw OS or third-party failure is re-raised as a
  :class:`~cmdsig.exceptions.CmdsigError` subclass.
"""

from cmdsig.infra.editor import SubprocessEditor, resolve_editor_command
from cmdsig.infra.input_sources import QuestionaryInputSource, ScriptedInputSource

__all__: list[str] = [
    "QuestionaryInputSource",
    "ScriptedInputSource",
    "SubprocessEditor",
    "resolve_editor_command",
]
