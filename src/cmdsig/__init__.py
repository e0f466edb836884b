"""cmdsig: signature-driven command framework with interactive prompts.

Commands are declared with a compact signature expression, bound against
invocation tokens, and dispatched through a single error boundary.
"""

from cmdsig.cli.app import Application
from cmdsig.core.models import BoundInvocation, CommandSignature
from cmdsig.core.signature_parser import parse
from cmdsig.version import __version__

__all__: list[str] = [
    "Application",
    "BoundInvocation",
    "CommandSignature",
    "__version__",
    "parse",
]
