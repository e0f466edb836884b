"""Logging configuration for the ``cmdsig`` logger tree.

Library modules only create loggers; handlers are installed here, once
per dispatch, by the CLI layer.
"""

from __future__ import annotations

import logging

HANDLER_NAME: str = "cmdsig-console"


def configure_logging(level: str = "WARNING", *, ansi: bool = True) -> logging.Logger:
    """Attach a single stderr handler to the ``cmdsig`` logger.

    Uses :class:`rich.logging.RichHandler` when Rich is importable and a
    plain :class:`logging.StreamHandler` otherwise.  Calling this again
    replaces the previous handler instead of stacking another one.
    """
    logger = logging.getLogger("cmdsig")
    for existing in list(logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            logger.removeHandler(existing)

    handler: logging.Handler
    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    else:
        console = Console(stderr=True, color_system="auto" if ansi else None)
        handler = RichHandler(console=console, show_path=False, markup=False)

    handler.set_name(HANDLER_NAME)
    logger.addHandler(handler)
    numeric = logging.getLevelName(level.upper())
    logger.setLevel(numeric if isinstance(numeric, int) else logging.WARNING)
    return logger
