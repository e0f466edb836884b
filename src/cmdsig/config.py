"""Process settings resolved from the environment.

Global command-line options (``--env``, ``--no-ansi``) are applied on
top of these values by the dispatcher; nothing here reads ``argv``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

ENV_VAR: str = "CMDSIG_ENV"
"""Environment variable holding the execution environment name."""

LOG_LEVEL_VAR: str = "CMDSIG_LOG_LEVEL"

DEFAULT_ENVIRONMENT: str = "development"


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable runtime settings for one process invocation."""

    environment: str = DEFAULT_ENVIRONMENT
    """Execution environment name (``development``, ``test``, ...)."""

    ansi: bool = True
    """Whether terminal output may carry colour and styling."""

    log_level: str = "WARNING"
    """Level name for the ``cmdsig`` logger."""

    editor: str | None = None
    """Command used for external-editor prompts, or ``None``."""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from *environ* (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(
            environment=env.get(ENV_VAR) or DEFAULT_ENVIRONMENT,
            ansi="NO_COLOR" not in env,
            log_level=(env.get(LOG_LEVEL_VAR) or "WARNING").upper(),
            editor=env.get("VISUAL") or env.get("EDITOR") or None,
        )

    def with_overrides(
        self,
        *,
        environment: str | None = None,
        no_ansi: bool = False,
    ) -> Settings:
        """Return a copy with global command-line options applied."""
        updated = self
        if environment:
            updated = replace(updated, environment=environment)
        if no_ansi:
            updated = replace(updated, ansi=False)
        return updated
