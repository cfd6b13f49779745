"""Configuration providers for the exposure engine.

Operators tune exposure through environment variables, read at call time so
they can change between calls within the same run:

    KOZEN_ENV_PREFIX  default namespace prefix (read once, at construction)
    KOZEN_ENV_SCOPE   GLOBAL | LOCAL (default GLOBAL)
    KOZEN_ENV_LIMIT   maximum sanitized value length (default 1024)
    KOZEN_ENV_QUOTE   replacement glyph for double quotes (default "§")
    SHELL             the invoking user's shell, used to pick a profile file
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from .models import PersistenceScope

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "KOZEN_PL"
DEFAULT_LIMIT = 1024
DEFAULT_QUOTE = "§"

PREFIX_VAR = "KOZEN_ENV_PREFIX"
SCOPE_VAR = "KOZEN_ENV_SCOPE"
LIMIT_VAR = "KOZEN_ENV_LIMIT"
QUOTE_VAR = "KOZEN_ENV_QUOTE"


class ExposureSettings(BaseModel):
    """Configuration snapshot taken for a single call."""

    model_config = ConfigDict(frozen=True)

    prefix: str | None = Field(default=None, description="Configured namespace prefix")
    scope: PersistenceScope = Field(default=PersistenceScope.GLOBAL)
    limit: int = Field(default=DEFAULT_LIMIT, gt=0, description="Max value length")
    quote: str = Field(default=DEFAULT_QUOTE, description="Double-quote replacement")
    shell: str = Field(default="", description="Shell identifier, e.g. /bin/zsh")
    home: str = Field(default="", description="Home directory for profile lookup")


@runtime_checkable
class SettingsProvider(Protocol):
    """Anything that can produce a fresh settings snapshot."""

    def snapshot(self) -> ExposureSettings:
        """Return the settings in effect right now."""
        ...


class EnvSettingsProvider:
    """Reads settings from an environment mapping (os.environ by default).

    The mapping is consulted on every ``snapshot()`` call, never cached.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def snapshot(self) -> ExposureSettings:
        env = self.environ
        return ExposureSettings(
            prefix=env.get(PREFIX_VAR),
            scope=self._scope(env.get(SCOPE_VAR)),
            limit=self._limit(env.get(LIMIT_VAR)),
            quote=env.get(QUOTE_VAR, DEFAULT_QUOTE),
            shell=env.get("SHELL", ""),
            home=self._home(env),
        )

    @staticmethod
    def _scope(raw: str | None) -> PersistenceScope:
        try:
            return PersistenceScope.parse(raw)
        except ValueError:
            logger.warning(
                "settings: unknown %s=%r, using %s",
                SCOPE_VAR,
                raw,
                PersistenceScope.GLOBAL.value,
            )
            return PersistenceScope.GLOBAL

    @staticmethod
    def _limit(raw: str | None) -> int:
        if raw is None or not raw.strip():
            return DEFAULT_LIMIT
        try:
            limit = int(raw.strip())
        except ValueError:
            logger.warning(
                "settings: %s=%r is not an integer, using %d",
                LIMIT_VAR,
                raw,
                DEFAULT_LIMIT,
            )
            return DEFAULT_LIMIT
        return limit if limit > 0 else DEFAULT_LIMIT

    @staticmethod
    def _home(env: Mapping[str, str]) -> str:
        home = env.get("HOME") or env.get("USERPROFILE")
        return home if home else str(Path.home())


class StaticSettingsProvider:
    """Always returns the same snapshot."""

    def __init__(self, settings: ExposureSettings | None = None, **overrides) -> None:
        base = settings or ExposureSettings()
        self._settings = ExposureSettings(**{**base.model_dump(), **overrides})

    def snapshot(self) -> ExposureSettings:
        return self._settings
