"""Key and value sanitization for shell-embedded environment variables."""

from __future__ import annotations

import re
from typing import Any

from pydantic import ValidationError

from . import codec
from .errors import InvalidInputError
from .models import SanitizedVariable
from .settings import EnvSettingsProvider, SettingsProvider

# Raw CR/LF/TAB plus their already-escaped two-character forms.
_CONTROL_RE = re.compile(r"(\r\n|\\r\\n|\r|\n|\\r|\\n|\t|\\t)")
_SPACE_RE = re.compile(r"\s+")


class Sanitizer:
    """Turns raw keys and values into SanitizedVariable instances.

    The value limit and quote glyph come from the settings provider and are
    re-read on every call.
    """

    def __init__(
        self,
        settings: SettingsProvider | None = None,
        prefix: str | None = None,
    ) -> None:
        self._settings = settings or EnvSettingsProvider()
        self._prefix = prefix.strip().upper() if prefix is not None else None

    @property
    def prefix(self) -> str | None:
        return self._prefix

    def sanitize_key(self, raw_key: str, prefix: str | None = None) -> str:
        """Namespace a key as PREFIX_KEY, or pass it through when no prefix applies.

        An explicit ``prefix`` wins over the engine prefix; an explicit empty
        string disables namespacing for the call.
        """
        resolved = prefix.strip().upper() if prefix is not None else self._prefix
        if not resolved:
            return raw_key
        return f"{resolved}_{raw_key.strip().upper()}"

    def sanitize_value(self, raw_value: Any) -> str:
        settings = self._settings.snapshot()
        value = codec.encode(raw_value)
        value = _CONTROL_RE.sub(" ", value)
        value = _SPACE_RE.sub(" ", value)
        value = value.replace('"', settings.quote).strip()
        return value[: settings.limit]

    def sanitize(
        self, raw_key: Any, raw_value: Any, prefix: str | None = None
    ) -> SanitizedVariable:
        """Sanitize one entry. Raises InvalidInputError for unusable keys."""
        key = self.sanitize_key(str(raw_key), prefix)
        try:
            return SanitizedVariable(key=key, value=self.sanitize_value(raw_value))
        except ValidationError as exc:
            raise InvalidInputError(
                f"Invalid environment variable name {key!r} (from key {raw_key!r})",
                key=str(raw_key),
            ) from exc
