"""Structured logger collaborator.

The exposer reports through any object with ``info(record)`` and
``error(record)`` taking dicts shaped ``{flow?, src, message, data?}``.
It calls the sink synchronously and never awaits or retries it.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StructuredLogger(Protocol):
    """Sink for structured observability records."""

    def info(self, record: dict[str, Any]) -> None: ...

    def error(self, record: dict[str, Any]) -> None: ...


class LoggingSink:
    """Forwards structured records to a stdlib logger.

    ``flow``, ``src`` and ``data`` travel in ``extra`` so handlers and
    formatters can pick them up.
    """

    def __init__(self, logger_name: str = "kozen_env") -> None:
        self._logger = logging.getLogger(logger_name)

    def info(self, record: dict[str, Any]) -> None:
        self._emit(logging.INFO, record)

    def error(self, record: dict[str, Any]) -> None:
        self._emit(logging.ERROR, record)

    def _emit(self, level: int, record: dict[str, Any]) -> None:
        src = record.get("src", "")
        flow = record.get("flow")
        self._logger.log(
            level,
            "[%s]%s %s",
            src,
            f" flow={flow}" if flow else "",
            record.get("message", ""),
            extra={"flow": flow, "src": src, "data": record.get("data")},
        )
