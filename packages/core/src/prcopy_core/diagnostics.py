"""Structured diagnostic sink used by every prcopy component."""

from __future__ import annotations

import logging

LOG_PREFIX = "[PR-Copy]"


def _format_context(context: dict) -> str:
    if not context:
        return ""
    return " " + ", ".join(f"{key}={value!r}" for key, value in context.items())


class Diagnostics:
    """Thin wrapper over a logging.Logger with keyword context.

    The context dict is rendered into the message and also attached to the
    log record as ``record.context`` so handlers (and tests) can read the
    values without parsing text.
    """

    def __init__(self, logger: logging.Logger | None = None, prefix: str = LOG_PREFIX):
        self._logger = logger or logging.getLogger("prcopy")
        self._prefix = prefix

    def log(self, message: str, **context) -> None:
        self._emit(logging.INFO, message, context)

    def debug(self, message: str, **context) -> None:
        self._emit(logging.DEBUG, message, context)

    def warn(self, message: str, **context) -> None:
        self._emit(logging.WARNING, message, context)

    def error(self, message: str, **context) -> None:
        self._emit(logging.ERROR, message, context)

    def _emit(self, level: int, message: str, context: dict) -> None:
        self._logger.log(
            level,
            "%s %s%s",
            self._prefix,
            message,
            _format_context(context),
            extra={"context": dict(context)},
        )
