"""
Palettesmith Structured Logging
loguru sink configured once from config; every record carries the service
name plus whatever the caller passes in ``extra``.
"""
import sys
from typing import Any, Dict, Optional

from loguru import logger as _loguru

from palettesmith.config import config

SERVICE_NAME = "palettesmith"
TEXT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[service]} | {message} | {extra}"


class StructuredLogger:
    """Thin facade over loguru taking an optional dict of structured fields."""

    def __init__(self, level: str = config.LOG_LEVEL, json_output: bool = config.LOG_JSON):
        _loguru.remove()
        _loguru.add(sys.stdout, format=TEXT_FORMAT, level=level.upper(), serialize=json_output)
        self._bound = _loguru.bind(service=SERVICE_NAME)

    def _emit(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        target = self._bound.bind(**extra) if extra else self._bound
        target.log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Used for silent domain fallbacks (unknown modes, black/white text)."""
        self._emit("DEBUG", message, extra)


_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create the process-wide logger."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger


logger = get_logger()
