"""Console log setup for the link-deps CLI."""

from __future__ import annotations

import json
import logging
import sys
from typing import TextIO

TAG = "[link-deps]"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_LEVEL_TAGS = {
    logging.WARNING: "[WARN]",
    logging.ERROR: "[ERROR]",
    logging.CRITICAL: "[ERROR]",
}


class TaggedFormatter(logging.Formatter):
    """Prefixes every line with the fixed tool tag, plus a level tag for problems."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return f"{TAG}{_LEVEL_TAGS.get(record.levelno, '')} {message}"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(
    level: str = "info", fmt: str = "text", stream: TextIO | None = None
) -> logging.Logger:
    """Attach a single console handler to the ``linkdeps`` logger."""
    logger = logging.getLogger("linkdeps")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter() if fmt == "json" else TaggedFormatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(_LEVELS.get(level, logging.INFO))
    return logger
