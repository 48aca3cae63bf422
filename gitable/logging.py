"""Structured logging helpers: JSON lines, one object per record.

The level comes from ``GITABLE_LOG_LEVEL`` (default ``WARNING``); records may
carry the locator text they concern via ``extra={"locator": ...}``.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any

DEFAULT_LEVEL = "WARNING"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        locator = getattr(record, "locator", None)
        if locator is not None:
            payload["locator"] = str(locator)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _configured_level() -> str:
    level = os.environ.get("GITABLE_LOG_LEVEL", DEFAULT_LEVEL).strip().upper()
    return level if level in logging.getLevelNamesMapping() else DEFAULT_LEVEL


def get_logger(name: str = "gitable") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(_configured_level())
    return logger
