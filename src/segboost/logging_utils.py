from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import Settings, get_settings

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Training progress attached through ``logger.debug(..., extra={...})``
PROGRESS_FIELDS = ("iteration", "margin", "feature", "instances")


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record.

    Training progress passed as ``extra`` (see ``PROGRESS_FIELDS``) becomes
    top-level keys so iteration logs can be filtered without parsing text.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - simple override
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "thread": record.threadName,
        }
        for key in PROGRESS_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        # Feature names are mostly CJK text
        return json.dumps(payload, ensure_ascii=False, default=str)


def _make_formatter(settings: Settings) -> logging.Formatter:
    if settings.log_format == "json":
        return JsonLogFormatter()
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)


def _make_handler(log_file: Optional[str]) -> logging.Handler:
    if not log_file:
        return logging.StreamHandler(sys.stderr)
    parent = os.path.dirname(log_file)
    if parent:
        os.makedirs(parent, exist_ok=True)
    return logging.FileHandler(log_file, encoding="utf-8")


def configure_logging(override_level: Optional[str] = None, force: bool = False) -> None:
    """Install the SegBoost root handler described by the current settings.

    When the root logger already has handlers (an embedding application, or
    pytest), only the level is adjusted unless ``force`` is set.
    """
    settings = get_settings()
    level = getattr(logging, (override_level or settings.log_level).upper(), logging.INFO)
    root_logger = logging.getLogger()

    if root_logger.handlers and not force:
        root_logger.setLevel(level)
        return

    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    handler = _make_handler(settings.log_file)
    handler.setFormatter(_make_formatter(settings))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger("sklearn").setLevel(logging.WARNING)
