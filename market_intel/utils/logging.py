"""
Root-logger setup for the ``market-intel`` CLI.

Library modules only ever do ``log = logging.getLogger(__name__)``; handlers
are attached here, once, by the CLI before a command runs.

Two line formats are available via ``[logging] json_format``:

  text: ``2026-10-18T15:00:00Z [INFO] market_intel.matching.composite: Ranked 8 buyers``
  json: ``{"ts": "...", "level": "INFO", "logger": "...", "msg": "...", "concept_id": "..."}``

Keys passed through ``extra=`` (``concept_id``, ``candidate`` ...) become
top-level JSON fields; the text format ignores them.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from market_intel.config import LoggingConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_STANDARD_RECORD_KEYS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime"}


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).strftime(LOG_DATE_FORMAT)


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record, with ``extra=`` keys merged in."""

    def format(self, record: logging.LogRecord) -> str:
        extras = {
            key: val
            for key, val in vars(record).items()
            if key not in _STANDARD_RECORD_KEYS and not key.startswith("_")
        }
        payload = {
            "ts": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            **extras,
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _UtcTextFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt=None) -> str:
        return _utc_timestamp(record.created)


def _make_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return _JsonLineFormatter()
    return _UtcTextFormatter(LOG_FORMAT)


def configure_logging(config: "LoggingConfig") -> None:
    """Replace the root logger's handlers according to ``config``.

    Always logs to stdout; also appends to ``config.log_file`` when it is
    non-empty, creating its directory first.
    """
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    formatter = _make_formatter(config.json_format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=handlers, force=True)
