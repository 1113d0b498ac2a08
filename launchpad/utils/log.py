from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

ROOT_LOGGER = "launchpad"

# LogRecord attributes that are not user supplied `extra=` fields
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line. Fields passed through ``extra=`` are merged in,
    e.g. logger.info("tier served", extra={"tier": "primary", "kind": "new"}).
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO", json_lines: bool = False) -> logging.Logger:
    """Attach a single stdout handler to the ``launchpad`` logger tree."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    # idempotent under uvicorn --reload and repeated app construction in tests
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        logger.addHandler(handler)
    for handler in logger.handlers:
        if json_lines:
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s | %(message)s")
            )

    logger.propagate = False
    return logger
