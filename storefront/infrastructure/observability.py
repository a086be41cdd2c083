"""Structured Logging — JSON formatter and setup for catalog/cart observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (operation, error_code, attempt, delay_ms, ...) surfaced when present
    - JSON format by default, human-readable text when log_format="text"

Design Decisions:
    - One JSON object per line: retry attempts, stale-fetch discards and cart
      rejections are correlated by request_token / product_id / error_code fields
      rather than by parsing message text
    - default=str: validation error tuples and enum codes serialize without custom hooks
    - setup_logging returns its handler so create_storefront can remove it on exit,
      keeping repeated storefront instances (and tests) from stacking handlers
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS: tuple[str, ...] = (
    "operation", "error_kind", "error_code", "status", "is_retryable",
    "retry_count", "attempt", "delay_ms", "duration_ms", "product_id",
    "errors", "request_token", "url", "delta",
)


class JSONFormatter(logging.Formatter):
    """Format logs as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Attach one stream handler to the root logger and return it."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
