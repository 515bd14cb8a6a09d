import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Tuple


REQUEST_ID_CTX = ContextVar("request_id", default=None)

PACKAGE_LOGGER = "index_client"

# LogRecord attributes that never belong in the JSON payload as extras.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "request_id",
}


def _extra_fields(record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
    for key, value in record.__dict__.items():
        if key in _RESERVED_ATTRS or key.startswith("_"):
            continue
        yield key, value


class RequestIdFilter(logging.Filter):
    """Stamp records with the ID of the outgoing request, if one is in flight."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record: fixed fields first, then any ``extra=`` keys."""

    def format(self, record: logging.LogRecord) -> str:
        log_payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None)
        if request_id:
            log_payload["request_id"] = request_id

        if record.exc_info:
            log_payload["exception"] = self.formatException(record.exc_info)

        for key, value in _extra_fields(record):
            log_payload.setdefault(key, value)

        return json.dumps(log_payload, default=str)


def configure_logging(
    level: int | str = logging.INFO, logger_name: str = PACKAGE_LOGGER
) -> logging.Logger:
    """Emit the client's log records to stderr as JSON lines.

    Only ``logger_name`` is configured; root logging belongs to the host
    application. Calling this again replaces the handler installed earlier.
    """

    logger = logging.getLogger(logger_name)
    for existing in list(logger.handlers):
        if isinstance(existing.formatter, JsonFormatter):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIdFilter())

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
