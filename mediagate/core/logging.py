"""Centralized logging configuration.

Vendor credentials travel in headers and, for Google, in the ``key`` query
parameter, so every record passes through ``SecretRedactingFilter`` before it
is formatted.
"""

import json
import logging
import re
import sys
from datetime import datetime, timezone

from mediagate.core.config import settings

# Record attributes set via ``extra=`` by the dispatcher
CONTEXT_FIELDS = ("kind", "provider", "adapter")

_SECRET_PATTERNS = [
    (re.compile(r"([?&]key=)[^&\s\"']+"), r"\1***"),
    (re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+"), r"\1***"),
    (re.compile(r"((?:xi-api-key|x-api-key)['\"]?\s*[:=]\s*['\"]?)[^'\"\s,}]+", re.IGNORECASE), r"\1***"),
]


def redact(text: str) -> str:
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SecretRedactingFilter(logging.Filter):
    """Mask API keys in the rendered message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        scrubbed = redact(message)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = None
        return True


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter for production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update({name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)})
        if record.exc_info and record.exc_info[1]:
            log_data["exception"] = redact(self.formatException(record.exc_info))
        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure the root logger; arguments default to ``settings.log_level`` / ``settings.log_json``."""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    use_json = settings.log_json if json_output is None else json_output

    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(SecretRedactingFilter())
    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.addHandler(handler)

    # httpx logs full request URLs at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(log_level if settings.app_debug else logging.WARNING)
