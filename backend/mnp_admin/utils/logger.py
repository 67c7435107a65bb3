"""JSON logging for the admin console

Every record carries the correlation id of the HTTP request (or feed
delivery) that produced it, plus any whitelisted ``extra`` keys.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from ..config.settings import Settings, get_settings


_correlation_id: ContextVar[Optional[str]] = ContextVar("mnp_correlation_id", default=None)

# Keys passed through ``extra=`` that end up in the JSON line
STRUCTURED_KEYS = (
    "request_id", "owner_key", "operator", "role", "status", "path",
    "principal_id", "reason", "count", "method", "status_code", "duration_ms",
)

LOG_FILE_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "pymongo": logging.WARNING,
    "apscheduler": logging.WARNING,
}


class JsonFormatter(logging.Formatter):
    """One JSON object per line"""
    
    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "ts": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        
        correlation_id = _correlation_id.get()
        if correlation_id:
            entry["correlation_id"] = correlation_id
        
        entry.update({
            key: getattr(record, key)
            for key in STRUCTURED_KEYS
            if getattr(record, key, None) is not None
        })
        
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        
        return json.dumps(entry, default=str)


def _file_handler(path: str, level: int = logging.NOTSET) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path, maxBytes=LOG_FILE_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Route the root logger to stdout, app.log and error.log"""
    settings = settings or get_settings()
    os.makedirs(settings.logs_path, exist_ok=True)
    
    formatter = JsonFormatter()
    handlers = [
        logging.StreamHandler(sys.stdout),
        _file_handler(os.path.join(settings.logs_path, "app.log")),
        _file_handler(os.path.join(settings.logs_path, "error.log"), logging.ERROR),
    ]
    
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(correlation_id: Optional[str]) -> None:
    _correlation_id.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return _correlation_id.get()
