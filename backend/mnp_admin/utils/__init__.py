"""Utility modules"""
from .logger import get_logger, setup_logging, get_correlation_id, set_correlation_id
from .idgen import generate_correlation_id, generate_request_id
from .time import utc_now, format_iso, parse_iso, resolve_timestamp

__all__ = [
    "get_logger",
    "setup_logging",
    "get_correlation_id",
    "set_correlation_id",
    "generate_correlation_id",
    "generate_request_id",
    "utc_now",
    "format_iso",
    "parse_iso",
    "resolve_timestamp",
]
