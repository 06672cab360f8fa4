"""Utility functions and classes for nlshell."""

from .logging import logger, Logger
from .helpers import (
    get_current_timestamp,
    get_session_timestamp,
    get_current_context,
    format_template_string,
    collapse_whitespace,
    count_words,
    last_words,
    parse_bool,
    parse_list,
    safe_file_write,
)

__all__ = [
    "logger",
    "Logger",
    "get_current_timestamp",
    "get_session_timestamp",
    "get_current_context",
    "format_template_string",
    "collapse_whitespace",
    "count_words",
    "last_words",
    "parse_bool",
    "parse_list",
    "safe_file_write",
]
