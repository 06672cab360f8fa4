"""Helper utility functions for nlshell."""

import datetime
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..utils.logging import logger


def get_current_timestamp() -> str:
    """Returns the current timestamp in YYYY-MM-DD HH:MM:SS format."""
    return datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def get_session_timestamp() -> str:
    """Timestamp used to name the per-session snapshot files."""
    return datetime.datetime.now().strftime('%Y%m%d%H%M')


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run (newlines included) to one space and trim."""
    return " ".join(text.split())


def count_words(text: str) -> int:
    """Number of whitespace-separated words in text."""
    return len(text.split())


def last_words(text: str, limit: int) -> str:
    """The last ``limit`` words of text, joined by single spaces."""
    if limit <= 0:
        return ""
    return " ".join(text.split()[-limit:])


def get_current_context() -> Dict[str, str]:
    """Get current system context (time, directory, hostname)."""
    return {
        'current_time': get_current_timestamp(),
        'current_directory': os.getcwd(),
        'current_hostname': os.uname().nodename if hasattr(os, "uname") else "",
    }


def format_template_string(template: str, **kwargs) -> str:
    """Safely format a template string with context variables."""
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError) as e:
        logger.debug(f"Template left unformatted: {e}")
        return template


def parse_bool(value: Any, default: bool = False) -> bool:
    """Interpret yaml/env style booleans ("true", "1", "yes", True)."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off", ""):
        return False
    return default


def parse_list(value: Any) -> List[str]:
    """Accept a YAML list or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        items = str(value).split(",")
    return [item.strip() for item in items if item.strip()]


def safe_file_write(file_path: Path, content: str, description: Optional[str] = None) -> bool:
    """Safely write content to a file with error handling."""
    desc = description or f"file {file_path}"
    try:
        file_path.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote {desc}")
        return True
    except OSError as e:
        logger.warning(f"Failed to write {desc}: {e}")
        return False
