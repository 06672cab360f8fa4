"""Colour-coded console logging for nlshell."""

import sys
import datetime
from typing import Dict, TextIO, Tuple

from ..constants import (
    CLR_RESET, CLR_CYAN, CLR_BOLD_CYAN, CLR_GREEN, CLR_BOLD_GREEN,
    CLR_MAGENTA, CLR_BOLD_MAGENTA, CLR_YELLOW, CLR_BOLD_YELLOW,
    CLR_WHITE, CLR_BOLD_WHITE, CLR_RED, CLR_BOLD_RED
)

# (header colour, message colour) per level
LEVEL_COLORS: Dict[str, Tuple[str, str]] = {
    "System": (CLR_CYAN, CLR_BOLD_CYAN),
    "User": (CLR_GREEN, CLR_BOLD_GREEN),
    "Mode": (CLR_MAGENTA, CLR_BOLD_MAGENTA),
    "Error": (CLR_RED, CLR_BOLD_RED),
    "Warning": (CLR_YELLOW, CLR_BOLD_YELLOW),
    "Debug": (CLR_WHITE, CLR_BOLD_WHITE),
    "Raw": (CLR_WHITE, CLR_WHITE),
}


class Logger:
    """Leveled terminal logger.

    Diagnostics (Error, Warning, Raw) go to stderr so that command output and
    answers on stdout stay pipeable. Debug and Raw are off unless enabled.
    """

    STDERR_LEVELS = ("Error", "Warning", "Raw")

    def __init__(self, debug_enabled: bool = False, raw_enabled: bool = False):
        self.debug_enabled = debug_enabled
        self.raw_enabled = raw_enabled

    def set_debug(self, enabled: bool) -> None:
        self.debug_enabled = enabled

    def set_raw(self, enabled: bool) -> None:
        """Enable or disable raw LLM request/response dumps."""
        self.raw_enabled = enabled

    def is_enabled(self, level: str) -> bool:
        if level == "Debug":
            return self.debug_enabled
        if level == "Raw":
            return self.raw_enabled
        return True

    def log_message(self, level: str, message: str) -> None:
        """Print a message under a timestamped, coloured header.

        Continuation lines of a multi-line message are indented under the first.
        """
        if not self.is_enabled(level):
            return

        header_color, content_color = LEVEL_COLORS.get(level, (CLR_WHITE, CLR_BOLD_WHITE))
        stream: TextIO = sys.stderr if level in self.STDERR_LEVELS else sys.stdout

        prefix = f"[{datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}] [{level}]: "
        first, *rest = message.splitlines() or [""]

        print(f"{header_color}{prefix}{CLR_RESET}{content_color}{first}{CLR_RESET}", file=stream)
        for line in rest:
            print(f"{' ' * len(prefix)}{content_color}{line}{CLR_RESET}", file=stream)
        stream.flush()

    def system(self, message: str) -> None:
        self.log_message("System", message)

    def user(self, message: str) -> None:
        """Log a user decision (e.g. a declined command)."""
        self.log_message("User", message)

    def mode(self, message: str) -> None:
        """Log the strategy chosen for an instruction."""
        self.log_message("Mode", message)

    def error(self, message: str) -> None:
        self.log_message("Error", message)

    def warning(self, message: str) -> None:
        self.log_message("Warning", message)

    def debug(self, message: str) -> None:
        self.log_message("Debug", message)

    def raw(self, message: str) -> None:
        """Dump a raw provider payload when DEBUG_RAW_MESSAGES is on."""
        self.log_message("Raw", message)


# Global logger instance (configured by the application at startup)
logger = Logger()
