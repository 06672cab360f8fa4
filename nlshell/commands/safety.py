"""Command safety classification for nlshell."""

import shlex
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from ..constants import (
    DEFAULT_MAX_COMMAND_LENGTH,
    DENYLIST_SUBSTRINGS,
    SAFE_COMMANDS,
    SHELL_METACHARACTERS,
)
from ..utils.logging import logger


class SafetyClass(Enum):
    """How a command candidate may be run."""
    SAFE_AUTO = "safe"
    NEEDS_CONFIRMATION = "prompts-user"
    BLOCKED = "blocked-by-length"


@dataclass
class SafetyVerdict:
    """Result of classifying one command candidate."""
    command: str
    classification: SafetyClass
    rule: str
    reasons: List[str] = field(default_factory=list)

    @property
    def auto_executable(self) -> bool:
        return self.classification is SafetyClass.SAFE_AUTO


# A policy rule inspects the command and returns the reasons it matched (empty = no match).
PolicyRule = Tuple[str, Callable[[str], List[str]], SafetyClass]


class CommandSafetyChecker:
    """Classifies commands through an ordered policy table; first match wins."""

    def __init__(self, max_command_length: int = DEFAULT_MAX_COMMAND_LENGTH,
                 extra_safe_commands: Optional[Iterable[str]] = None):
        """Initialize safety checker.

        Args:
            max_command_length: Commands longer than this are BLOCKED
            extra_safe_commands: User additions to the read-only allow-list
        """
        self.max_command_length = max_command_length
        self.denylist = [item.lower() for item in DENYLIST_SUBSTRINGS]
        self.metacharacters = list(SHELL_METACHARACTERS)
        self.safe_commands = set(SAFE_COMMANDS)
        self.safe_commands.update(cmd.strip() for cmd in (extra_safe_commands or []) if cmd.strip())

        self.policy: List[PolicyRule] = [
            ("length", self._check_length, SafetyClass.BLOCKED),
            ("denylist", self._check_denylist, SafetyClass.NEEDS_CONFIRMATION),
            ("metacharacters", self._check_metacharacters, SafetyClass.NEEDS_CONFIRMATION),
            ("allow-list", self._check_allow_list, SafetyClass.SAFE_AUTO),
        ]

    def classify(self, command: str) -> SafetyVerdict:
        """Classify a command candidate. Computed fresh on every call."""
        for rule_name, matcher, effect in self.policy:
            reasons = matcher(command)
            if reasons:
                logger.debug(f"Safety rule '{rule_name}' matched: {effect.value}")
                return SafetyVerdict(command, effect, rule_name, reasons)

        command_name = extract_command_name(command)
        return SafetyVerdict(
            command,
            SafetyClass.NEEDS_CONFIRMATION,
            "default",
            [f"Command '{command_name}' is not in the safe list"],
        )

    def _check_length(self, command: str) -> List[str]:
        if len(command) > self.max_command_length:
            return [f"Command is {len(command)} characters long (limit {self.max_command_length})"]
        return []

    def _check_denylist(self, command: str) -> List[str]:
        lowered = command.lower()
        return [f"Command references sensitive pattern '{item}'"
                for item in self.denylist if item in lowered]

    def _check_metacharacters(self, command: str) -> List[str]:
        found = [char for char in self.metacharacters if char in command]
        if found:
            return [f"Command contains shell metacharacters: {' '.join(found)}"]
        return []

    def _check_allow_list(self, command: str) -> List[str]:
        command_name = extract_command_name(command)
        if command_name in self.safe_commands:
            return [f"Command '{command_name}' is read-only"]
        return []


def extract_command_name(command: str) -> str:
    """Leading token of a command. Paths are kept, so './ls' is not 'ls'."""
    try:
        parts = shlex.split(command)
    except ValueError:
        parts = command.split()
    return parts[0] if parts else ""


def create_safety_checker(config: Optional[dict] = None) -> CommandSafetyChecker:
    """Create a command safety checker from configuration."""
    config = config or {}
    return CommandSafetyChecker(
        max_command_length=config.get("max_command_length", DEFAULT_MAX_COMMAND_LENGTH),
        extra_safe_commands=config.get("extra_safe_commands", []),
    )
