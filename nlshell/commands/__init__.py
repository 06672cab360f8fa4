"""Command execution and safety for nlshell."""

from .executor import CommandExecutor, CommandResult, create_command_executor
from .permissions import CommandPermissionManager, create_permission_manager
from .safety import (
    CommandSafetyChecker,
    SafetyClass,
    SafetyVerdict,
    create_safety_checker,
    extract_command_name,
)
from .gate import CommandGate, create_command_gate

__all__ = [
    "CommandExecutor",
    "CommandResult",
    "create_command_executor",
    "CommandPermissionManager",
    "create_permission_manager",
    "CommandSafetyChecker",
    "SafetyClass",
    "SafetyVerdict",
    "create_safety_checker",
    "extract_command_name",
    "CommandGate",
    "create_command_gate",
]
