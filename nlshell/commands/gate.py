"""Classify, confirm and execute a command candidate."""

from typing import Optional

from ..constants import CLR_BOLD_GREEN, CLR_GREEN, CLR_RESET
from ..utils.logging import logger
from .executor import CommandExecutor, CommandResult, create_command_executor
from .permissions import CommandPermissionManager, create_permission_manager
from .safety import CommandSafetyChecker, create_safety_checker


class CommandGate:
    """The command safety gate: classify -> authorize -> execute."""

    def __init__(self, checker: CommandSafetyChecker,
                 permissions: CommandPermissionManager,
                 executor: CommandExecutor):
        self.checker = checker
        self.permissions = permissions
        self.executor = executor

    @property
    def interactive(self) -> bool:
        return self.permissions.interactive

    def run(self, command: str, auto_confirm: bool = False,
            timeout: Optional[int] = None) -> CommandResult:
        """Run a command under the confirmation policy.

        Output is streamed live when interactive and printed once finished
        otherwise. A declined command returns a neutral aborted result.
        """
        print(f"{CLR_GREEN}Running: {CLR_RESET}{CLR_BOLD_GREEN}{command}{CLR_RESET}")

        verdict = self.checker.classify(command)
        logger.debug(f"Command classified as {verdict.classification.value} ({verdict.rule})")

        if not self.permissions.authorize(verdict, auto_confirm=auto_confirm):
            return CommandResult.aborted_result(command)

        print("Output:")
        result = self.executor.execute(command, stream=self.interactive, timeout=timeout)
        if not self.interactive and result.output:
            print(result.output)
        elif self.interactive and result.timed_out:
            print(result.output.splitlines()[-1])
        return result


def create_command_gate(config: dict, interactive: bool) -> CommandGate:
    """Build a gate from configuration."""
    return CommandGate(
        create_safety_checker(config),
        create_permission_manager(interactive, config),
        create_command_executor(config.get("command_timeout", 60)),
    )
