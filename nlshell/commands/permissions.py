"""Confirmation policy for commands that are not auto-executable."""

import sys
import time
from typing import Callable, Optional

from ..constants import (
    CLR_BOLD_YELLOW, CLR_RED, CLR_RESET, CLR_YELLOW,
    CONFIRMATION_GRACE_SECONDS,
)
from ..utils.logging import logger
from .safety import SafetyClass, SafetyVerdict


class CommandPermissionManager:
    """Decides whether a classified command may run.

    Interactive sessions ask the user. Unattended runs (stdin not a terminal)
    get an audible countdown that Ctrl+C cancels, or a refusal when
    strict warnings are enabled.
    """

    def __init__(self,
                 interactive: bool,
                 strict_warnings: bool = False,
                 grace_seconds: int = CONFIRMATION_GRACE_SECONDS,
                 input_func: Callable[[str], str] = input,
                 sleep_func: Callable[[float], None] = time.sleep):
        """Initialize permission manager.

        Args:
            interactive: Whether a user can answer a prompt
            strict_warnings: Refuse unconfirmed commands when not interactive
            grace_seconds: Length of the unattended countdown
            input_func: Prompt reader (injected by tests)
            sleep_func: Delay function (injected by tests)
        """
        self.interactive = interactive
        self.strict_warnings = strict_warnings
        self.grace_seconds = grace_seconds
        self.input_func = input_func
        self.sleep_func = sleep_func

    def authorize(self, verdict: SafetyVerdict, auto_confirm: bool = False) -> bool:
        """Return True when the command may run.

        Args:
            verdict: Safety classification of the command
            auto_confirm: Set by the /run directive; skips every prompt
        """
        if auto_confirm or verdict.auto_executable:
            print("Auto-proceeding")
            return True

        self._print_reasons(verdict)

        if not self.interactive:
            if self.strict_warnings:
                logger.warning("Strict warnings enabled: refusing to run an unconfirmed command "
                               "without a terminal.")
                return False
            return self.countdown()

        return self.prompt()

    def prompt(self) -> bool:
        """Ask the user; anything but 'y' declines."""
        try:
            answer = self.input_func("Proceed? (y/n): ")
        except EOFError:
            answer = ""
        if answer.strip().lower() != "y":
            print("Aborted.")
            logger.user("Command declined")
            return False
        return True

    def countdown(self) -> bool:
        """Audible grace period before an unattended command runs. Ctrl+C cancels it."""
        print(f"{CLR_YELLOW}No terminal attached: running in {self.grace_seconds} seconds. "
              f"Press Ctrl+C to cancel.{CLR_RESET}")
        try:
            for remaining in range(self.grace_seconds, 0, -1):
                sys.stdout.write(f"\a{CLR_BOLD_YELLOW}{remaining}...{CLR_RESET} ")
                sys.stdout.flush()
                self.sleep_func(1)
        except KeyboardInterrupt:
            print(f"\n{CLR_RED}Cancelled.{CLR_RESET}")
            return False
        if self.grace_seconds:
            print()
        print("Proceeding")
        return True

    @staticmethod
    def _print_reasons(verdict: SafetyVerdict) -> None:
        if verdict.classification is SafetyClass.BLOCKED:
            header = "Command exceeds the safety limits and needs explicit consent:"
        else:
            header = "Command needs confirmation:"
        print(f"{CLR_YELLOW}{header}{CLR_RESET}")
        for reason in verdict.reasons:
            print(f"{CLR_YELLOW}  - {reason}{CLR_RESET}")


def create_permission_manager(interactive: bool, config: Optional[dict] = None) -> CommandPermissionManager:
    """Create a command permission manager."""
    config = config or {}
    return CommandPermissionManager(
        interactive=interactive,
        strict_warnings=config.get("strict_warnings", False),
    )
