"""Command execution utilities for nlshell."""

import os
import signal
import subprocess
import sys
import threading
from typing import Optional

from ..constants import DEFAULT_COMMAND_TIMEOUT, TIMEOUT_EXIT_CODE
from ..utils.logging import logger


class CommandResult:
    """Represents the result of a command execution."""

    def __init__(self,
                 command: str,
                 exit_code: int,
                 output: str = "",
                 timed_out: bool = False,
                 aborted: bool = False,
                 error_message: str = ""):
        self.command = command
        self.exit_code = exit_code
        self.output = output
        self.timed_out = timed_out
        self.aborted = aborted
        self.error_message = error_message

    @classmethod
    def aborted_result(cls, command: str) -> "CommandResult":
        """Neutral result for a command the user declined."""
        return cls(command=command, exit_code=0, output="Aborted.", aborted=True)

    @property
    def success(self) -> bool:
        """Whether the command executed successfully."""
        return self.exit_code == 0 and not self.error_message and not self.aborted

    @property
    def needs_analysis(self) -> bool:
        """A failed command that actually ran."""
        return not self.aborted and self.exit_code != 0

    def __str__(self) -> str:
        return f"Exit Code: {self.exit_code}. Output:\n{self.output if self.output else '(no output)'}"


class CommandExecutor:
    """Executes shell commands with a wall-clock timeout."""

    def __init__(self, default_timeout: int = DEFAULT_COMMAND_TIMEOUT):
        """Initialize command executor.

        Args:
            default_timeout: Timeout in seconds; 0 disables it
        """
        self.default_timeout = default_timeout

    def execute(self, command: str, stream: bool = False,
                timeout: Optional[int] = None) -> CommandResult:
        """Run a command through the shell, capturing stdout and stderr together.

        Args:
            command: Shell command to execute
            stream: Echo each output line to the terminal as it arrives
            timeout: Override of the default timeout in seconds (0 disables)

        Returns:
            CommandResult; a timeout yields exit code 124 and a marker in the output
        """
        if timeout is None:
            timeout = self.default_timeout

        logger.debug(f"Executing command: {command} - timeout: {timeout or 'none'}")

        try:
            process = subprocess.Popen(
                command,
                shell=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                # Interactive commands may read from the terminal
                stdin=None if stream else subprocess.DEVNULL,
                text=True,
                errors="replace",
                start_new_session=(os.name == "posix"),
            )
        except OSError as e:
            error_msg = f"Error executing command: {e}"
            logger.error(error_msg)
            return CommandResult(command=command, exit_code=-1, output=error_msg,
                                 error_message=error_msg)

        expired = threading.Event()
        timer = None
        if timeout:
            timer = threading.Timer(timeout, self._kill, args=(process, expired))
            timer.daemon = True
            timer.start()

        captured = []
        try:
            for line in process.stdout:
                captured.append(line)
                if stream:
                    sys.stdout.write(line)
                    sys.stdout.flush()
            process.wait()
        except KeyboardInterrupt:
            self._kill(process, None)
            process.wait()
            raise
        finally:
            if timer is not None:
                timer.cancel()
            process.stdout.close()

        output = "".join(captured).rstrip("\n")
        if expired.is_set():
            marker = f"[Command timed out after {timeout} seconds]"
            logger.warning(marker)
            output = f"{output}\n{marker}" if output else marker
            return CommandResult(command=command, exit_code=TIMEOUT_EXIT_CODE,
                                 output=output, timed_out=True)

        logger.debug(f"Command completed with exit code {process.returncode}")
        return CommandResult(command=command, exit_code=process.returncode, output=output)

    @staticmethod
    def _kill(process: subprocess.Popen, expired: Optional[threading.Event]) -> None:
        """Kill the whole process group.

        The shell may already have exited while background children still hold
        the output pipe, so the group is signalled regardless.
        """
        if expired is not None:
            expired.set()
        try:
            if os.name == "posix":
                os.killpg(process.pid, signal.SIGKILL)
            else:
                process.kill()
        except (ProcessLookupError, PermissionError):
            # already exited
            pass


def create_command_executor(timeout: int = DEFAULT_COMMAND_TIMEOUT) -> CommandExecutor:
    """Create a command executor with the specified default timeout."""
    return CommandExecutor(timeout)
