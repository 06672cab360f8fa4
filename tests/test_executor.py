import subprocess
import time

from nlshell.commands.executor import CommandExecutor, CommandResult
from nlshell.constants import TIMEOUT_EXIT_CODE


def test_execute_captures_stdout_and_stderr() -> None:
    result = CommandExecutor(default_timeout=10).execute("echo out; echo err 1>&2")

    assert result.exit_code == 0
    assert "out" in result.output
    assert "err" in result.output
    assert result.success


def test_execute_reports_non_zero_exit() -> None:
    result = CommandExecutor(default_timeout=10).execute("exit 3")

    assert result.exit_code == 3
    assert result.needs_analysis


def test_execute_times_out_with_marker() -> None:
    result = CommandExecutor().execute("sleep 5", timeout=1)

    assert result.timed_out
    assert result.exit_code == TIMEOUT_EXIT_CODE
    assert "[Command timed out after 1 seconds]" in result.output


def test_execute_streams_when_requested(capsys) -> None:
    result = CommandExecutor(default_timeout=10).execute("echo streamed", stream=True)

    assert result.output == "streamed"
    assert "streamed" in capsys.readouterr().out


def test_aborted_result_is_not_analyzed() -> None:
    result = CommandResult.aborted_result("rm -rf /tmp/x")

    assert result.aborted
    assert not result.needs_analysis
    assert not result.success


def test_timeout_kills_background_children() -> None:
    started = time.monotonic()

    result = CommandExecutor().execute("sleep 5 & echo started", timeout=1)

    assert time.monotonic() - started < 3
    assert result.timed_out
    assert result.exit_code == TIMEOUT_EXIT_CODE
    assert result.output.startswith("started")


def test_streamed_commands_inherit_the_terminal(monkeypatch) -> None:
    seen = []

    def fake_popen(command, **kwargs):
        seen.append(kwargs["stdin"])
        raise OSError("not started")

    monkeypatch.setattr(subprocess, "Popen", fake_popen)
    executor = CommandExecutor(default_timeout=10)

    executor.execute("read answer", stream=True)
    executor.execute("read answer", stream=False)

    assert seen == [None, subprocess.DEVNULL]
