import io

import pytest
import requests

from nlshell import cli


@pytest.fixture
def shell_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "colorama_init", lambda **kwargs: None)
    monkeypatch.setenv("LOGS_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("DEFAULT_LLM_PROVIDER", "gemini")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)

    def no_network(self, *args, **kwargs):
        raise AssertionError("unexpected LLM call")

    monkeypatch.setattr(requests.Session, "post", no_network)
    return tmp_path


def _run(shell_env, monkeypatch, stdin_text, *args):
    monkeypatch.setattr("sys.stdin", io.StringIO(stdin_text))
    return cli.run(["--config-dir", str(shell_env / "config"), *args])


def test_parser_defaults() -> None:
    args = cli.create_parser().parse_args([])

    assert args.provider is None
    assert args.debug is False
    assert args.init_config is False


def test_run_directive_from_stdin_executes_without_llm(shell_env, monkeypatch, capsys) -> None:
    code = _run(shell_env, monkeypatch, "/run echo hi\n")

    out = capsys.readouterr().out
    assert code == 0
    assert "Non-interactive mode detected. Reading from stdin..." in out
    assert "Processing: /run echo hi" in out
    assert "Auto-proceeding" in out
    assert "hi" in out.split("Output:")[-1]


def test_empty_stdin_exits_with_error(shell_env, monkeypatch, capsys) -> None:
    code = _run(shell_env, monkeypatch, "   \n")

    assert code == 1
    assert "No input provided." in capsys.readouterr().out


def test_clear_from_stdin(shell_env, monkeypatch, capsys) -> None:
    code = _run(shell_env, monkeypatch, "/clear")

    assert code == 0
    assert "Context cleared successfully!" in capsys.readouterr().out


def test_exit_directive_from_stdin(shell_env, monkeypatch, capsys) -> None:
    code = _run(shell_env, monkeypatch, "/bye")

    assert code == 0
    assert "Exiting..." in capsys.readouterr().out


def test_missing_credential_exits_with_error(shell_env, monkeypatch) -> None:
    code = _run(shell_env, monkeypatch, "list my files")

    assert code == 1


def test_invalid_provider_exits_with_error(shell_env, monkeypatch) -> None:
    code = _run(shell_env, monkeypatch, "/run echo hi", "claude")

    assert code == 1


def test_init_config_writes_template(shell_env, monkeypatch) -> None:
    code = _run(shell_env, monkeypatch, "", "--init-config")

    assert code == 0
    assert (shell_env / "config" / "config.yaml").exists()
