from nlshell.config.manager import ConfigManager, DEFAULTS
from nlshell.config.templates import CONFIG_TEMPLATE


def _load(tmp_path, environ=None, yaml_text=None):
    if yaml_text is not None:
        (tmp_path / "config.yaml").write_text(yaml_text, encoding="utf-8")
    manager = ConfigManager(tmp_path, environ=environ or {})
    manager.initialize()
    return manager


def test_defaults_without_file_or_environment(tmp_path) -> None:
    config = _load(tmp_path).config

    assert config["default_provider"] == DEFAULTS["default_provider"]
    assert config["max_command_length"] == 500
    assert config["max_last_context_words"] == 512
    assert config["strict_warnings"] is False
    assert "classify" in config["prompts"]


def test_yaml_values_are_loaded(tmp_path) -> None:
    config = _load(tmp_path, yaml_text=(
        "default_provider: ollama\n"
        "ollama_host: http://box:11434/\n"
        "extra_safe_commands: [git, jq]\n"
        "prompts:\n"
        "  question: Answer briefly.\n"
    )).config

    assert config["default_provider"] == "ollama"
    assert config["ollama_host"] == "http://box:11434"
    assert config["extra_safe_commands"] == ["git", "jq"]
    assert config["prompts"]["question"] == "Answer briefly."
    assert config["prompts"]["classify"]


def test_environment_overrides_yaml(tmp_path) -> None:
    config = _load(
        tmp_path,
        environ={
            "DEFAULT_LLM_PROVIDER": "openai",
            "OPENAI_API_KEY": "sk-test",
            "LLM_TEMPERATURE": "0.2",
            "STRICT_WARNINGS": "true",
            "EXTRA_SAFE_COMMANDS": "git, make",
        },
        yaml_text="default_provider: gemini\n",
    ).config

    assert config["default_provider"] == "openai"
    assert config["openai_api_key"] == "sk-test"
    assert config["temperature"] == 0.2
    assert config["strict_warnings"] is True
    assert config["extra_safe_commands"] == ["git", "make"]


def test_invalid_values_fall_back_to_defaults(tmp_path) -> None:
    config = _load(tmp_path, environ={
        "COMMAND_TIMEOUT": "-5",
        "MAX_COMMAND_LENGTH": "lots",
        "WEB_SEARCH_ENGINE": "altavista",
        "DEFAULT_LLM_PROVIDER": "claude",
    }).config

    assert config["command_timeout"] == DEFAULTS["command_timeout"]
    assert config["max_command_length"] == DEFAULTS["max_command_length"]
    assert config["web_search_engine"] == DEFAULTS["web_search_engine"]
    assert config["default_provider"] == DEFAULTS["default_provider"]


def test_malformed_yaml_is_ignored(tmp_path) -> None:
    config = _load(tmp_path, yaml_text="default_provider: [unclosed\n").config

    assert config["default_provider"] == DEFAULTS["default_provider"]


def test_summary_masks_api_keys(tmp_path) -> None:
    summary = _load(tmp_path, environ={"GEMINI_API_KEY": "abc123"}).summary()

    assert summary["gemini_api_key"] == "set"
    assert summary["openai_api_key"] == "not set"
    assert "prompts" not in summary


def test_write_template_once(tmp_path) -> None:
    manager = ConfigManager(tmp_path / "nl-shell", environ={})

    assert manager.write_template() is True
    assert manager.config_file.read_text(encoding="utf-8") == CONFIG_TEMPLATE
    assert manager.write_template() is False
