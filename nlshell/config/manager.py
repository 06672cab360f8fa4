"""Configuration manager for nlshell."""

from typing import Dict, Any, Optional
from pathlib import Path
import os

import yaml
from dotenv import load_dotenv

from ..constants import (
    CONFIG_DIR, CONFIG_FILE_NAME, PROVIDERS, WEB_SEARCH_ENGINES,
    DEFAULT_PROVIDER, DEFAULT_OPENAI_MODEL, DEFAULT_GEMINI_MODEL, DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_HOST, DEFAULT_TEMPERATURE, DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_WEB_SEARCH_ENGINE, DEFAULT_PERPLEXICA_API_URL, DEFAULT_MAX_LAST_CONTEXT_WORDS,
    DEFAULT_MAX_COMMAND_LENGTH, DEFAULT_COMMAND_TIMEOUT, DEFAULT_LOGS_DIR, DEFAULT_ENABLE_DEBUG,
)
from ..utils.logging import logger
from ..utils.helpers import parse_bool, parse_list, safe_file_write
from .templates import CONFIG_TEMPLATE, PROMPTS


DEFAULTS: Dict[str, Any] = {
    "default_provider": DEFAULT_PROVIDER,
    "openai_api_key": None,
    "gemini_api_key": None,
    "openai_model": DEFAULT_OPENAI_MODEL,
    "gemini_model": DEFAULT_GEMINI_MODEL,
    "ollama_model": DEFAULT_OLLAMA_MODEL,
    "ollama_host": DEFAULT_OLLAMA_HOST,
    "temperature": DEFAULT_TEMPERATURE,
    "response_language": "",
    "request_timeout": DEFAULT_REQUEST_TIMEOUT,
    "web_search_engine": DEFAULT_WEB_SEARCH_ENGINE,
    "perplexica_api_url": DEFAULT_PERPLEXICA_API_URL,
    "perplexica_focus_mode": "webSearch",
    "perplexica_chat_provider": "gemini",
    "perplexica_chat_name": "gemini-2.0-flash",
    "perplexica_embedding_provider": "gemini",
    "perplexica_embedding_name": "models/text-embedding-004",
    "perplexica_optimization_mode": "speed",
    "debug_raw_messages": False,
    "enable_debug": DEFAULT_ENABLE_DEBUG,
    "max_last_context_words": DEFAULT_MAX_LAST_CONTEXT_WORDS,
    "max_command_length": DEFAULT_MAX_COMMAND_LENGTH,
    "command_timeout": DEFAULT_COMMAND_TIMEOUT,
    "strict_warnings": False,
    "extra_safe_commands": [],
    "logs_dir": DEFAULT_LOGS_DIR,
}

# Keys overridable through the environment; the variable name is the upper-cased key
# except where mapped explicitly.
ENV_ALIASES = {
    "default_provider": "DEFAULT_LLM_PROVIDER",
    "temperature": "LLM_TEMPERATURE",
    "request_timeout": "LLM_REQUEST_TIMEOUT",
}

BOOL_KEYS = ("debug_raw_messages", "enable_debug", "strict_warnings")
NON_NEGATIVE_INT_KEYS = ("request_timeout", "command_timeout")
POSITIVE_INT_KEYS = ("max_last_context_words", "max_command_length")


class ConfigManager:
    """Loads and validates configuration from defaults, config.yaml, .env and the environment."""

    def __init__(self, config_dir: Optional[Path] = None,
                 environ: Optional[Dict[str, str]] = None,
                 load_env_file: bool = True):
        """Initialize the configuration manager.

        Args:
            config_dir: Custom configuration directory path
            environ: Environment mapping to read (defaults to os.environ)
            load_env_file: Whether to read a .env file from the working directory
        """
        self.config_dir = config_dir or CONFIG_DIR
        self.config_file = self.config_dir / CONFIG_FILE_NAME
        self._environ = environ
        self._load_env_file = load_env_file
        self._config: Optional[Dict[str, Any]] = None

    def initialize(self) -> None:
        """Load configuration from every layer."""
        if self._load_env_file and self._environ is None:
            # Real environment wins over .env
            load_dotenv(override=False)
        self._config = self._load_config()

    def write_template(self) -> bool:
        """Write a commented config.yaml template unless one already exists.

        Returns:
            True if the template was written
        """
        if self.config_file.exists():
            logger.warning(f"Configuration file already exists: {self.config_file}")
            return False
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Could not create {self.config_dir}: {e}")
            return False
        if safe_file_write(self.config_file, CONFIG_TEMPLATE, "config template"):
            logger.system(f"Configuration template generated: {self.config_file}")
            return True
        return False

    def _load_config(self) -> Dict[str, Any]:
        config_data: Dict[str, Any] = dict(DEFAULTS)
        config_data["prompts"] = dict(PROMPTS)

        file_data = self._read_yaml()
        for key, value in file_data.items():
            if key == "prompts":
                if isinstance(value, dict):
                    config_data["prompts"].update({str(k): str(v) for k, v in value.items()})
                else:
                    logger.warning(f"'prompts' in {self.config_file} is not a map. Ignoring it.")
            elif key in DEFAULTS:
                config_data[key] = value
            else:
                logger.warning(f"Unknown key '{key}' in {self.config_file}. Ignoring it.")

        environ = self._environ if self._environ is not None else os.environ
        for key in DEFAULTS:
            env_name = ENV_ALIASES.get(key, key.upper())
            if env_name in environ and environ[env_name] != "":
                config_data[key] = environ[env_name]

        self._validate(config_data)
        logger.debug("Configuration loaded successfully")
        return config_data

    def _read_yaml(self) -> Dict[str, Any]:
        if not self.config_file.exists():
            logger.debug(f"No configuration file at {self.config_file}; using defaults")
            return {}
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.warning(f"Error parsing YAML file {self.config_file}: {e}. Using defaults.")
            return {}
        except IOError as e:
            logger.warning(f"Could not read {self.config_file}: {e}. Using defaults.")
            return {}

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"{self.config_file} is not a valid YAML dictionary. Using defaults.")
            return {}
        return data

    def _validate(self, config_data: Dict[str, Any]) -> None:
        for key in BOOL_KEYS:
            config_data[key] = parse_bool(config_data[key], DEFAULTS[key])

        for key in NON_NEGATIVE_INT_KEYS + POSITIVE_INT_KEYS:
            minimum = 0 if key in NON_NEGATIVE_INT_KEYS else 1
            try:
                value = int(config_data[key])
            except (TypeError, ValueError):
                logger.warning(f"{key} ('{config_data[key]}') must be an integer. Defaulting to {DEFAULTS[key]}.")
                value = DEFAULTS[key]
            if value < minimum:
                logger.warning(f"{key} ('{value}') must be at least {minimum}. Defaulting to {DEFAULTS[key]}.")
                value = DEFAULTS[key]
            config_data[key] = value

        try:
            config_data["temperature"] = float(config_data["temperature"])
        except (TypeError, ValueError):
            logger.warning(f"temperature ('{config_data['temperature']}') must be a number. "
                           f"Defaulting to {DEFAULT_TEMPERATURE}.")
            config_data["temperature"] = DEFAULT_TEMPERATURE

        provider = str(config_data["default_provider"]).strip().lower()
        if provider not in PROVIDERS:
            logger.warning(f"default_provider must be one of {PROVIDERS}, got '{provider}'. "
                           f"Defaulting to {DEFAULT_PROVIDER}.")
            provider = DEFAULT_PROVIDER
        config_data["default_provider"] = provider

        engine = str(config_data["web_search_engine"]).strip().lower()
        if engine not in WEB_SEARCH_ENGINES:
            logger.warning(f"web_search_engine must be one of {WEB_SEARCH_ENGINES}, got '{engine}'. "
                           f"Defaulting to {DEFAULT_WEB_SEARCH_ENGINE}.")
            engine = DEFAULT_WEB_SEARCH_ENGINE
        config_data["web_search_engine"] = engine

        config_data["extra_safe_commands"] = parse_list(config_data["extra_safe_commands"])
        config_data["ollama_host"] = str(config_data["ollama_host"]).rstrip("/")
        config_data["response_language"] = str(config_data["response_language"] or "").strip()

    @property
    def config(self) -> Dict[str, Any]:
        """Get the current configuration."""
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call initialize() first.")
        return self._config.copy()

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call initialize() first.")
        return self._config.get(key, default)

    def summary(self) -> Dict[str, Any]:
        """Configuration values safe to print (credentials masked)."""
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call initialize() first.")
        masked = {}
        for key, value in self._config.items():
            if key == "prompts":
                continue
            if key.endswith("_api_key"):
                value = "set" if value else "not set"
            masked[key] = value
        return masked


def create_config_manager(config_dir: Optional[Path] = None,
                          environ: Optional[Dict[str, str]] = None) -> ConfigManager:
    """Create and initialize a configuration manager.

    Args:
        config_dir: Custom configuration directory path
        environ: Environment mapping (tests pass a plain dict)

    Returns:
        Initialized ConfigManager instance
    """
    manager = ConfigManager(config_dir, environ=environ)
    manager.initialize()
    return manager
