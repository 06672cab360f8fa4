"""Configuration management for nlshell."""

from .manager import ConfigManager, create_config_manager
from .templates import CONFIG_TEMPLATE, PROMPTS

__all__ = [
    "ConfigManager",
    "create_config_manager",
    "CONFIG_TEMPLATE",
    "PROMPTS",
]
