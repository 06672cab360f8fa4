"""
nl-shell - natural-language front-end for the shell.

Instructions typed in plain language are classified by an LLM and routed to
one of four strategies: run a shell command, retrieve data, analyze data, or
answer a question. Commands pass a safety gate before they are executed.
"""

__version__ = "1.0.0"

from .core.application import NLShell, create_application
from .config.manager import ConfigManager, create_config_manager

__all__ = [
    "NLShell",
    "create_application",
    "ConfigManager",
    "create_config_manager",
    "__version__",
]
