"""Main application class for nlshell."""

import signal
import sys
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from ..commands import create_command_gate
from ..config.manager import create_config_manager
from ..constants import CLR_BOLD_BLUE, CLR_BOLD_RED, CLR_RESET
from ..exceptions import GatewayConfigError, SessionExit
from ..llm import create_llm_client
from ..utils.logging import logger
from .classifier import create_intent_classifier
from .context import ContextManager
from .dispatcher import SearchFunction, create_dispatcher
from .session import Session


class NLShell:
    """Natural-language shell session: interactive loop or one-shot stdin mode."""

    def __init__(self, config: Dict[str, Any], provider: Optional[str] = None,
                 interactive: Optional[bool] = None, gateway=None,
                 search_function: Optional[SearchFunction] = None,
                 stdin: Optional[TextIO] = None):
        """Initialize the application.

        Args:
            config: Validated configuration
            provider: Provider identifier overriding ``default_provider``
            interactive: Force interactive or piped mode; detected from stdin when None
            gateway: LLM gateway to use instead of building one from config
            search_function: Web search override
            stdin: Input stream read in non-interactive mode
        """
        self.config = config
        self.stdin = stdin or sys.stdin
        self.interactive = self.stdin.isatty() if interactive is None else interactive

        # Raises GatewayInvalidProvider before any network call
        self.gateway = gateway or create_llm_client(config, provider)

        logs_dir = Path(config.get("logs_dir") or "logs").expanduser()
        self.context = ContextManager(logs_dir, config.get("max_last_context_words", 512))
        self.session = Session(provider=self.gateway.provider_name, context=self.context)

        self.gate = create_command_gate(config, self.interactive)
        self.classifier = create_intent_classifier(self.gateway, config["prompts"])
        self.dispatcher = create_dispatcher(self.session, self.gateway, self.classifier,
                                            self.gate, config, search_function)
        logger.debug(f"Application initialized (provider={self.session.provider}, "
                     f"interactive={self.interactive})")

    def run(self) -> int:
        """Run the session and return the process exit code."""
        self._setup_signal_handlers()
        try:
            if self.interactive:
                return self.run_interactive_mode()
            return self.run_non_interactive_mode()
        except SessionExit as e:
            return e.exit_code
        except GatewayConfigError as e:
            logger.error(str(e))
            return 1

    def run_interactive_mode(self) -> int:
        """Prompt, process and repeat until an exit directive or end of input."""
        logger.system(f"Starting nl-shell with {self.session.provider}. "
                      "Type /bye, /quit or /q to exit, /clear to reset the context.")
        if hasattr(self.gateway, "check_connection"):
            self.gateway.check_connection()

        while True:
            print(f"\n{CLR_BOLD_BLUE}{self.session.status_line()}{CLR_RESET}")
            try:
                instruction = input(f"{CLR_BOLD_RED}Ask me:{CLR_RESET} ").strip()
            except KeyboardInterrupt:
                print()
                logger.system("Use /bye, /quit or /q to exit.")
                continue
            except EOFError:
                print("\nExiting...")
                return 0

            if not instruction:
                continue
            try:
                if not self.dispatcher.process(instruction):
                    return 1
            except KeyboardInterrupt:
                print()
                logger.system("Instruction interrupted.")

    def run_non_interactive_mode(self) -> int:
        """Read all of stdin as a single instruction and process it once."""
        print("Non-interactive mode detected. Reading from stdin...")
        instruction = self.stdin.read().strip()
        if not instruction:
            print("No input provided.")
            return 1

        print(f"Processing: {instruction}")
        return 0 if self.dispatcher.process(instruction) else 1

    def _setup_signal_handlers(self) -> None:
        """Exit cleanly on SIGTERM/SIGHUP. SIGINT stays a KeyboardInterrupt."""
        def signal_handler(sig, frame):
            logger.system(f"Received signal {sig}, shutting down...")
            sys.exit(0)

        signal.signal(signal.SIGTERM, signal_handler)
        if hasattr(signal, 'SIGHUP'):
            signal.signal(signal.SIGHUP, signal_handler)


def create_application(config_dir: Optional[str] = None, provider: Optional[str] = None,
                       debug: bool = False) -> NLShell:
    """Create an NLShell application from the layered configuration.

    Args:
        config_dir: Custom configuration directory path
        provider: Provider identifier from the command line
        debug: Enable debug logging

    Returns:
        Initialized NLShell instance
    """
    logger.set_debug(debug)
    config_manager = create_config_manager(Path(config_dir) if config_dir else None)
    config = config_manager.config

    if not debug and config.get("enable_debug", False):
        logger.set_debug(True)
    logger.set_raw(config.get("debug_raw_messages", False))

    return NLShell(config, provider=provider)
