"""Command-line interface for nlshell."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from colorama import init as colorama_init

from .config.manager import ConfigManager
from .constants import PROVIDERS
from .core.application import create_application
from .exceptions import GatewayInvalidProvider
from .utils.logging import logger
from . import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="nlshell",
        description="nl-shell: turn natural-language instructions into shell actions.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  nlshell                        # Interactive session with the default provider
  nlshell ollama                 # Interactive session with a local Ollama model
  echo "list files" | nlshell    # Process one instruction from stdin

Session directives:
  /run <cmd>   Run a command directly (auto-confirmed)
  /ask <text>  Ask a question without classification
  /clear       Forget the conversation context
  /bye /quit /q  Exit
        """
    )

    parser.add_argument(
        'provider',
        nargs='?',
        help=f"LLM provider ({', '.join(PROVIDERS)}). Defaults to DEFAULT_LLM_PROVIDER."
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'nlshell {__version__}'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help="Enable debug logging output"
    )

    parser.add_argument(
        '--config-dir',
        type=str,
        help="Custom configuration directory path"
    )

    parser.add_argument(
        '--init-config',
        action='store_true',
        help="Write a commented config.yaml template and exit"
    )

    parser.add_argument(
        '--config-summary',
        action='store_true',
        help="Show configuration summary and exit"
    )

    return parser


def run(args: Optional[List[str]] = None) -> int:
    """Parse arguments, run the session and return the exit code."""
    colorama_init(autoreset=True)

    parser = create_parser()
    parsed_args = parser.parse_args(args)
    config_dir = Path(parsed_args.config_dir) if parsed_args.config_dir else None

    if parsed_args.init_config:
        return 0 if ConfigManager(config_dir).write_template() else 1

    if parsed_args.config_summary:
        manager = ConfigManager(config_dir)
        manager.initialize()
        logger.system("Configuration Summary:")
        for key, value in manager.summary().items():
            logger.system(f"  {key}: {value}")
        return 0

    try:
        app = create_application(
            config_dir=parsed_args.config_dir,
            provider=parsed_args.provider,
            debug=parsed_args.debug,
        )
    except GatewayInvalidProvider as e:
        logger.error(str(e))
        logger.error(f"Usage: nlshell [{'|'.join(PROVIDERS)}]")
        return 1
    except Exception as e:
        logger.error(f"Failed to initialize nlshell: {e}")
        return 1

    return app.run()


def main(args: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    sys.exit(run(args))


if __name__ == "__main__":
    main()
