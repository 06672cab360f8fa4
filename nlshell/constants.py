"""Constants used throughout the nlshell package."""

from pathlib import Path
from colorama import Fore, Style

# Configuration paths
CONFIG_DIR = Path.home() / ".config" / "nl-shell"
CONFIG_FILE_NAME = "config.yaml"
CONTEXT_FILE_SUFFIX = "_nl_shell_context.log"
FULL_CONTEXT_FILE_SUFFIX = "_nl_shell_full_context.log"

# ANSI Color Codes (using colorama)
CLR_RESET = Style.RESET_ALL
CLR_RED = Fore.RED
CLR_BOLD_RED = Style.BRIGHT + Fore.RED
CLR_GREEN = Fore.GREEN
CLR_BOLD_GREEN = Style.BRIGHT + Fore.GREEN
CLR_YELLOW = Fore.YELLOW
CLR_BOLD_YELLOW = Style.BRIGHT + Fore.YELLOW
CLR_BOLD_BLUE = Style.BRIGHT + Fore.BLUE
CLR_MAGENTA = Fore.MAGENTA
CLR_BOLD_MAGENTA = Style.BRIGHT + Fore.MAGENTA
CLR_CYAN = Fore.CYAN
CLR_BOLD_CYAN = Style.BRIGHT + Fore.CYAN
CLR_WHITE = Fore.WHITE
CLR_BOLD_WHITE = Style.BRIGHT + Fore.WHITE

# Providers
PROVIDERS = ["openai", "gemini", "ollama"]

# Intents returned by the classifier
INTENTS = ["COMMAND", "RETRIEVE", "ANALYZE", "QUESTION"]

# Retrieval modes chosen inside the RETRIEVE strategy
RETRIEVAL_MODES = ["LOCAL_SEARCH", "WEB_SEARCH"]

# In-band directives
EXIT_DIRECTIVES = ["/bye", "/quit", "/q"]
CLEAR_DIRECTIVE = "/clear"
RUN_PREFIX = "/run "
ASK_PREFIX = "/ask "

# Web search backends
WEB_SEARCH_ENGINES = ["brave", "perplexica"]

# Default configuration values
DEFAULT_PROVIDER = "gemini"
DEFAULT_OPENAI_MODEL = "gpt-4.1-mini"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_OLLAMA_MODEL = "llama3.1"
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_REQUEST_TIMEOUT = 120
DEFAULT_WEB_SEARCH_ENGINE = "brave"
DEFAULT_PERPLEXICA_API_URL = "http://localhost:3000/api/search"
DEFAULT_MAX_LAST_CONTEXT_WORDS = 512
DEFAULT_MAX_COMMAND_LENGTH = 500
DEFAULT_COMMAND_TIMEOUT = 60
DEFAULT_LOGS_DIR = "logs"
DEFAULT_ENABLE_DEBUG = False
MAX_FAILED_CLASSIFICATIONS = 3

# Command execution
TIMEOUT_EXIT_CODE = 124
CONFIRMATION_GRACE_SECONDS = 5

# Read-only inspection utilities that never need confirmation
SAFE_COMMANDS = [
    "ls", "pwd", "echo", "cat", "head", "tail", "less", "more", "wc",
    "grep", "find", "stat", "file", "du", "df", "free", "uptime", "date",
    "cal", "whoami", "id", "hostname", "uname", "which", "whereis", "type",
    "ps", "tree", "diff", "sort", "uniq", "cut", "basename", "dirname",
    "realpath", "lsblk", "nproc",
]

# Case-insensitive substrings that force explicit confirmation
DENYLIST_SUBSTRINGS = [
    # Sensitive filesystem paths
    "/etc/passwd", "/etc/shadow", "/etc/sudoers", "/etc/gshadow",
    "/root", ".ssh/", "id_rsa", "id_ed25519", "authorized_keys",
    ".aws/", ".gnupg", ".netrc", ".kube/config", ".docker/config",
    # Credential-related keywords
    "password", "passwd", "secret", "token", "api_key", "apikey",
    "private_key", "credential",
    # Certificate and key files
    ".pem", ".key", ".crt", ".cer", ".p12", ".pfx", ".jks",
]

# Shell metacharacters associated with injection
SHELL_METACHARACTERS = ["$", "`", ";", "|", "&", "(", ")", "<", ">", "{", "}"]
