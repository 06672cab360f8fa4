"""Configuration and prompt templates for nlshell."""

CONFIG_TEMPLATE = """\
# config.yaml - OPTIONAL - nl-shell settings
# Every key is optional. Environment variables (or a .env file in the working
# directory) with the upper-case name override the values set here, e.g.
# OPENAI_API_KEY overrides openai_api_key.

# default_provider: the LLM used when none is given on the command line.
#   One of: openai, gemini, ollama
default_provider: gemini

# Credentials. Prefer setting these through the environment.
# openai_api_key: ""
# gemini_api_key: ""

# Models
openai_model: "gpt-4.1-mini"
gemini_model: "gemini-2.5-flash"
ollama_model: "llama3.1"
ollama_host: "http://localhost:11434"

temperature: 0.7
# response_language: "English"   # Answers are requested in this language
request_timeout: 120             # Seconds to wait for an LLM reply

# Web retrieval backend: brave (page scraping) or perplexica (search API)
web_search_engine: brave
# perplexica_api_url: "http://localhost:3000/api/search"
# perplexica_focus_mode: webSearch

# Conversation context
max_last_context_words: 512      # Size of the rolling context window (words)
logs_dir: "logs"                 # Where the context snapshots are written

# Command safety
max_command_length: 500          # Longer commands always need confirmation
command_timeout: 60              # Seconds; 0 disables the timeout
strict_warnings: false           # Refuse unconfirmed commands when no terminal is attached
extra_safe_commands: []          # Extra commands that run without confirmation, e.g. [git, jq]

# Diagnostics
enable_debug: false
debug_raw_messages: false        # Dump raw LLM requests/responses to stderr

# prompts:                       # Override any system prompt by name
#   question: "You are ..."
"""

PROMPTS = {
    "classify": (
        "You are an intent classifier for a shell assistant. Classify the user's input as "
        "'COMMAND' (for shell operations), 'RETRIEVE' (for requests to fetch information from "
        "local files or the internet), 'ANALYZE' (for requests to analyze/examine/synthesize/"
        "evaluate already available data), or 'QUESTION' (for general inquiries). "
        "Reply with only 'COMMAND', 'RETRIEVE', 'ANALYZE', or 'QUESTION'. "
        "Consider the previous interaction if provided."
    ),
    "command": (
        "You are a helpful assistant that converts natural language to safe, single-line bash "
        "commands or several commands in the same line. Only reply with the commands with no "
        "markdown. Consider the previous interaction if provided.\n"
        "Current directory: {current_directory}. Hostname: {current_hostname}."
    ),
    "failure_analysis": (
        "You are a helpful assistant that analyzes the output of bash commands. Given the "
        "command and its output, provide a concise summary or explanation, especially if it "
        "failed. Consider the previous interaction if provided."
    ),
    "retrieval_mode": (
        "You are a helpful assistant that determines the best way to retrieve data for analysis. "
        "Given the user's request, decide if the information needs to be retrieved from the "
        "local shell functions, binaries, filesystem or data ('LOCAL_SEARCH'), or from the "
        "internet ('WEB_SEARCH') if not available locally. Reply with only 'WEB_SEARCH' or "
        "'LOCAL_SEARCH'. Consider the previous interaction if provided."
    ),
    "local_retrieval": (
        "You are a helpful assistant that converts natural language requests for data retrieval "
        "into safe, single-line bash commands to retrieve that data from local files or system. "
        "Only reply with the command with no markdown. For example, if asked to 'read test.txt', "
        "you might reply 'cat test.txt'. Consider the previous interaction if provided.\n"
        "Current directory: {current_directory}."
    ),
    "summarize": (
        "You are a helpful assistant that analyzes retrieved data to satisfy a user's request. "
        "Given the original request and the retrieved content, provide a concise answer or "
        "summary for the user."
    ),
    "analyze": (
        "You are a helpful assistant that analyzes provided data or context. Given the user's "
        "instruction and any previous context, provide a concise summary or insights. Assume "
        "the necessary data is already available in the context. Consider the previous "
        "interaction if provided."
    ),
    "question": (
        "You are a helpful shell assistant that can both run bash commands and answer general "
        "questions. Answer the user's question directly and concisely, keeping in mind your "
        "capabilities of running commands in the shell or just responding questions. Consider "
        "the previous interaction if provided.\n"
        "Time: {current_time}. Directory: {current_directory}. Hostname: {current_hostname}."
    ),
}
