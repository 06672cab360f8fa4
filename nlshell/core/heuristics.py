"""Best-effort text heuristics used by the ANALYZE strategy.

These are keyword and pattern matches, not intent classification. They can
misfire; the dispatcher only uses them to decide whether to fetch data first.
"""

import re

PREVIOUS_OUTPUT_PATTERN = re.compile(
    r"\b(the|that|this|last|previous|above|prior)\s+"
    r"(output|outputs|result|results|response|command|commands|answer|listing)\b"
    r"|\bprevious(ly)?\b|\bjust\s+(ran|run|got|saw)\b|\bfrom\s+before\b",
    re.IGNORECASE,
)

FILE_EXTENSIONS = (
    "txt", "log", "md", "csv", "tsv", "json", "yaml", "yml", "toml", "ini", "cfg", "conf",
    "xml", "html", "py", "sh", "js", "ts", "go", "rs", "java", "c", "h", "cpp", "rb",
    "php", "sql", "env", "lock", "out", "err",
)

FILE_EXTENSION_PATTERN = re.compile(
    r"\b[\w.-]+\.(" + "|".join(FILE_EXTENSIONS) + r")\b", re.IGNORECASE
)
# Absolute or ./ ~/ relative paths, or bare paths with at least two separators
PATH_PATTERN = re.compile(r"(^|\s)(~|\.{1,2})?/[\w.~-]+|\b[\w.-]+/[\w.-]+/[\w.-]*")


def refers_to_previous_output(instruction: str) -> bool:
    """True when the instruction appears to talk about earlier output."""
    return bool(PREVIOUS_OUTPUT_PATTERN.search(instruction or ""))


def mentions_file(instruction: str) -> bool:
    """True when the instruction contains a path or a filename with a known extension."""
    text = instruction or ""
    return bool(FILE_EXTENSION_PATTERN.search(text) or PATH_PATTERN.search(text))
