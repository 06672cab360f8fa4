"""LLM response parsing utilities for nlshell."""

import re
from typing import Iterable, Optional, Tuple

from ..utils.logging import logger

THINKING_PATTERN = re.compile(r"<(think|thinking)>.*?</\1>", re.DOTALL | re.IGNORECASE)
CODE_FENCE_PATTERN = re.compile(r"```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```", re.DOTALL)


def strip_thinking(text: str) -> str:
    """Remove every <think>...</think> block, including multi-line ones."""
    if not text:
        return ""
    return THINKING_PATTERN.sub("", text).strip()


def parse_llm_thought(llm_output: str) -> str:
    """Extract the LLM's thought process from <think> tags."""
    match = re.search(r"<think>(.*?)</think>", llm_output or "", re.DOTALL)
    return match.group(1).strip() if match else ""


def parse_reply(raw: str) -> Tuple[str, int]:
    """Split a packed "content\\ntokens" reply into (content, token count).

    Thinking blocks are removed first. A single line is all content with
    0 tokens. When the last line is not an integer the whole text is kept as
    content and the token count is 0.
    """
    text = strip_thinking(raw or "")
    lines = text.splitlines()
    if len(lines) < 2:
        return text.strip(), 0

    *content_lines, last_line = lines
    try:
        tokens = int(last_line.strip())
    except ValueError:
        logger.debug(f"Token line is not an integer: {last_line!r}")
        return text.strip(), 0

    return "\n".join(content_lines).strip(), max(tokens, 0)


def clean_command(llm_output: str) -> str:
    """Reduce a model reply to a single shell command line.

    Handles fenced code blocks, surrounding backticks and leading prose-free
    blank lines; returns "" when nothing is left.
    """
    text = strip_thinking(llm_output or "")
    fenced = CODE_FENCE_PATTERN.search(text)
    if fenced:
        text = fenced.group(1)

    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        if line.startswith("$ "):
            line = line[2:]
        return line.strip("`").strip()
    return ""


def _normalize_label(text: str) -> str:
    first_line = ""
    for line in strip_thinking(text or "").splitlines():
        if line.strip():
            first_line = line.strip()
            break
    return re.sub(r"[^A-Za-z_]", "", first_line).upper()


def parse_label(text: str, labels: Iterable[str]) -> Optional[str]:
    """Return the label the reply names, or None when it names none of them."""
    normalized = _normalize_label(text)
    for label in labels:
        if normalized == label:
            return label
    return None


def extract_response_content(response_data: dict, response_path: str) -> Optional[str]:
    """Extract content from LLM response using jq-like path.

    Args:
        response_data: LLM response JSON data
        response_path: jq-like path (e.g., ".response", ".choices[0].message.content")

    Returns:
        Extracted content or None if not found
    """
    if not response_path.startswith('.'):
        logger.warning(f"Response path should start with '.': {response_path}")
        return None

    path = response_path[1:]

    try:
        current = response_data

        if '.' not in path and '[' not in path:
            return current.get(path) if isinstance(current, dict) else None

        # Split path by dots, but keep array indices with their key
        parts = []
        current_part = ""
        bracket_depth = 0

        for char in path:
            if char == '[':
                bracket_depth += 1
                current_part += char
            elif char == ']':
                bracket_depth -= 1
                current_part += char
            elif char == '.' and bracket_depth == 0:
                if current_part:
                    parts.append(current_part)
                current_part = ""
            else:
                current_part += char

        if current_part:
            parts.append(current_part)

        for part in parts:
            if '[' in part and ']' in part:
                # Array access like "choices[0]"
                key, bracket_part = part.split('[', 1)
                index_str = bracket_part.rstrip(']')

                if key:
                    current = current.get(key, {}) if isinstance(current, dict) else None

                try:
                    index = int(index_str)
                except ValueError:
                    return None
                if isinstance(current, list) and 0 <= index < len(current):
                    current = current[index]
                else:
                    return None
            else:
                if isinstance(current, dict):
                    current = current.get(part)
                else:
                    return None

                if current is None:
                    return None

        return current

    except (AttributeError, TypeError) as e:
        logger.error(f"Error extracting response content with path '{response_path}': {e}")
        return None
