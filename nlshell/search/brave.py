"""Brave Search scraper returning the visible text of a results page."""

import html
import re
from typing import Any, Dict

import requests

from ..utils.logging import logger

BRAVE_SEARCH_URL = "https://search.brave.com/search"
MAX_CONTENT_CHARS = 2500
MIN_SENTENCE_CUT_CHARS = 500

NAVIGATION_LINES = {
    "Search", "Images", "Videos", "News", "Maps", "More", "Settings",
    "Sign in", "Brave Search", "Advertisement", "Ad",
}

USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) nl-shell"


def strip_tags(text: str) -> str:
    """Remove scripts, styles and tags, keeping one line per block of text."""
    text = re.sub(r"<script[\s\S]*?</script>", "", text, flags=re.I)
    text = re.sub(r"<style[\s\S]*?</style>", "", text, flags=re.I)
    text = re.sub(r"<(br|/p|/div|/li|/h[1-6]|/a|/span)[^>]*>", "\n", text, flags=re.I)
    text = re.sub(r"<[^>]+>", "", text)
    return html.unescape(text)


def clean_results_text(text: str) -> str:
    """Drop navigation lines, flatten to one line and cut to a sentence boundary."""
    lines = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line in NAVIGATION_LINES:
            continue
        if line.startswith("[") and line.endswith("]"):
            continue
        lines.append(line)

    content = " ".join(" ".join(lines).split())[:MAX_CONTENT_CHARS]
    if len(content) == MAX_CONTENT_CHARS:
        match = re.search(r".*[.!?]", content)
        if match and len(match.group(0)) > MIN_SENTENCE_CUT_CHARS:
            content = match.group(0)
    return content


def brave_search(query: str, timeout: int = 30) -> Dict[str, Any]:
    """Search Brave and return ``{"message": text_or_None, "urls": []}``."""
    try:
        response = requests.get(
            BRAVE_SEARCH_URL,
            params={"q": query, "source": "web"},
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.warning(f"Brave search failed for '{query}': {e}")
        return {"message": None, "urls": []}

    content = clean_results_text(strip_tags(response.text))
    logger.debug(f"Brave search returned {len(content)} characters")
    return {"message": content or None, "urls": []}
