"""Web search backends used by the RETRIEVE strategy."""

from typing import Any, Callable, Dict

from .brave import brave_search
from .perplexica import perplexica_search

SearchFunction = Callable[[str], Dict[str, Any]]


def get_search_function(name: str, config: Dict[str, Any]) -> SearchFunction:
    """Return a one-argument search callable for the named engine.

    Raises:
        ValueError: unknown engine name
    """
    engine = (name or "").strip().lower()
    if engine == "brave":
        timeout = config.get("request_timeout") or 30
        return lambda query: brave_search(query, timeout=timeout)
    if engine == "perplexica":
        return lambda query: perplexica_search(query, config)
    raise ValueError(f"Unknown web search engine: {name}")


__all__ = ["get_search_function", "brave_search", "perplexica_search", "SearchFunction"]
