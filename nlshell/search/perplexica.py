"""Client for a self-hosted Perplexica search API."""

from typing import Any, Dict

import requests

from ..constants import DEFAULT_PERPLEXICA_API_URL
from ..utils.logging import logger


def build_payload(query: str, config: Dict[str, Any]) -> Dict[str, Any]:
    """JSON body for the Perplexica ``/api/search`` endpoint."""
    return {
        "query": query,
        "focusMode": config.get("perplexica_focus_mode", "webSearch"),
        "stream": False,
        "chatModel": {
            "provider": config.get("perplexica_chat_provider", "gemini"),
            "name": config.get("perplexica_chat_name", "gemini-2.0-flash"),
        },
        "embeddingModel": {
            "provider": config.get("perplexica_embedding_provider", "gemini"),
            "name": config.get("perplexica_embedding_name", "models/text-embedding-004"),
        },
        "optimizationMode": config.get("perplexica_optimization_mode", "speed"),
    }


def perplexica_search(query: str, config: Dict[str, Any]) -> Dict[str, Any]:
    """POST the query and return the decoded body; its ``message`` is the answer."""
    url = config.get("perplexica_api_url") or DEFAULT_PERPLEXICA_API_URL
    try:
        response = requests.post(
            url,
            json=build_payload(query, config),
            timeout=config.get("request_timeout") or None,
        )
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.RequestException as e:
        logger.warning(f"Perplexica request to {url} failed: {e}")
        return {"message": None}
    except ValueError as e:
        logger.warning(f"Perplexica returned invalid JSON: {e}")
        return {"message": None}

    if not isinstance(data, dict):
        return {"message": None}
    return data
