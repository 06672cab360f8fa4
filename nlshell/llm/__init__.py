"""LLM integration for nlshell."""

from .client import LLMGateway, create_llm_client
from .payload import (
    Provider,
    LLMStatus,
    LLMRequest,
    LLMResponse,
    LLMProvider,
    OpenAIProvider,
    GeminiProvider,
    OllamaProvider,
    create_provider,
)
from .parsers import (
    strip_thinking,
    parse_reply,
    parse_llm_thought,
    clean_command,
    parse_label,
    extract_response_content,
)

__all__ = [
    "LLMGateway",
    "create_llm_client",
    "Provider",
    "LLMStatus",
    "LLMRequest",
    "LLMResponse",
    "LLMProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "OllamaProvider",
    "create_provider",
    "strip_thinking",
    "parse_reply",
    "parse_llm_thought",
    "clean_command",
    "parse_label",
    "extract_response_content",
]
