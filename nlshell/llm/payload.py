"""LLM request/response types and per-provider payload handling for nlshell."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..exceptions import GatewayInvalidProvider
from ..utils.logging import logger
from .parsers import extract_response_content, parse_reply, strip_thinking


class Provider(Enum):
    """Supported LLM backends."""
    OPENAI = "openai"
    GEMINI = "gemini"
    OLLAMA = "ollama"

    @classmethod
    def parse(cls, name: str) -> "Provider":
        """Map a provider identifier to the enum; unknown names raise GatewayInvalidProvider."""
        normalized = (name or "").strip().lower()
        for provider in cls:
            if provider.value == normalized:
                return provider
        valid = ", ".join(p.value for p in cls)
        raise GatewayInvalidProvider(
            f"Invalid LLM provider '{name}'. Use one of: {valid}.", provider=str(name)
        )


class LLMStatus(Enum):
    """Outcome of one gateway call."""
    OK = "ok"
    EMPTY = "empty"
    QUOTA_EXCEEDED = "quota-exceeded"
    AUTH_ERROR = "auth-error"


@dataclass(frozen=True)
class LLMRequest:
    """One stateless call to a provider."""
    provider: Provider
    system_prompt: str
    user_content: str
    temperature: float = 0.7


@dataclass
class LLMResponse:
    """Normalized provider reply."""
    content: str = ""
    tokens: int = 0
    status: LLMStatus = LLMStatus.OK
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is LLMStatus.OK and bool(self.content)

    @classmethod
    def from_text(cls, raw: str) -> "LLMResponse":
        """Build a response from a packed "content\\ntokens" text reply.

        For backends and wrappers that return plain text with the token count on
        the last line instead of JSON. The bundled providers parse JSON.
        """
        content, tokens = parse_reply(raw)
        status = LLMStatus.OK if content else LLMStatus.EMPTY
        return cls(content=content, tokens=tokens, status=status)


QUOTA_MARKERS = ("quota", "resource_exhausted", "rate limit", "rate_limit", "too many requests")
AUTH_MARKERS = ("api key", "api_key", "apikey", "unauthenticated", "unauthorized",
                "permission_denied", "authentication", "invalid_api_key")


class LLMProvider:
    """Base class: builds the HTTP request and normalizes the reply for one backend."""

    provider: Provider
    content_path: str = ""
    tokens_path: Optional[str] = None
    credential_name: str = ""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.temperature = config.get("temperature", 0.7)

    @property
    def name(self) -> str:
        return self.provider.value

    @property
    def model(self) -> str:
        return str(self.config.get(f"{self.name}_model", ""))

    def missing_credential(self) -> Optional[str]:
        """Name of the required credential when it is not configured."""
        if self.credential_name and not self.config.get(self.credential_name.lower()):
            return self.credential_name
        return None

    def auth_hint(self) -> str:
        """Operator-facing hint about which credential to check."""
        return f"Check {self.credential_name} in your environment or .env file."

    def build_request(self, request: LLMRequest) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        """Return (url, headers, json payload) for the request."""
        raise NotImplementedError

    def parse_response(self, http_status: int, data: Any) -> LLMResponse:
        """Normalize a decoded JSON body into an LLMResponse."""
        error_status = self._error_status(http_status, data)
        if error_status is not None:
            return LLMResponse(status=error_status, detail=self._error_message(data))

        if not isinstance(data, dict):
            return LLMResponse(status=LLMStatus.EMPTY, detail="response is not a JSON object")

        content = extract_response_content(data, self.content_path)
        if not isinstance(content, str) or not strip_thinking(content):
            return LLMResponse(status=LLMStatus.EMPTY, detail="no content in response")

        return LLMResponse(content=strip_thinking(content), tokens=self._tokens(data))

    def _tokens(self, data: Dict[str, Any]) -> int:
        if not self.tokens_path:
            return 0
        value = extract_response_content(data, self.tokens_path)
        try:
            return max(int(value), 0)
        except (TypeError, ValueError):
            return 0

    def _error_message(self, data: Any) -> str:
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict):
                return str(error.get("message") or error.get("status") or error)
            if error:
                return str(error)
        return ""

    def _error_status(self, http_status: int, data: Any) -> Optional[LLMStatus]:
        error_text = ""
        if isinstance(data, dict) and data.get("error"):
            error_text = json.dumps(data["error"]).lower()

        if http_status == 429 or any(marker in error_text for marker in QUOTA_MARKERS):
            return LLMStatus.QUOTA_EXCEEDED
        if http_status in (401, 403) or (error_text and any(m in error_text for m in AUTH_MARKERS)):
            return LLMStatus.AUTH_ERROR
        if http_status >= 400 or error_text:
            return LLMStatus.EMPTY
        return None


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions."""

    provider = Provider.OPENAI
    content_path = ".choices[0].message.content"
    tokens_path = ".usage.total_tokens"
    credential_name = "OPENAI_API_KEY"
    endpoint = "https://api.openai.com/v1/chat/completions"

    def build_request(self, request: LLMRequest) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        headers = {
            "Authorization": f"Bearer {self.config.get('openai_api_key', '')}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "temperature": request.temperature,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_content},
            ],
        }
        return self.endpoint, headers, payload


class GeminiProvider(LLMProvider):
    """Google Gemini generateContent. System prompt and user content share one text part."""

    provider = Provider.GEMINI
    content_path = ".candidates[0].content.parts[0].text"
    tokens_path = ".usageMetadata.totalTokenCount"
    credential_name = "GEMINI_API_KEY"
    endpoint_template = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

    def build_request(self, request: LLMRequest) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        url = self.endpoint_template.format(model=self.model)
        headers = {
            "x-goog-api-key": str(self.config.get("gemini_api_key", "")),
            "Content-Type": "application/json",
        }
        payload = {
            "contents": [
                {"parts": [{"text": f"{request.system_prompt}\n{request.user_content}"}]}
            ],
            "generationConfig": {"temperature": request.temperature},
        }
        return url, headers, payload


class OllamaProvider(LLMProvider):
    """Local Ollama /api/chat. Reports no token usage."""

    provider = Provider.OLLAMA
    content_path = ".message.content"
    tokens_path = None

    def auth_hint(self) -> str:
        return f"Check that Ollama is running at {self.config.get('ollama_host')} (OLLAMA_HOST)."

    def build_request(self, request: LLMRequest) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
        url = f"{self.config.get('ollama_host')}/api/chat"
        headers = {"Content-Type": "application/json"}
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_content},
            ],
            "stream": False,
            "options": {"temperature": request.temperature},
        }
        return url, headers, payload


PROVIDER_CLASSES = {
    Provider.OPENAI: OpenAIProvider,
    Provider.GEMINI: GeminiProvider,
    Provider.OLLAMA: OllamaProvider,
}


def create_provider(provider: Provider, config: Dict[str, Any]) -> LLMProvider:
    """Instantiate the implementation for a provider."""
    logger.debug(f"Creating LLM provider: {provider.value}")
    return PROVIDER_CLASSES[provider](config)
