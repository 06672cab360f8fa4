"""LLM gateway for API communication in nlshell."""

import json
from typing import Dict, Any, Optional

import requests

from ..exceptions import (
    GatewayAuthError,
    GatewayConfigError,
    GatewayEmptyResponse,
    GatewayQuotaExceeded,
)
from ..utils.logging import logger
from .parsers import extract_response_content, parse_llm_thought
from .payload import (
    LLMProvider,
    LLMRequest,
    LLMResponse,
    LLMStatus,
    Provider,
    create_provider,
)


class LLMGateway:
    """Uniform interface to the configured text-generation provider."""

    def __init__(self, config: Dict[str, Any], provider: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        """Initialize the gateway.

        Args:
            config: Application configuration
            provider: Provider identifier; defaults to ``default_provider``.
                Unknown identifiers raise GatewayInvalidProvider.
            session: requests session to reuse (tests inject a fake)
        """
        self.config = config
        self.provider_id = Provider.parse(provider or config.get("default_provider", ""))
        self.provider: LLMProvider = create_provider(self.provider_id, config)
        self.temperature = float(config.get("temperature", 0.7))
        self.timeout = int(config.get("request_timeout", 120)) or None
        self.debug_raw = bool(config.get("debug_raw_messages", False))
        self.response_language = config.get("response_language", "")
        self.http = session or requests.Session()

    @property
    def provider_name(self) -> str:
        return self.provider_id.value

    def check_credentials(self) -> None:
        """Raise GatewayConfigError when the provider's credential is missing."""
        missing = self.provider.missing_credential()
        if missing:
            raise GatewayConfigError(
                f"{missing} is required when using {self.provider_name} models. "
                "Please set it in your environment or .env file.",
                provider=self.provider_name,
            )

    def check_connection(self) -> bool:
        """Probe the local Ollama server. Hosted providers are not probed."""
        if self.provider_id is not Provider.OLLAMA:
            return True
        host = self.config.get("ollama_host", "")
        try:
            self.http.get(f"{host}/api/tags", timeout=5)
            return True
        except requests.RequestException:
            logger.warning(f"Cannot connect to Ollama at {host}")
            logger.warning("Make sure Ollama is running or update OLLAMA_HOST in your .env file.")
            return False

    def build_request(self, system_prompt: str, user_content: str) -> LLMRequest:
        """Create a fresh request, appending the configured response language."""
        if self.response_language:
            system_prompt = f"{system_prompt}\nRespond in {self.response_language}."
        return LLMRequest(
            provider=self.provider_id,
            system_prompt=system_prompt,
            user_content=user_content,
            temperature=self.temperature,
        )

    def send(self, request: LLMRequest) -> LLMResponse:
        """Perform one provider call. Never raises for provider-side failures.

        Returns:
            LLMResponse whose status describes the outcome
        """
        url, headers, payload = self.provider.build_request(request)

        if self.debug_raw:
            logger.raw(f"{self.provider_name} raw request:\n{json.dumps(payload, indent=2)}")

        logger.debug(f"Making LLM API call to {self.provider_name}")

        try:
            response = self.http.post(url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"LLM ({self.provider_name}) request failed: {e}")
            return LLMResponse(status=LLMStatus.EMPTY, detail=str(e))

        if self.debug_raw:
            logger.raw(f"{self.provider_name} raw response:\n{response.text}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse LLM ({self.provider_name}) response as JSON: {e}")
            data = None

        result = self.provider.parse_response(response.status_code, data)

        thought = parse_llm_thought(self._raw_content(data))
        if thought:
            logger.debug(f"[{self.provider_name} thought]: {thought}")

        return result

    def complete(self, system_prompt: str, user_content: str) -> LLMResponse:
        """Send a prompt pair and return normalized content and token count.

        Raises:
            GatewayConfigError: required credential missing
            GatewayQuotaExceeded: provider quota exhausted
            GatewayAuthError: provider rejected the credential
            GatewayEmptyResponse: no parseable content
        """
        self.check_credentials()
        response = self.send(self.build_request(system_prompt, user_content))

        if response.status is LLMStatus.QUOTA_EXCEEDED:
            raise GatewayQuotaExceeded(
                f"LLM ({self.provider_name}) quota exceeded: {response.detail or 'rate limited'}",
                provider=self.provider_name,
            )
        if response.status is LLMStatus.AUTH_ERROR:
            message = (f"LLM ({self.provider_name}) authentication failed: "
                       f"{response.detail or 'credential rejected'}. {self.provider.auth_hint()}")
            logger.error(message)
            raise GatewayAuthError(message, provider=self.provider_name)
        if not response.ok:
            raise GatewayEmptyResponse(
                f"LLM ({self.provider_name}) response was empty or unparseable.",
                provider=self.provider_name,
            )
        return response

    def _raw_content(self, data: Any) -> str:
        if not isinstance(data, dict):
            return ""
        content = extract_response_content(data, self.provider.content_path)
        return content if isinstance(content, str) else ""


def create_llm_client(config: Dict[str, Any], provider: Optional[str] = None) -> LLMGateway:
    """Create a configured LLM gateway instance."""
    return LLMGateway(config, provider)
