import pytest
import requests

from nlshell.exceptions import (
    GatewayAuthError,
    GatewayConfigError,
    GatewayEmptyResponse,
    GatewayInvalidProvider,
    GatewayQuotaExceeded,
)
from nlshell.llm.client import LLMGateway
from nlshell.llm.payload import LLMStatus, Provider, create_provider, LLMRequest
from nlshell.utils.logging import logger


class FakeHTTPResponse:
    def __init__(self, status_code, data):
        self.status_code = status_code
        self._data = data
        self.text = str(data)

    def json(self):
        if isinstance(self._data, Exception):
            raise self._data
        return self._data


class FakeHTTP:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.posts.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _config(make_config, **overrides):
    base = {"gemini_api_key": "g-key", "openai_api_key": "o-key"}
    base.update(overrides)
    return make_config(**base)


def test_unknown_provider_raises_before_any_call(make_config) -> None:
    with pytest.raises(GatewayInvalidProvider):
        LLMGateway(make_config(), provider="claude")


def test_missing_credential_raises_config_error(make_config) -> None:
    http = FakeHTTP(FakeHTTPResponse(200, {}))
    gateway = LLMGateway(make_config(), provider="openai", session=http)

    with pytest.raises(GatewayConfigError):
        gateway.complete("system", "user")
    assert http.posts == []


def test_gemini_success_returns_content_and_tokens(make_config) -> None:
    http = FakeHTTP(FakeHTTPResponse(200, {
        "candidates": [{"content": {"parts": [{"text": "COMMAND"}]}}],
        "usageMetadata": {"totalTokenCount": 17},
    }))
    gateway = LLMGateway(_config(make_config), provider="gemini", session=http)

    response = gateway.complete("classify this", "list files")

    assert response.content == "COMMAND"
    assert response.tokens == 17
    post = http.posts[0]
    assert post["headers"]["x-goog-api-key"] == "g-key"
    assert post["json"]["contents"][0]["parts"][0]["text"] == "classify this\nlist files"


def test_openai_strips_thinking_blocks(make_config) -> None:
    http = FakeHTTP(FakeHTTPResponse(200, {
        "choices": [{"message": {"content": "<think>\nhmm\n</think>\nls -la"}}],
        "usage": {"total_tokens": 5},
    }))
    gateway = LLMGateway(_config(make_config), provider="openai", session=http)

    response = gateway.complete("system", "user")

    assert response.content == "ls -la"
    assert http.posts[0]["headers"]["Authorization"] == "Bearer o-key"


def test_ollama_needs_no_credential_and_reports_no_tokens(make_config) -> None:
    http = FakeHTTP(FakeHTTPResponse(200, {"message": {"content": "QUESTION"}}))
    gateway = LLMGateway(make_config(), provider="ollama", session=http)

    response = gateway.complete("system", "user")

    assert response.content == "QUESTION"
    assert response.tokens == 0
    assert http.posts[0]["url"].endswith("/api/chat")
    assert http.posts[0]["json"]["stream"] is False


def test_quota_error_is_not_an_empty_response(make_config) -> None:
    http = FakeHTTP(FakeHTTPResponse(429, {"error": {"message": "Quota exceeded for requests"}}))
    gateway = LLMGateway(_config(make_config), provider="gemini", session=http)

    with pytest.raises(GatewayQuotaExceeded) as excinfo:
        gateway.complete("system", "user")
    assert not isinstance(excinfo.value, GatewayEmptyResponse)


def test_auth_error_is_an_empty_response(make_config) -> None:
    http = FakeHTTP(FakeHTTPResponse(401, {"error": {"message": "Invalid API key"}}))
    gateway = LLMGateway(_config(make_config), provider="openai", session=http)

    with pytest.raises(GatewayAuthError) as excinfo:
        gateway.complete("system", "user")
    assert isinstance(excinfo.value, GatewayEmptyResponse)


def test_network_failure_becomes_empty_status(make_config) -> None:
    http = FakeHTTP(error=requests.ConnectionError("refused"))
    gateway = LLMGateway(make_config(), provider="ollama", session=http)

    response = gateway.send(gateway.build_request("system", "user"))
    assert response.status is LLMStatus.EMPTY

    with pytest.raises(GatewayEmptyResponse):
        gateway.complete("system", "user")


def test_response_language_is_appended(make_config) -> None:
    gateway = LLMGateway(_config(make_config, response_language="French"), provider="gemini",
                         session=FakeHTTP())

    request = gateway.build_request("Be brief.", "hi")

    assert request.system_prompt.endswith("Respond in French.")


def test_requests_are_independent(make_config) -> None:
    provider = create_provider(Provider.OPENAI, _config(make_config))

    first = provider.build_request(LLMRequest(Provider.OPENAI, "sys", "one"))
    second = provider.build_request(LLMRequest(Provider.OPENAI, "sys", "two"))

    assert first[2]["messages"][1]["content"] == "one"
    assert second[2]["messages"][1]["content"] == "two"


def test_debug_raw_dumps_request_and_response_to_stderr(make_config, monkeypatch,
                                                        capsys) -> None:
    monkeypatch.setattr(logger, "raw_enabled", True)
    http = FakeHTTP(FakeHTTPResponse(200, {"message": {"content": "QUESTION"}}))
    gateway = LLMGateway(make_config(debug_raw_messages=True), provider="ollama", session=http)

    gateway.complete("classify this", "what time is it")

    captured = capsys.readouterr()
    assert "ollama raw request" in captured.err
    assert "what time is it" in captured.err
    assert "ollama raw response" in captured.err
    assert "QUESTION" in captured.err
    assert "raw request" not in captured.out


def test_raw_dump_off_by_default(make_config, monkeypatch, capsys) -> None:
    monkeypatch.setattr(logger, "raw_enabled", True)
    http = FakeHTTP(FakeHTTPResponse(200, {"message": {"content": "QUESTION"}}))
    gateway = LLMGateway(make_config(), provider="ollama", session=http)

    gateway.complete("classify this", "what time is it")

    assert "raw request" not in capsys.readouterr().err
