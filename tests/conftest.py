from typing import List, Tuple

import pytest

from nlshell.config.manager import DEFAULTS
from nlshell.config.templates import PROMPTS
from nlshell.exceptions import GatewayEmptyResponse
from nlshell.llm.payload import LLMResponse


class FakeGateway:
    """Scripted stand-in for LLMGateway.

    Each reply is either a string (content), a (content, tokens) tuple, or an
    exception instance to raise.
    """

    provider_name = "fake"

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls: List[Tuple[str, str]] = []

    def complete(self, system_prompt: str, user_content: str) -> LLMResponse:
        self.calls.append((system_prompt, user_content))
        if not self.replies:
            raise GatewayEmptyResponse("no scripted reply", provider="fake")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, tuple):
            content, tokens = reply
        else:
            content, tokens = reply, 0
        return LLMResponse(content=content, tokens=tokens)

    def check_connection(self) -> bool:
        return True


@pytest.fixture
def make_config(tmp_path):
    def _make(**overrides):
        config = dict(DEFAULTS)
        config["prompts"] = dict(PROMPTS)
        config["logs_dir"] = str(tmp_path / "logs")
        config.update(overrides)
        return config

    return _make


@pytest.fixture
def fake_gateway_class():
    return FakeGateway
