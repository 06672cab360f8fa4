import pytest

from nlshell.config.templates import PROMPTS
from nlshell.core.classifier import Intent, IntentClassifier
from nlshell.core.context import ContextManager
from nlshell.core.session import Session
from nlshell.exceptions import (
    ClassificationCircuitOpen,
    ClassificationUnrecognized,
    GatewayEmptyResponse,
    GatewayQuotaExceeded,
)


def _setup(fake_gateway_class, replies):
    gateway = fake_gateway_class(replies)
    session = Session(provider="fake", context=ContextManager())
    return gateway, session, IntentClassifier(gateway, PROMPTS)


def test_run_directive_bypasses_llm(fake_gateway_class) -> None:
    gateway, session, classifier = _setup(fake_gateway_class, [])

    result = classifier.classify(session, "/run echo hi")

    assert result.intent is Intent.COMMAND
    assert result.command == "echo hi"
    assert result.auto_confirm is True
    assert gateway.calls == []


def test_ask_directive_rewrites_instruction(fake_gateway_class) -> None:
    gateway, session, classifier = _setup(fake_gateway_class, [])

    result = classifier.classify(session, "/ask what is a pid")

    assert result.intent is Intent.QUESTION
    assert result.instruction == "what is a pid"
    assert gateway.calls == []


def test_llm_label_is_parsed_and_tokens_counted(fake_gateway_class) -> None:
    gateway, session, classifier = _setup(fake_gateway_class, [("retrieve", 9)])

    result = classifier.classify(session, "what is in notes.txt")

    assert result.intent is Intent.RETRIEVE
    assert session.total_tokens == 9
    assert gateway.calls[0][0] == PROMPTS["classify"]


def test_circuit_opens_after_three_consecutive_failures(fake_gateway_class) -> None:
    gateway, session, classifier = _setup(
        fake_gateway_class, ["banana", GatewayEmptyResponse("empty"), "maybe"]
    )

    with pytest.raises(ClassificationUnrecognized) as first:
        classifier.classify(session, "do something")
    assert first.value.attempts == 1
    assert not isinstance(first.value, ClassificationCircuitOpen)

    with pytest.raises(ClassificationUnrecognized):
        classifier.classify(session, "do something")

    with pytest.raises(ClassificationCircuitOpen) as third:
        classifier.classify(session, "do something")
    assert third.value.attempts == 3
    assert session.failed_classifications == 3


def test_success_resets_failure_counter(fake_gateway_class) -> None:
    gateway, session, classifier = _setup(fake_gateway_class, ["nope", "nope", "QUESTION", "nope"])

    for _ in range(2):
        with pytest.raises(ClassificationUnrecognized):
            classifier.classify(session, "hmm")
    classifier.classify(session, "hmm")
    assert session.failed_classifications == 0

    with pytest.raises(ClassificationUnrecognized) as excinfo:
        classifier.classify(session, "hmm")
    assert excinfo.value.attempts == 1


def test_quota_propagates_without_counting(fake_gateway_class) -> None:
    gateway, session, classifier = _setup(
        fake_gateway_class, [GatewayQuotaExceeded("quota", provider="fake")]
    )

    with pytest.raises(GatewayQuotaExceeded):
        classifier.classify(session, "list files")
    assert session.failed_classifications == 0
