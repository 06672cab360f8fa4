"""Intent classification for nlshell."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..constants import ASK_PREFIX, INTENTS, RUN_PREFIX
from ..exceptions import (
    ClassificationCircuitOpen,
    ClassificationUnrecognized,
    GatewayEmptyResponse,
)
from ..llm.parsers import parse_label
from ..utils.logging import logger
from .session import Session


class Intent(Enum):
    """Execution strategies an instruction can be routed to."""
    COMMAND = "COMMAND"
    RETRIEVE = "RETRIEVE"
    ANALYZE = "ANALYZE"
    QUESTION = "QUESTION"


@dataclass
class Classification:
    """Routing decision for one instruction."""
    intent: Intent
    instruction: str
    command: Optional[str] = None
    auto_confirm: bool = False
    tokens: int = 0


class IntentClassifier:
    """Maps an instruction to a strategy, with a consecutive-failure circuit breaker."""

    def __init__(self, gateway, prompts: Dict[str, str]):
        """Initialize the classifier.

        Args:
            gateway: LLM gateway exposing ``complete(system_prompt, user_content)``
            prompts: System prompts by name; ``classify`` is used here
        """
        self.gateway = gateway
        self.system_prompt = prompts["classify"]

    def classify(self, session: Session, instruction: str) -> Classification:
        """Classify one instruction.

        /run and /ask bypass the LLM. Anything else costs one gateway call.

        Raises:
            ClassificationUnrecognized: the reply named no known intent (retryable)
            ClassificationCircuitOpen: too many consecutive failures; end the session
            GatewayQuotaExceeded: propagated untouched, failure counter unchanged
        """
        direct = self.parse_directive(instruction)
        if direct is not None:
            session.reset_classification_failures()
            return direct

        user_content = session.context.format_prompt("New instruction", instruction)
        try:
            response = self.gateway.complete(self.system_prompt, user_content)
        except GatewayEmptyResponse as e:
            logger.debug(f"Classification call returned nothing: {e}")
            return self._unrecognized(session, "")

        session.add_tokens(response.tokens)
        label = parse_label(response.content, INTENTS)
        if label is None:
            return self._unrecognized(session, response.content)

        session.reset_classification_failures()
        return Classification(Intent(label), instruction, tokens=response.tokens)

    @staticmethod
    def parse_directive(instruction: str) -> Optional[Classification]:
        """Route /run and /ask without the LLM; None for anything else."""
        if instruction.startswith(RUN_PREFIX) and instruction[len(RUN_PREFIX):].strip():
            command = instruction[len(RUN_PREFIX):].strip()
            return Classification(Intent.COMMAND, instruction, command=command, auto_confirm=True)
        if instruction.startswith(ASK_PREFIX) and instruction[len(ASK_PREFIX):].strip():
            question = instruction[len(ASK_PREFIX):].strip()
            return Classification(Intent.QUESTION, question)
        return None

    @staticmethod
    def _unrecognized(session: Session, reply: str) -> Classification:
        attempts = session.record_classification_failure()
        limit = session.max_failed_classifications
        logger.debug(f"Unrecognized classification reply: {reply!r}")
        if session.circuit_open:
            raise ClassificationCircuitOpen(
                "Too many failed classification attempts. Ending session to prevent an infinite loop.",
                attempts=attempts, max_attempts=limit,
            )
        raise ClassificationUnrecognized(
            f"LLM failed to classify intent (attempt {attempts}/{limit}). Please try again.",
            attempts=attempts, max_attempts=limit,
        )


def create_intent_classifier(gateway, prompts: Dict[str, str]) -> IntentClassifier:
    """Create an intent classifier."""
    return IntentClassifier(gateway, prompts)
