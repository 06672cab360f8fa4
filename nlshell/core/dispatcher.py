"""Per-instruction routing: directives, classification and the four strategies."""

from typing import Any, Dict, Optional

from ..commands import CommandGate, CommandResult
from ..constants import (
    CLEAR_DIRECTIVE,
    CLR_BOLD_GREEN,
    CLR_BOLD_YELLOW,
    CLR_RESET,
    EXIT_DIRECTIVES,
    RETRIEVAL_MODES,
)
from ..exceptions import (
    ClassificationCircuitOpen,
    ClassificationUnrecognized,
    GatewayEmptyResponse,
    GatewayQuotaExceeded,
    RetrievalEmpty,
    SessionExit,
)
from ..llm.parsers import clean_command, parse_label
from ..search import SearchFunction, get_search_function
from ..utils.helpers import format_template_string, get_current_context
from ..utils.logging import logger
from .classifier import Classification, Intent, IntentClassifier
from .heuristics import mentions_file, refers_to_previous_output
from .session import Session

EMPTY_RETRIEVAL_MESSAGE = "Data retrieval failed or returned empty content."


class Dispatcher:
    """Routes one instruction at a time to its strategy."""

    def __init__(self, session: Session, gateway, classifier: IntentClassifier,
                 gate: CommandGate, config: Dict[str, Any],
                 search_function: Optional[SearchFunction] = None):
        """Initialize the dispatcher.

        Args:
            session: Live session state
            gateway: LLM gateway exposing ``complete(system_prompt, user_content)``
            classifier: Intent classifier
            gate: Command safety gate
            config: Application configuration (``prompts`` and search settings)
            search_function: Web search override; defaults to the configured engine
        """
        self.session = session
        self.gateway = gateway
        self.classifier = classifier
        self.gate = gate
        self.config = config
        self.prompts: Dict[str, str] = config["prompts"]
        self.search_function = search_function

        self._strategies = {
            Intent.COMMAND: self._handle_command,
            Intent.RETRIEVE: self._handle_retrieve,
            Intent.ANALYZE: self._handle_analyze,
            Intent.QUESTION: self._handle_question,
        }

    @property
    def context(self):
        return self.session.context

    def process(self, instruction: str) -> bool:
        """Handle one instruction.

        Returns:
            False when the session must end, True otherwise

        Raises:
            SessionExit: an exit directive was given
            GatewayConfigError: a provider credential is missing
        """
        instruction = instruction.strip()
        if not instruction:
            return True

        if instruction in EXIT_DIRECTIVES:
            print("Exiting...")
            raise SessionExit(0)

        if instruction == CLEAR_DIRECTIVE:
            print("Clearing context...")
            self.context.clear()
            self.session.reset_classification_failures()
            print("Context cleared successfully!")
            return True

        try:
            classification = self.classifier.classify(self.session, instruction)
        except ClassificationCircuitOpen as e:
            logger.error(str(e))
            return False
        except ClassificationUnrecognized as e:
            logger.error(str(e))
            return True
        except GatewayQuotaExceeded as e:
            self._report_quota(e)
            return True

        print(f"Mode: {classification.intent.value}")
        logger.mode(f"Dispatching to {classification.intent.value} strategy")

        try:
            self._strategies[classification.intent](classification)
        except GatewayQuotaExceeded as e:
            self._report_quota(e)
        except GatewayEmptyResponse as e:
            logger.error(f"No usable response from the LLM: {e}")
        return True

    def _handle_command(self, classification: Classification) -> None:
        instruction = classification.instruction
        command = classification.command
        if command is None:
            user_content = self.context.format_prompt("New instruction", instruction)
            command = clean_command(self._ask("command", user_content))
            if not command:
                logger.error("Failed to generate a command from the LLM.")
                return

        result = self.gate.run(command, auto_confirm=classification.auto_confirm)
        self.context.record_interaction(
            f"Instruction: '{instruction}'\nCommand: '{command}'\nOutput: '{result.output}'"
        )
        if result.needs_analysis:
            self._analyze_failure(result)

    def _analyze_failure(self, result: CommandResult) -> None:
        print(f"{CLR_BOLD_YELLOW}Command failed (exit status: {result.exit_code}). "
              f"Getting analysis...{CLR_RESET}")
        user_content = self.context.format_prompt(
            "Analyze this command and output",
            f"Command: '{result.command}'\nOutput: '{result.output}'",
        )
        try:
            analysis = self._ask("failure_analysis", user_content)
        except GatewayEmptyResponse:
            print("Failed to get analysis from LLM.")
            return
        print("Analysis:")
        print(f"{CLR_BOLD_GREEN}{analysis}{CLR_RESET}")

    def _handle_retrieve(self, classification: Classification) -> None:
        instruction = classification.instruction
        print("Retrieving data...")
        reply = self._ask("retrieval_mode",
                          self.context.format_prompt("New instruction", instruction))
        mode = parse_label(reply, RETRIEVAL_MODES)
        if mode is None:
            logger.error(f"LLM failed to choose a retrieval mode (got '{reply}').")
            return

        logger.mode(f"Retrieval mode: {mode}")
        try:
            if mode == "LOCAL_SEARCH":
                content = self._retrieve_local(instruction)
            else:
                content = self._retrieve_web(instruction)
        except RetrievalEmpty as e:
            logger.debug(str(e))
            print(EMPTY_RETRIEVAL_MESSAGE)
            return

        try:
            summary = self._ask(
                "summarize",
                f"Original request: '{instruction}'\nRetrieved content: '{content}'",
            )
        except GatewayEmptyResponse:
            print("Failed to summarize the retrieved content.")
            summary = ""

        if summary:
            print("Answer:")
            print(f"{CLR_BOLD_GREEN}{summary}{CLR_RESET}")
        self.context.record_interaction(
            f"Instruction: '{instruction}'\nRetrieved Content: '{content}'\nAnswer: '{summary}'"
        )

    def _retrieve_local(self, instruction: str) -> str:
        """Have the LLM write a read-only command and run it through the gate.

        Raises:
            RetrievalEmpty: no command, a declined command, or no output
        """
        user_content = self.context.format_prompt("New instruction (for local data retrieval)",
                                                  instruction)
        command = clean_command(self._ask("local_retrieval", user_content))
        if not command:
            logger.error("Failed to generate a local data retrieval command.")
            raise RetrievalEmpty("no retrieval command")
        result = self.gate.run(command)
        if result.aborted or not result.output.strip():
            raise RetrievalEmpty(f"'{command}' produced no content")
        return result.output

    def _retrieve_web(self, instruction: str) -> str:
        search = self.search_function
        if search is None:
            try:
                search = get_search_function(self.config.get("web_search_engine", ""), self.config)
            except ValueError as e:
                logger.error(str(e))
                raise RetrievalEmpty(str(e))

        logger.system(f"Searching the web for: {instruction}")
        result = search(instruction)
        message = result.get("message") if isinstance(result, dict) else None
        if not message or not str(message).strip():
            raise RetrievalEmpty(f"web search returned nothing for '{instruction}'")
        content = str(message)
        print(f"Retrieved content:\n{content}")
        return content

    def _handle_analyze(self, classification: Classification) -> None:
        instruction = classification.instruction
        print("Analyzing data...")

        retrieved = ""
        if refers_to_previous_output(instruction):
            logger.debug("Instruction refers to previous output")
            user_content = self.context.format_prompt("New instruction (for analysis)", instruction)
            if self.context.last_interaction:
                user_content = (f"Last interaction:\n{self.context.last_interaction}\n\n"
                                f"{user_content}")
        elif mentions_file(instruction):
            logger.debug("Instruction mentions a file, retrieving it first")
            try:
                retrieved = self._retrieve_local(instruction)
            except RetrievalEmpty as e:
                logger.debug(str(e))
                print(EMPTY_RETRIEVAL_MESSAGE)
                return
            user_content = f"Instruction: '{instruction}'\nData: '{retrieved}'"
        else:
            user_content = self.context.format_prompt("New instruction (for analysis)", instruction)

        analysis = self._ask("analyze", user_content)
        print("Analysis:")
        print(f"{CLR_BOLD_GREEN}{analysis}{CLR_RESET}")

        record = f"Instruction: '{instruction}'\n"
        if retrieved:
            record += f"Retrieved Content: '{retrieved}'\n"
        self.context.record_interaction(f"{record}Analysis: '{analysis}'")

    def _handle_question(self, classification: Classification) -> None:
        question = classification.instruction
        print("Answering your question...")
        answer = self._ask("question", self.context.format_prompt("New question", question))
        print("Answer:")
        print(f"{CLR_BOLD_GREEN}{answer}{CLR_RESET}")
        self.context.record_interaction(f"Question: '{question}'\nAnswer: '{answer}'")

    def _ask(self, prompt_name: str, user_content: str) -> str:
        """One gateway call with a named system prompt. Tokens go to the session."""
        system_prompt = format_template_string(self.prompts[prompt_name], **get_current_context())
        response = self.gateway.complete(system_prompt, user_content)
        self.session.add_tokens(response.tokens)
        return response.content

    @staticmethod
    def _report_quota(error: GatewayQuotaExceeded) -> None:
        logger.error(f"{error} Instruction ended.")


def create_dispatcher(session: Session, gateway, classifier: IntentClassifier,
                      gate: CommandGate, config: Dict[str, Any],
                      search_function: Optional[SearchFunction] = None) -> Dispatcher:
    """Create a dispatcher."""
    return Dispatcher(session, gateway, classifier, gate, config, search_function)
