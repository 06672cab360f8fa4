"""Process-wide session state."""

from dataclasses import dataclass, field

from ..constants import MAX_FAILED_CLASSIFICATIONS
from ..utils.helpers import get_session_timestamp
from .context import ContextManager


@dataclass
class Session:
    """State of the single live session.

    Owned by the session loop and handed explicitly to the classifier and
    dispatcher; nothing else mutates it.
    """
    provider: str
    context: ContextManager
    total_tokens: int = 0
    failed_classifications: int = 0
    max_failed_classifications: int = MAX_FAILED_CLASSIFICATIONS
    started_at: str = field(default_factory=get_session_timestamp)

    def add_tokens(self, tokens: int) -> None:
        self.total_tokens += max(int(tokens or 0), 0)

    def record_classification_failure(self) -> int:
        """Increment the failure counter, capped at the ceiling. Returns the new value."""
        self.failed_classifications = min(self.failed_classifications + 1,
                                          self.max_failed_classifications)
        return self.failed_classifications

    def reset_classification_failures(self) -> None:
        self.failed_classifications = 0

    @property
    def circuit_open(self) -> bool:
        return self.failed_classifications >= self.max_failed_classifications

    def status_line(self) -> str:
        stats = self.context.stats()
        return (f"Tokens used: {self.total_tokens} | Context: {stats.context_words} | "
                f"File: {stats.file_words} | Full file: {stats.full_file_words} | "
                f"Last Interaction: {stats.last_interaction_words}")
