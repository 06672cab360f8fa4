"""Rolling conversation context and full transcript for one session."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..constants import (
    CONTEXT_FILE_SUFFIX,
    DEFAULT_MAX_LAST_CONTEXT_WORDS,
    FULL_CONTEXT_FILE_SUFFIX,
)
from ..utils.helpers import (
    collapse_whitespace,
    count_words,
    get_session_timestamp,
    last_words,
    safe_file_write,
)
from ..utils.logging import logger


@dataclass
class ContextStats:
    """Word counts shown in the status line."""
    context_words: int = 0
    file_words: int = 0
    full_file_words: int = 0
    last_interaction_words: int = 0


class ContextManager:
    """Keeps a bounded rolling window and an unbounded transcript.

    Both views are rewritten to disk after every update so a crashed session
    can be inspected. They are never read back to restore state.
    """

    def __init__(self, logs_dir: Optional[Path] = None,
                 max_words: int = DEFAULT_MAX_LAST_CONTEXT_WORDS,
                 timestamp: Optional[str] = None):
        """Initialize the context manager.

        Args:
            logs_dir: Directory for the snapshot files; None keeps everything in memory
            max_words: Size of the rolling window in words
            timestamp: Session start stamp used in the file names
        """
        self.max_words = max_words
        self.last_context = ""
        self.full_context = ""
        self.last_interaction = ""

        self.context_file: Optional[Path] = None
        self.full_context_file: Optional[Path] = None
        if logs_dir is not None:
            stamp = timestamp or get_session_timestamp()
            self.context_file = logs_dir / f"{stamp}{CONTEXT_FILE_SUFFIX}"
            self.full_context_file = logs_dir / f"{stamp}{FULL_CONTEXT_FILE_SUFFIX}"
            try:
                logs_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                logger.warning(f"Could not create logs directory {logs_dir}: {e}. "
                               "Context will not be saved.")
                self.context_file = None
                self.full_context_file = None

    def record_interaction(self, text: str) -> str:
        """Append one interaction record and recompute the rolling window.

        Returns:
            The normalized single-line record
        """
        record = collapse_whitespace(text)
        self.last_interaction = record
        self.full_context = f"{self.full_context}{record}\n"
        self.last_context = last_words(self.full_context, self.max_words)
        self._persist()
        return record

    def clear(self) -> None:
        """Forget the conversation and truncate the snapshot files."""
        self.last_context = ""
        self.full_context = ""
        self.last_interaction = ""
        self._persist()

    def format_prompt(self, label: str, instruction: str) -> str:
        """User content for an LLM call, prefixed with the rolling window when there is one."""
        if not self.last_context:
            return instruction
        return f"Previous interaction:\n{self.last_context}\n\n{label}: {instruction}"

    def stats(self) -> ContextStats:
        """Current word counts, file counts read back from disk."""
        return ContextStats(
            context_words=count_words(self.last_context),
            file_words=self._file_words(self.context_file),
            full_file_words=self._file_words(self.full_context_file),
            last_interaction_words=count_words(self.last_interaction),
        )

    def _persist(self) -> None:
        if self.context_file is None or self.full_context_file is None:
            return
        safe_file_write(self.context_file, self.last_context, "context snapshot")
        safe_file_write(self.full_context_file, self.full_context, "full context snapshot")

    @staticmethod
    def _file_words(path: Optional[Path]) -> int:
        if path is None or not path.exists():
            return 0
        try:
            return count_words(path.read_text(encoding="utf-8"))
        except OSError:
            return 0
