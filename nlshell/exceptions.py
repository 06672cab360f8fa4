"""Exception hierarchy for nlshell.

Gateway and classification failures are raised as exceptions and caught at the
strategy boundary in the dispatcher. Command outcomes (non-zero exit, timeout,
user abort) are not exceptions; they travel as data on ``CommandResult``.
"""


class NLShellError(Exception):
    """Base class for all nlshell errors."""


class GatewayError(NLShellError):
    """An LLM gateway call could not produce content."""

    def __init__(self, message: str, provider: str = ""):
        super().__init__(message)
        self.provider = provider


class GatewayEmptyResponse(GatewayError):
    """The provider returned nothing usable. The current step fails, the session goes on."""


class GatewayAuthError(GatewayEmptyResponse):
    """The provider rejected the credentials."""


class GatewayQuotaExceeded(GatewayError):
    """The provider reported an exhausted quota or rate limit.

    Not a subclass of GatewayEmptyResponse: it must end the current
    instruction rather than degrade it.
    """


class GatewayInvalidProvider(GatewayError):
    """Unknown provider identifier. Raised before any network call."""


class GatewayConfigError(GatewayError):
    """A required credential is missing. Unrecoverable for the session."""


class ClassificationUnrecognized(NLShellError):
    """The classifier reply did not name a known intent."""

    def __init__(self, message: str, attempts: int = 0, max_attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts
        self.max_attempts = max_attempts


class ClassificationCircuitOpen(ClassificationUnrecognized):
    """Too many consecutive unrecognized classifications; the session must end."""


class RetrievalEmpty(NLShellError):
    """A retrieval produced no content."""


class SessionExit(NLShellError):
    """Raised by an exit directive to leave the session loop."""

    def __init__(self, exit_code: int = 0):
        super().__init__(f"session exit ({exit_code})")
        self.exit_code = exit_code
