"""Core application logic for nlshell."""

from .application import NLShell, create_application
from .classifier import Classification, Intent, IntentClassifier, create_intent_classifier
from .context import ContextManager, ContextStats
from .dispatcher import Dispatcher, create_dispatcher
from .session import Session

__all__ = [
    "NLShell",
    "create_application",
    "Classification",
    "Intent",
    "IntentClassifier",
    "create_intent_classifier",
    "ContextManager",
    "ContextStats",
    "Dispatcher",
    "create_dispatcher",
    "Session",
]
