"""LLM-related exception classes.

Contains all exception classes for message generation:
- GenerationErrorKind: What made a generation call fail
- LLMError: Base exception for LLM-related errors
- MissingAPIKeyError: Raised when no API key is available
- GenerationError: Raised when the remote call does not produce a message
"""

from enum import Enum


class GenerationErrorKind(Enum):
    """Cause of a failed generation call."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    REMOTE = "remote"
    MALFORMED = "malformed"
    NO_CANDIDATES = "no_candidates"
    CANCELLED = "cancelled"


class LLMError(Exception):
    """Base exception for LLM-related errors."""

    pass


class MissingAPIKeyError(LLMError):
    """Raised when the required API key is not set."""

    pass


class GenerationError(LLMError):
    """Raised when the remote model call fails or returns nothing usable."""

    def __init__(self, message: str, kind: GenerationErrorKind = GenerationErrorKind.REMOTE):
        self.kind = kind
        super().__init__(message)
