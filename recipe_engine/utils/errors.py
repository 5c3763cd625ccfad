"""Error types shared by the pipeline and its callers.

Every failure that reaches a caller is a RecipeServiceError carrying a
RecipeErrorType, so network/timeout failures from the calling layer and
validation failures from the pipeline are handled the same way upstream.
Allergy exhaustion is not an error: it returns a placeholder recipe.
"""

from enum import Enum
from typing import Optional


class RecipeErrorType(str, Enum):
    """Categories of recipe service failures."""

    VALIDATION = "validation"
    GENERATION = "generation"
    NETWORK = "network"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class RecipeServiceError(Exception):
    """Raised for any failure surfaced to a caller of the recipe service."""

    def __init__(self, error_type: RecipeErrorType, message: str, details: Optional[str] = None):
        self.type = RecipeErrorType(error_type)
        self.message = message
        self.details = details
        super().__init__(f"{self.type.value}: {message}")

    @property
    def is_retryable(self) -> bool:
        """Only transport-level failures are worth retrying."""
        return self.type in (RecipeErrorType.NETWORK, RecipeErrorType.TIMEOUT)

    def to_dict(self) -> dict:
        payload = {"type": self.type.value, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(RecipeServiceError):
    """Bad caller input. Never retried."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(RecipeErrorType.VALIDATION, message, details)


class GenerationError(RecipeServiceError):
    """A required field could not be parsed or catalog data is inconsistent."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(RecipeErrorType.GENERATION, message, details)


_NETWORK_KEYWORDS = ("network request failed", "failed to fetch", "network error", "connection")
_TIMEOUT_KEYWORDS = ("timeout", "timed out", "etimedout")
_GENERATION_KEYWORDS = ("failed to generate", "invalid response", "parse")

_FRIENDLY_MESSAGES = {
    RecipeErrorType.VALIDATION: "Please check your ingredients and try again.",
    RecipeErrorType.GENERATION: "Unable to create a recipe with the provided ingredients.",
    RecipeErrorType.NETWORK: "Unable to reach our servers. Please check your internet connection.",
    RecipeErrorType.TIMEOUT: "The request took too long to complete. Please try again later.",
    RecipeErrorType.UNKNOWN: "Something went wrong while generating your recipe.",
}


def classify_error(exc: BaseException) -> RecipeServiceError:
    """Map an arbitrary exception onto a RecipeServiceError.

    RecipeServiceError instances pass through unchanged. Anything else is
    classified from its type and message text.

    Args:
        exc: Exception raised somewhere below the service boundary.

    Returns:
        RecipeServiceError with the matching RecipeErrorType.
    """
    if isinstance(exc, RecipeServiceError):
        return exc

    text = str(exc).lower()
    if isinstance(exc, TimeoutError) or any(keyword in text for keyword in _TIMEOUT_KEYWORDS):
        return RecipeServiceError(
            RecipeErrorType.TIMEOUT, _FRIENDLY_MESSAGES[RecipeErrorType.TIMEOUT], details=str(exc) or None
        )
    if isinstance(exc, ConnectionError) or any(keyword in text for keyword in _NETWORK_KEYWORDS):
        return RecipeServiceError(
            RecipeErrorType.NETWORK, _FRIENDLY_MESSAGES[RecipeErrorType.NETWORK], details=str(exc) or None
        )
    if any(keyword in text for keyword in _GENERATION_KEYWORDS):
        return RecipeServiceError(
            RecipeErrorType.GENERATION, _FRIENDLY_MESSAGES[RecipeErrorType.GENERATION], details=str(exc) or None
        )
    return RecipeServiceError(
        RecipeErrorType.UNKNOWN,
        str(exc) or _FRIENDLY_MESSAGES[RecipeErrorType.UNKNOWN],
        details=type(exc).__name__,
    )


def user_friendly_message(error: RecipeServiceError) -> str:
    """End-user copy for an error. Validation errors keep their own message."""
    if error.type == RecipeErrorType.VALIDATION and error.message:
        return error.message
    return _FRIENDLY_MESSAGES.get(error.type, _FRIENDLY_MESSAGES[RecipeErrorType.UNKNOWN])
