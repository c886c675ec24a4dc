"""
Error taxonomy for configuration generation.

Every failure a caller can observe maps to exactly one of these classes.
The user-facing message is safe to render; the detail is for operators only.
"""

from typing import Optional

DEFAULT_FAILURE_MESSAGE = "Failed to generate configuration, please try again"
MISSING_FIELDS_MESSAGE = "Missing required fields: prompt and useCase"


class GenerationError(Exception):
    """Base class for all generation failures.

    Attributes:
        message: User-facing sentence
        status_code: HTTP status used at the server boundary
        detail: Internal diagnostic text (provider error name/message)
    """

    user_message = DEFAULT_FAILURE_MESSAGE
    status_code = 500

    def __init__(self, detail: Optional[str] = None, message: Optional[str] = None):
        self.message = message or self.user_message
        self.detail = detail or self.message
        super().__init__(self.message)


class InvalidInput(GenerationError):
    """Request rejected before any upstream call."""
    user_message = MISSING_FIELDS_MESSAGE
    status_code = 400


class MissingCredentials(GenerationError):
    """No provider credential configured."""
    user_message = "Server configuration error: credentials not found"


class RateLimited(GenerationError):
    """Provider rejected the request rate."""
    user_message = "Request limit exceeded, try again later"


class Unauthorized(GenerationError):
    """Provider denied access."""
    user_message = "Access denied, check permissions"


class UpstreamServerError(GenerationError):
    """Provider-side (5xx) failure."""


class GenerationTimeout(GenerationError):
    """No response within the configured window."""
    user_message = "Request timed out, please try again"


class ProviderContractViolation(GenerationError):
    """Response received but no text could be extracted from it."""


class UnknownGenerationError(GenerationError):
    """Anything the provider adapters could not classify."""
