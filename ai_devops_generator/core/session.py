"""
Generation session state.

Models one user's form submission as an explicit state machine:
Idle -> Submitting -> Success | Failure, and back to Submitting on retry.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from ai_devops_generator.exceptions import GenerationError, InvalidInput

from .models import GenerationResult
from .prompt_builder import GenerationRequest, build_prompt

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Error generating configuration. Please try again."

Backend = Callable[[str, str], Awaitable[GenerationResult]]


class SessionState(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"


class SessionBusy(RuntimeError):
    """Raised when submitting while a request is already in flight."""


class GenerationSession:
    """Single-user generation session.

    Only one request may be in flight at a time; the rendering layer reads
    ``state``, ``result`` and ``error`` and never combines flags itself.
    """

    def __init__(self, backend: Backend):
        self._backend = backend
        self.state = SessionState.IDLE
        self.result: Optional[GenerationResult] = None
        self.error: Optional[str] = None

    @property
    def can_submit(self) -> bool:
        return self.state != SessionState.SUBMITTING

    async def submit(self, request: GenerationRequest) -> SessionState:
        """Run one generation and return the resulting state.

        Raises:
            SessionBusy: If a previous submission has not finished
        """
        if not self.can_submit:
            raise SessionBusy("A generation is already in progress")

        try:
            prompt = build_prompt(request)
        except InvalidInput as e:
            # Rejected locally, the backend is never called
            return self._fail(e.message)

        self.state = SessionState.SUBMITTING
        self.result = None
        self.error = None

        try:
            result = await self._backend(prompt, request.use_case)
        except GenerationError as e:
            logger.error("Generation failed: %s", e.detail)
            return self._fail(e.message)
        except Exception as e:
            logger.error("Generation failed: %s", e)
            return self._fail(getattr(e, "message", None) or GENERIC_ERROR_MESSAGE)

        self.result = result
        self.state = SessionState.SUCCESS
        return self.state

    def _fail(self, message: str) -> SessionState:
        self.result = None
        self.error = message
        self.state = SessionState.FAILURE
        return self.state
