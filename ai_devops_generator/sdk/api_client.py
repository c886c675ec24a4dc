"""
HTTP client for a running generator server.

Calls POST /api/generate and reduces every failure to one user-facing sentence.
"""

import logging
from typing import Optional

import httpx

from ..core.models import GenerationResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_TIMEOUT = 30.0

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again in a moment."
SERVER_ERROR_MESSAGE = "Server error. Please try again later."
TIMEOUT_MESSAGE = "Request timeout. Please try again."
GENERIC_MESSAGE = "Failed to generate configuration. Please try again."


class ApiClientError(Exception):
    """Generation through the HTTP API failed.

    Attributes:
        message: User-facing sentence
        status_code: HTTP status, if a response was received
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigGeneratorAPI:
    """Async client for the generator HTTP API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str, use_case: str) -> GenerationResult:
        """Request a generation from the server.

        Args:
            prompt: Fully composed prompt
            use_case: Use case key

        Returns:
            GenerationResult parsed from the response

        Raises:
            ApiClientError: On any failure, with a mapped message
        """
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                response = await client.post(
                    "/api/generate",
                    json={"prompt": prompt, "useCase": use_case},
                    headers={"Content-Type": "application/json"},
                )
            except httpx.TimeoutException as exc:
                logger.error("API request timed out: %s", exc)
                raise ApiClientError(TIMEOUT_MESSAGE) from exc
            except httpx.HTTPError as exc:
                logger.error("API request failed: %s", exc)
                raise ApiClientError(GENERIC_MESSAGE) from exc

        if response.status_code == 429:
            raise ApiClientError(RATE_LIMIT_MESSAGE, response.status_code)
        if response.status_code >= 500:
            logger.error("API server error %d: %s", response.status_code, response.text)
            raise ApiClientError(SERVER_ERROR_MESSAGE, response.status_code)
        if response.status_code != 200:
            raise ApiClientError(GENERIC_MESSAGE, response.status_code)

        try:
            return GenerationResult.from_dict(response.json())
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.error("Unexpected API response body: %s", exc)
            raise ApiClientError(GENERIC_MESSAGE, response.status_code) from exc
