"""Base AI client with shared error classification and response parsing.

Provides common infrastructure for AI API clients:
- Credential-rejection detection
- Classification of every other failure as a generation failure
- JSON payload parsing

Requests are sent exactly once. Retrying is a user decision made by
restarting the whole pipeline.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..errors import GenerationError, InvalidCredentialError, is_credential_message

logger = logging.getLogger(__name__)

INVALID_API_KEY_MESSAGE = "Your API Key is not valid. Please check the key and try again."
GENERATION_FAILED_MESSAGE = (
    "The AI failed to generate a quiz. The content may be too short, complex, "
    "or the service may be temporarily unavailable."
)

# HTTP statuses the Gemini API returns for malformed, expired or rejected keys
CREDENTIAL_STATUS_CODES = frozenset({400, 401, 403})


class BaseAIClient(ABC):
    """
    Abstract base class for AI API clients.

    Provides:
    - A single-shot JSON generation entry point
    - Error classification (rejected credential vs. everything else)

    Subclasses must implement:
    - _make_json_request(): Provider-specific JSON generation
    - _parse_response(): Provider-specific response parsing
    """

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate_json(
        self,
        prompt: str,
        temperature: float = 0.0,
        response_schema: Optional[Any] = None,
    ) -> Any:
        """
        Generate a JSON response from the AI model.

        Args:
            prompt: The prompt to send
            temperature: Sampling temperature
            response_schema: Optional schema constraining the output

        Returns:
            The parsed JSON value

        Raises:
            InvalidCredentialError: If the service rejected the API key
            GenerationError: For any other failure, including invalid JSON
        """
        try:
            response = self._make_json_request(prompt, temperature, response_schema)
            content = self._parse_response(response)
        except Exception as e:
            if self._is_credential_error(e):
                logger.warning(f"API key rejected by the AI service: {e}")
                raise InvalidCredentialError(INVALID_API_KEY_MESSAGE) from e
            logger.error(f"AI request failed: {e}")
            raise GenerationError(GENERATION_FAILED_MESSAGE) from e

        try:
            return json.loads(content.strip())
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON response: {e}")
            raise GenerationError(GENERATION_FAILED_MESSAGE) from e

    # =========================================================================
    # Abstract Methods (Provider-Specific)
    # =========================================================================

    @abstractmethod
    def _make_json_request(
        self, prompt: str, temperature: float, response_schema: Optional[Any]
    ) -> Any:
        """Make provider-specific API call for JSON generation."""
        pass

    @abstractmethod
    def _parse_response(self, response: Any) -> str:
        """Parse provider-specific response to extract content string."""
        pass

    # =========================================================================
    # Error Classification
    # =========================================================================

    def _is_credential_error(self, error: Exception) -> bool:
        """Determine if an error means the API key was rejected."""
        status = getattr(error, "code", None)
        if not isinstance(status, int):
            status = getattr(error, "status_code", None)
        if isinstance(status, int) and status in CREDENTIAL_STATUS_CODES:
            return True

        error_str = str(error)
        if any(f"[{code}]" in error_str for code in CREDENTIAL_STATUS_CODES):
            return True

        return is_credential_message(error_str)
