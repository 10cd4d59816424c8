"""Gemini API client extending BaseAIClient.

Implements Gemini-specific API calls while inheriting error
classification and JSON parsing from BaseAIClient.
"""

import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from ..config import Config
from ..errors import MissingCredentialError
from .base_ai_client import BaseAIClient

logger = logging.getLogger(__name__)


class GeminiClient(BaseAIClient):
    """
    Gemini API client for the quiz pipeline.

    One client is built per API key; the key comes from the session, never
    from the environment directly.
    """

    def __init__(self, api_key: str, model_name: Optional[str] = None):
        """Initialize Gemini client."""
        if not api_key or not api_key.strip():
            raise MissingCredentialError("API Key is missing. Please provide a valid key.")

        self.model_name = model_name or Config.GEMINI_MODEL
        self.client = genai.Client(api_key=api_key.strip())

    # =========================================================================
    # BaseAIClient Abstract Method Implementations
    # =========================================================================

    def _make_json_request(
        self, prompt: str, temperature: float, response_schema: Optional[Any]
    ) -> Any:
        """Make Gemini API call for structured JSON generation."""
        config_dict: dict = {
            "temperature": temperature,
            "response_mime_type": "application/json",
        }
        if response_schema is not None:
            config_dict["response_schema"] = response_schema

        config = types.GenerateContentConfig(**config_dict)

        logger.info(f"Sending generation request to {self.model_name} ({len(prompt)} chars)")
        return self.client.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=config,
        )

    def _parse_response(self, response: Any) -> str:
        """Parse Gemini response to extract the text payload."""
        if hasattr(response, "candidates") and response.candidates:
            candidate = response.candidates[0]
            finish_reason = getattr(candidate, "finish_reason", None)

            if finish_reason and str(finish_reason) in ["MAX_TOKENS", "FinishReason.MAX_TOKENS"]:
                logger.warning("Response hit MAX_TOKENS limit - output may be truncated")

            content_obj = getattr(candidate, "content", None)
            if content_obj is None:
                raise ValueError(f"Response was blocked or empty (finish_reason: {finish_reason})")

            parts = getattr(content_obj, "parts", None)
            if parts:
                text_parts = [part.text for part in parts if getattr(part, "text", None)]
                if text_parts:
                    return "".join(text_parts)
                raise ValueError("Response parts contain no text")
            raise ValueError(f"Response has empty content (finish_reason: {finish_reason})")

        elif getattr(response, "text", None):
            return response.text
        else:
            raise ValueError(f"Unexpected response format: {type(response)}")
