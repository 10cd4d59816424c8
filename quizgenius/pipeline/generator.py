"""Generator - Turns extracted document text into QuizData via Gemini.

This is the second step in the pipeline: plain text → QuizData.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..config import Config
from ..errors import MissingCredentialError
from ..models import QuizData, QuizResponse
from ..prompts import create_quiz_generation_prompt
from ..services import AIClient, create_ai_client
from .normalizer import collect_item_warnings, normalize_quiz_payload

logger = logging.getLogger(__name__)


@dataclass
class GenerationRequest:
    """Everything sent to the remote service for one generation."""

    prompt: str
    document_text: str
    temperature: float
    response_schema: Any = QuizResponse


class QuizGenerator:
    """
    Generates a learning module from document text.

    For each call:
    1. Check that a credential is present (no network call otherwise)
    2. Truncate the text and build the request
    3. Send it once through an AI client built for the credential
    4. Normalize the payload so all four sections are lists
    """

    def __init__(
        self,
        client_factory: Callable[[str], AIClient] = create_ai_client,
        max_chars: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        """
        Initialize generator.

        Args:
            client_factory: Builds an AI client from an API key
            max_chars: Maximum document characters sent to the model
            temperature: Sampling temperature for generation
        """
        self.client_factory = client_factory
        self.max_chars = max_chars if max_chars is not None else Config.MAX_DOCUMENT_CHARS
        self.temperature = temperature if temperature is not None else Config.TEMPERATURE

    def build_request(self, text: str) -> GenerationRequest:
        """Build the generation request for a document text."""
        document_text = text[:self.max_chars]
        if len(text) > self.max_chars:
            logger.info(
                f"Document text truncated from {len(text)} to {self.max_chars} characters"
            )
        return GenerationRequest(
            prompt=create_quiz_generation_prompt(document_text),
            document_text=document_text,
            temperature=self.temperature,
        )

    def generate(self, text: str, credential: Optional[str]) -> QuizData:
        """
        Generate quiz data for a document.

        Args:
            text: Extracted document text
            credential: API key for the remote service

        Returns:
            Normalized QuizData

        Raises:
            MissingCredentialError: If the credential is empty
            InvalidCredentialError: If the service rejects the credential
            GenerationError: For any other failure
        """
        if not credential or not credential.strip():
            raise MissingCredentialError("API Key is missing. Please provide a valid key.")

        request = self.build_request(text)
        client = self.client_factory(credential.strip())

        payload = client.generate_json(
            request.prompt,
            temperature=request.temperature,
            response_schema=request.response_schema,
        )
        quiz = normalize_quiz_payload(payload)

        for warning in collect_item_warnings(quiz):
            logger.warning(f"  ⚠ {warning}")

        logger.info(f"Generated quiz: {quiz.section_counts()}")
        return quiz
