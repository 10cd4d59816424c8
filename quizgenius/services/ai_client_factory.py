"""Factory for creating AI clients based on provider.

Supports:
- gemini: Uses GeminiClient (default)
"""

import logging
from typing import Any, Literal, Optional, Protocol

logger = logging.getLogger(__name__)

# Type alias for model provider selection
ModelProvider = Literal["gemini"]


class AIClient(Protocol):
    """Protocol for AI clients - defines the interface all clients must implement."""

    def generate_json(
        self,
        prompt: str,
        temperature: float = 0.0,
        response_schema: Optional[Any] = None,
    ) -> Any:
        """Generate JSON response from the AI model."""
        ...


def create_ai_client(
    api_key: str,
    model_provider: ModelProvider = "gemini",
    model_name: Optional[str] = None,
) -> AIClient:
    """
    Create an AI client for the given API key.

    Args:
        api_key: Credential supplied by the user for this session
        model_provider: The AI provider to use
        model_name: Optional model override

    Returns:
        AIClient instance

    Raises:
        ValueError: If unknown provider specified
    """
    if model_provider == "gemini":
        from .gemini_client import GeminiClient
        client = GeminiClient(api_key, model_name=model_name)
        logger.debug(f"Using Gemini ({client.model_name}) as AI provider")
        return client
    raise ValueError(
        f"Unknown model provider: {model_provider}. "
        "Supported providers: 'gemini'"
    )
