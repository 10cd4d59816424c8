"""Services for the quiz pipeline."""

from __future__ import annotations

from .ai_client_factory import AIClient, ModelProvider, create_ai_client
from .base_ai_client import (
    GENERATION_FAILED_MESSAGE,
    INVALID_API_KEY_MESSAGE,
    BaseAIClient,
)
from .credential_store import CredentialStore, InMemoryCredentialStore

__all__ = [
    "create_ai_client",
    "AIClient",
    "ModelProvider",
    "BaseAIClient",
    "CredentialStore",
    "InMemoryCredentialStore",
    "INVALID_API_KEY_MESSAGE",
    "GENERATION_FAILED_MESSAGE",
]
