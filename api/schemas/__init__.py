"""API schemas package - Pydantic models for request/response."""

from api.schemas.api_models import CredentialRequest, SessionResponse

__all__ = ["CredentialRequest", "SessionResponse"]
