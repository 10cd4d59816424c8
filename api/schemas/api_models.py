"""Pydantic models for the session API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from quizgenius.models import PipelineSnapshot


class CredentialRequest(BaseModel):
    """API key submitted by the user for this session."""

    api_key: str = Field(..., min_length=1, description="Gemini API key")


class SessionResponse(BaseModel):
    """Current pipeline state of the caller's session."""

    session_id: str
    pipeline: PipelineSnapshot
