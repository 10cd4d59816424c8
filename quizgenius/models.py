"""Pydantic models for the quiz pipeline.

Contains all data models for:
- The strict response schema sent to Gemini
- The normalized quiz data handed to presentation
- Documents and pipeline state snapshots
"""

from dataclasses import dataclass
from enum import Enum
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .config import Config


# =============================================================================
# Type Aliases / Constants
# =============================================================================

SectionKey = Literal["multipleChoice", "trueFalse", "shortAnswer", "topicSummaries"]

SECTION_KEYS: tuple = ("multipleChoice", "trueFalse", "shortAnswer", "topicSummaries")

SECTION_TITLES: Dict[str, str] = {
    "multipleChoice": "Multiple Choice",
    "trueFalse": "True/False",
    "shortAnswer": "Short Answer",
    "topicSummaries": "Topic Summaries",
}


# =============================================================================
# Response Schema (sent to Gemini as response_schema)
# =============================================================================

class MultipleChoiceQuestion(BaseModel):
    """A multiple-choice question with four options."""

    question: str = Field(..., description="The question text.")
    options: List[str] = Field(..., description="An array of 4 possible answers.")
    correctAnswer: str = Field(..., description="The correct answer from the options.")


class TrueFalseQuestion(BaseModel):
    """A true/false statement."""

    question: str = Field(..., description="The question text.")
    correctAnswer: bool = Field(..., description="The correct boolean answer.")


class ShortAnswerQuestion(BaseModel):
    """A short-answer question with its reference answer."""

    question: str = Field(..., description="The question text.")
    answer: str = Field(..., description="The correct answer.")


class TopicSummary(BaseModel):
    """Summary of one main topic of the document."""

    topic: str = Field(..., description="The name of the topic.")
    summary: str = Field(..., description="A concise summary of the topic.")


class QuizResponse(BaseModel):
    """Strict output schema the model is constrained to emit."""

    multipleChoice: List[MultipleChoiceQuestion] = Field(
        ..., description="A list of multiple-choice questions."
    )
    trueFalse: List[TrueFalseQuestion] = Field(
        ..., description="A list of true/false questions."
    )
    shortAnswer: List[ShortAnswerQuestion] = Field(
        ..., description="A list of short-answer questions."
    )
    topicSummaries: List[TopicSummary] = Field(
        ..., description="A list of summaries for key topics in the document."
    )


# =============================================================================
# Normalized Quiz Data
# =============================================================================

class QuizData(BaseModel):
    """
    Canonical quiz data after normalization.

    All four sections are always present as lists. Items are kept exactly
    as the remote service returned them (usually dicts shaped like the
    response schema models above).
    """

    multipleChoice: List[Any] = Field(default_factory=list)
    trueFalse: List[Any] = Field(default_factory=list)
    shortAnswer: List[Any] = Field(default_factory=list)
    topicSummaries: List[Any] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no section has any content."""
        return not any(getattr(self, key) for key in SECTION_KEYS)

    def section_counts(self) -> Dict[str, int]:
        """Number of items per section."""
        return {key: len(getattr(self, key)) for key in SECTION_KEYS}

    def first_available_section(self) -> SectionKey:
        """First non-empty section in display order (multipleChoice if none)."""
        for key in SECTION_KEYS:
            if getattr(self, key):
                return key
        return "multipleChoice"


# =============================================================================
# Documents
# =============================================================================

@dataclass(frozen=True)
class Document:
    """An uploaded file with its declared media type."""

    content: bytes
    media_type: str
    filename: str = ""

    @property
    def is_pdf(self) -> bool:
        return self.media_type == Config.PDF_MEDIA_TYPE

    @classmethod
    def from_path(cls, path: Path) -> "Document":
        """Read a local file, declaring its media type from the extension."""
        path = Path(path)
        media_type, _ = mimetypes.guess_type(path.name)
        return cls(
            content=path.read_bytes(),
            media_type=media_type or "application/octet-stream",
            filename=path.name,
        )


# =============================================================================
# Pipeline State
# =============================================================================

class PipelineState(str, Enum):
    """Orchestration progress; exactly one is active at a time."""

    CREDENTIAL_NEEDED = "credential_needed"
    READY = "ready"
    EXTRACTING = "extracting"
    GENERATING = "generating"
    COMPLETE = "complete"
    FAILED = "failed"


class PipelineSnapshot(BaseModel):
    """What the presentation layer needs to render the current state."""

    state: PipelineState
    error_message: str = ""
    credential_error: bool = False
    has_document: bool = False
    quiz_data: Optional[QuizData] = None
    content_unavailable: bool = False
    active_section: Optional[SectionKey] = None
    warnings: List[str] = Field(default_factory=list)
