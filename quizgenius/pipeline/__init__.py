"""Pipeline components for PDF to quiz conversion."""

from __future__ import annotations

from .generator import GenerationRequest, QuizGenerator
from .normalizer import collect_item_warnings, normalize_quiz_payload
from .orchestrator import QuizPipeline, is_credential_failure
from .pdf_parser import PDFParser, TextExtractor

__all__ = [
    "PDFParser",
    "TextExtractor",
    "QuizGenerator",
    "GenerationRequest",
    "QuizPipeline",
    "is_credential_failure",
    "normalize_quiz_payload",
    "collect_item_warnings",
]
