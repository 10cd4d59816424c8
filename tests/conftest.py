"""Shared fixtures for the quiz pipeline test suite.

No test talks to Gemini: generation goes through FakeAIClient, and PDFs
are built in memory with PyMuPDF.
"""

from __future__ import annotations

import copy
import logging
import sys
from typing import Any, Callable

import fitz  # PyMuPDF
import pytest

from quizgenius.models import Document
from quizgenius.pipeline import QuizGenerator, QuizPipeline
from quizgenius.services import InMemoryCredentialStore

# ---------------------------------------------------------------------------
# Configure verbose logging for test debugging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
    force=True,
)

VALID_KEY = "test-api-key"

FULL_PAYLOAD: dict[str, Any] = {
    "multipleChoice": [
        {
            "question": "Which organelle performs photosynthesis?",
            "options": ["Mitochondrion", "Chloroplast", "Nucleus", "Ribosome"],
            "correctAnswer": "Chloroplast",
        },
        {
            "question": "What gas is released during photosynthesis?",
            "options": ["Oxygen", "Nitrogen", "Carbon dioxide", "Helium"],
            "correctAnswer": "Oxygen",
        },
    ],
    "trueFalse": [
        {"question": "Plants need light for photosynthesis.", "correctAnswer": True},
        {"question": "Chlorophyll is blue.", "correctAnswer": False},
    ],
    "shortAnswer": [
        {"question": "Name the green pigment in leaves.", "answer": "Chlorophyll"},
    ],
    "topicSummaries": [
        {"topic": "Photosynthesis", "summary": "Plants turn light into chemical energy."},
    ],
}

SAMPLE_TEXT = (
    "Photosynthesis is the process by which green plants use sunlight, water and "
    "carbon dioxide to produce glucose and oxygen. It takes place in chloroplasts."
)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeExtractor:
    """Text extractor that records calls and returns canned text."""

    def __init__(self, text: str = SAMPLE_TEXT, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[bytes] = []

    def extract(self, document: bytes) -> str:
        self.calls.append(document)
        if self.error is not None:
            raise self.error
        return self.text


class FakeAIClient:
    """AI client that records requests and returns a canned payload."""

    def __init__(self, payload: Any = None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.requests: list[dict[str, Any]] = []

    def generate_json(
        self,
        prompt: str,
        temperature: float = 0.0,
        response_schema: Any = None,
    ) -> Any:
        self.requests.append(
            {"prompt": prompt, "temperature": temperature, "response_schema": response_schema}
        )
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.payload)


class RecordingFactory:
    """Client factory that hands out one FakeAIClient and remembers the keys used."""

    def __init__(self, client: FakeAIClient) -> None:
        self.client = client
        self.keys: list[str] = []

    def __call__(self, api_key: str) -> FakeAIClient:
        self.keys.append(api_key)
        return self.client


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def full_payload() -> dict[str, Any]:
    return copy.deepcopy(FULL_PAYLOAD)


@pytest.fixture
def store() -> InMemoryCredentialStore:
    """Credential store that already holds a key."""
    return InMemoryCredentialStore(VALID_KEY)


@pytest.fixture
def empty_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def make_generator() -> Callable[..., tuple[QuizGenerator, RecordingFactory]]:
    """Build a QuizGenerator backed by a FakeAIClient."""

    def _make(payload: Any = None, error: Exception | None = None, **kwargs: Any):
        factory = RecordingFactory(FakeAIClient(payload=payload, error=error))
        return QuizGenerator(client_factory=factory, **kwargs), factory

    return _make


@pytest.fixture
def make_pipeline(extractor: FakeExtractor, make_generator):
    """Build a QuizPipeline with fake collaborators.

    Returns (pipeline, extractor, factory).
    """

    def _make(
        store: InMemoryCredentialStore,
        payload: Any = None,
        error: Exception | None = None,
        extractor_override: FakeExtractor | None = None,
    ):
        generator, factory = make_generator(payload=payload, error=error)
        used_extractor = extractor_override or extractor
        pipeline = QuizPipeline(store, extractor=used_extractor, generator=generator)
        return pipeline, used_extractor, factory

    return _make


@pytest.fixture
def pdf_document() -> Document:
    return Document(content=b"%PDF-1.7 fake", media_type="application/pdf", filename="chapter.pdf")


@pytest.fixture
def docx_document() -> Document:
    return Document(
        content=b"PK\x03\x04 fake docx",
        media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        filename="chapter.docx",
    )


# ---------------------------------------------------------------------------
# Real PDFs built in memory
# ---------------------------------------------------------------------------


def build_pdf(pages: list[str]) -> bytes:
    """Create a PDF with one page per entry; empty strings give blank pages."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture(scope="session")
def text_pdf_bytes() -> bytes:
    return build_pdf(["Photosynthesis happens in chloroplasts.", "Respiration releases energy."])


@pytest.fixture(scope="session")
def blank_pdf_bytes() -> bytes:
    return build_pdf([""])


@pytest.fixture(scope="session")
def encrypted_pdf_bytes() -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Secret chapter")
    data = doc.tobytes(
        encryption=fitz.PDF_ENCRYPT_AES_256,
        owner_pw="owner-pass",
        user_pw="user-pass",
    )
    doc.close()
    return data
