"""Tests for PDF text extraction with PyMuPDF."""

import pytest

from conftest import build_pdf

from quizgenius.errors import ExtractionError
from quizgenius.pipeline import PDFParser


@pytest.fixture
def parser():
    return PDFParser()


class TestPDFParser:
    def test_extracts_text_in_page_order(self, parser, text_pdf_bytes):
        text = parser.extract(text_pdf_bytes)

        assert "Photosynthesis happens in chloroplasts." in text
        assert "Respiration releases energy." in text
        assert text.index("Photosynthesis") < text.index("Respiration")

    def test_blank_pages_are_skipped(self, parser):
        text = parser.extract(build_pdf(["", "Only page with text", ""]))

        assert text == "Only page with text"

    def test_image_only_pdf_fails(self, parser, blank_pdf_bytes):
        with pytest.raises(ExtractionError, match="No text could be extracted"):
            parser.extract(blank_pdf_bytes)

    def test_empty_input_fails(self, parser):
        with pytest.raises(ExtractionError):
            parser.extract(b"")

    def test_corrupted_data_fails(self, parser):
        with pytest.raises(ExtractionError):
            parser.extract(b"this is definitely not a pdf")

    def test_encrypted_pdf_fails(self, parser, encrypted_pdf_bytes):
        with pytest.raises(ExtractionError, match="encrypted"):
            parser.extract(encrypted_pdf_bytes)
