"""PDF Parser - Extracts plain text from an uploaded PDF using PyMuPDF.

This is the first step in the pipeline: PDF bytes → plain text.
"""

import logging
from typing import Protocol

import fitz  # PyMuPDF

from ..errors import ExtractionError

logger = logging.getLogger(__name__)


class TextExtractor(Protocol):
    """Contract for anything that turns document bytes into text."""

    def extract(self, document: bytes) -> str:
        """Return the document text or raise ExtractionError."""
        ...


class PDFParser:
    """
    Extracts text from PDF files in page order.

    Fails with ExtractionError for:
    - Corrupted or non-PDF data
    - Encrypted (password protected) documents
    - Documents with no text layer (e.g. scanned, image-only pages)
    """

    def extract(self, document: bytes) -> str:
        """
        Extract the text of every page, joined with newlines.

        Args:
            document: Raw PDF bytes

        Returns:
            Extracted text

        Raises:
            ExtractionError: If no usable text can be read
        """
        if not document:
            raise ExtractionError("The uploaded file is empty.")

        try:
            doc = fitz.open(stream=document, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise ExtractionError(f"Could not open the PDF: {e}") from e

        try:
            if doc.needs_pass:
                raise ExtractionError("The PDF is encrypted and cannot be read.")

            page_texts = []
            for page in doc:
                try:
                    page_texts.append(page.get_text())
                except (RuntimeError, ValueError) as e:
                    raise ExtractionError(
                        f"Could not read page {page.number + 1}: {e}"
                    ) from e
            page_count = doc.page_count
        finally:
            doc.close()

        text = "\n".join(t.strip() for t in page_texts if t and t.strip())
        if not text:
            raise ExtractionError(
                "No text could be extracted from the PDF. "
                "It may consist only of images."
            )

        logger.info(f"Extracted {len(text)} characters from {page_count} page(s)")
        return text
