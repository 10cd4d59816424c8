"""Normalization of the raw generation payload into QuizData.

The remote service is asked for a strict schema but is not trusted to
honour it: every section missing or not a list becomes an empty list.
Items inside the lists are kept as returned; problems with them are only
reported.
"""

from __future__ import annotations

import logging
from typing import Any

from ..errors import GenerationError
from ..models import SECTION_KEYS, QuizData
from ..prompts import OPTIONS_PER_QUESTION
from ..services import GENERATION_FAILED_MESSAGE

logger = logging.getLogger(__name__)


def normalize_quiz_payload(payload: Any) -> QuizData:
    """Coerce a parsed payload into QuizData with all four sections present.

    Raises:
        GenerationError: If the payload is not a JSON object at all.
    """
    if not isinstance(payload, dict):
        logger.error(f"Payload is a {type(payload).__name__}, not an object")
        raise GenerationError(GENERATION_FAILED_MESSAGE)

    sections: dict[str, list[Any]] = {}
    for key in SECTION_KEYS:
        value = payload.get(key)
        if isinstance(value, (list, tuple)):
            sections[key] = list(value)
            continue
        if key in payload:
            logger.warning(f"Section '{key}' is a {type(value).__name__}, using []")
        else:
            logger.warning(f"Section '{key}' missing from payload, using []")
        sections[key] = []

    return QuizData(**sections)


def collect_item_warnings(quiz: QuizData) -> list[str]:
    """List per-item schema problems without altering the quiz."""
    warnings: list[str] = []

    for i, item in enumerate(quiz.multipleChoice, 1):
        if not isinstance(item, dict):
            warnings.append(f"Multiple choice {i}: not an object")
            continue
        options = item.get("options")
        if not isinstance(options, list):
            warnings.append(f"Multiple choice {i}: options missing")
            continue
        if len(options) != OPTIONS_PER_QUESTION:
            warnings.append(
                f"Multiple choice {i}: expected {OPTIONS_PER_QUESTION} options, got {len(options)}"
            )
        if item.get("correctAnswer") not in options:
            warnings.append(f"Multiple choice {i}: correct answer is not one of the options")

    for i, item in enumerate(quiz.trueFalse, 1):
        if not isinstance(item, dict):
            warnings.append(f"True/false {i}: not an object")
        elif not isinstance(item.get("correctAnswer"), bool):
            warnings.append(f"True/false {i}: correct answer is not a boolean")

    for label, key, fields in (
        ("Short answer", "shortAnswer", ("question", "answer")),
        ("Topic summary", "topicSummaries", ("topic", "summary")),
    ):
        for i, item in enumerate(getattr(quiz, key), 1):
            if not isinstance(item, dict):
                warnings.append(f"{label} {i}: not an object")
                continue
            missing = [f for f in fields if not isinstance(item.get(f), str)]
            if missing:
                warnings.append(f"{label} {i}: missing {', '.join(missing)}")

    return warnings
