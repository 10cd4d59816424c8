"""Prompts for quiz generation."""

from __future__ import annotations

from .quiz_generation import (
    MULTIPLE_CHOICE_COUNT,
    OPTIONS_PER_QUESTION,
    SHORT_ANSWER_COUNT,
    TRUE_FALSE_COUNT,
    create_quiz_generation_prompt,
)

__all__ = [
    "create_quiz_generation_prompt",
    "MULTIPLE_CHOICE_COUNT",
    "OPTIONS_PER_QUESTION",
    "TRUE_FALSE_COUNT",
    "SHORT_ANSWER_COUNT",
]
