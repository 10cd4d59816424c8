"""Plain-text and JSON export of a generated quiz."""

from __future__ import annotations

import json
from typing import Any

from quizgenius.models import QuizData

EXPORT_TITLE = "Quiz & Summaries"


def _field(item: Any, name: str) -> Any:
    if isinstance(item, dict):
        return item.get(name, "")
    return getattr(item, name, "")


def _format_bool(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_quiz_for_export(quiz: QuizData) -> str:
    """Render all sections as copy-ready text.

    Empty sections are left out; numbering restarts at 1 in each section.
    """
    text = f"{EXPORT_TITLE}\n\n"

    if quiz.multipleChoice:
        text += "--- Multiple Choice ---\n\n"
        for i, q in enumerate(quiz.multipleChoice, 1):
            text += f"{i}. {_field(q, 'question')}\n"
            options = _field(q, "options")
            for option in options if isinstance(options, list) else []:
                text += f"- {option}\n"
            text += f"Correct Answer: {_field(q, 'correctAnswer')}\n\n"

    if quiz.trueFalse:
        text += "--- True/False ---\n\n"
        for i, q in enumerate(quiz.trueFalse, 1):
            text += f"{i}. {_field(q, 'question')}\n"
            text += f"Correct Answer: {_format_bool(_field(q, 'correctAnswer'))}\n\n"

    if quiz.shortAnswer:
        text += "--- Short Answer ---\n\n"
        for i, q in enumerate(quiz.shortAnswer, 1):
            text += f"{i}. {_field(q, 'question')}\n"
            text += f"Answer: {_field(q, 'answer')}\n\n"

    if quiz.topicSummaries:
        text += "--- Topic Summaries ---\n\n"
        for s in quiz.topicSummaries:
            text += f"Topic: {_field(s, 'topic')}\n"
            text += f"Summary: {_field(s, 'summary')}\n\n"

    return text


def format_quiz_as_json(quiz: QuizData) -> str:
    """Serialize the quiz with the canonical camelCase section keys."""
    return json.dumps(quiz.model_dump(), indent=2, ensure_ascii=False)
