"""QuizGenius: turn a PDF chapter into a quiz and topic summaries.

Pipeline: PDF bytes → extracted text → Gemini structured output →
normalized ``QuizData`` → presentation state.
"""

from __future__ import annotations

__version__ = "0.1.0"
