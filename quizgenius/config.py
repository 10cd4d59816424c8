"""Configuration handling for QuizGenius.

Loads settings from environment variables and/or .env file.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Look for .env in current directory or parent directory
env_path = Path('.env')
if env_path.exists():
    load_dotenv(env_path)
else:
    parent_env = Path('..') / '.env'
    if parent_env.exists():
        load_dotenv(parent_env)


class Config:
    """Configuration settings for the quiz pipeline."""

    GEMINI_MODEL: str = os.environ.get("GEMINI_MODEL", "gemini-2.5-flash")

    # Hard bound on request size/cost
    MAX_DOCUMENT_CHARS: int = int(os.environ.get("QUIZ_MAX_DOCUMENT_CHARS", "30000"))
    TEMPERATURE: float = float(os.environ.get("QUIZ_TEMPERATURE", "0.7"))

    PDF_MEDIA_TYPE: str = "application/pdf"
