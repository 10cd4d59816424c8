"""Centralized logging configuration for the CLI and API entry points."""

from __future__ import annotations

import logging

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%H:%M:%S"


def setup_logging(verbose: bool = False, level: int | None = None) -> None:
    """Configure logging with consistent format.

    Args:
        verbose: If True, sets level to DEBUG. Overrides `level` parameter.
        level: Explicit logging level. Defaults to INFO if not specified.

    Example:
        >>> setup_logging()  # INFO level
        >>> setup_logging(verbose=True)  # DEBUG level
    """
    if verbose:
        effective_level = logging.DEBUG
    elif level is not None:
        effective_level = level
    else:
        effective_level = logging.INFO

    logging.basicConfig(
        level=effective_level,
        format=DEFAULT_LOG_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    # The Gemini SDK logs every HTTP request at INFO
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("google_genai").setLevel(logging.WARNING)
