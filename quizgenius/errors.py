"""Exception hierarchy for the quiz pipeline.

The orchestrator catches every ``QuizPipelineError`` (and anything else)
at its boundary and turns it into the ``FAILED`` state.
"""

from __future__ import annotations


class QuizPipelineError(Exception):
    """Base class for all pipeline errors."""


class ExtractionError(QuizPipelineError):
    """The document could not be turned into text."""


class GenerationError(QuizPipelineError):
    """The remote service failed or returned an unusable payload."""


class InvalidCredentialError(QuizPipelineError):
    """The remote service rejected the API key."""


class MissingCredentialError(InvalidCredentialError):
    """No API key was available when generation was requested."""


class UnsupportedFileTypeError(QuizPipelineError):
    """The selected file is not a PDF."""


class InvalidTransitionError(QuizPipelineError):
    """An action was requested that the current state does not offer."""


# Phrases the remote service uses when it rejects a key. Matching on them is
# inherently tied to the provider's wording.
CREDENTIAL_ERROR_MARKERS = (
    "api key is not valid",
    "api key not valid",
    "api_key_invalid",
)


def is_credential_message(message: str) -> bool:
    """Check whether an error message signals a rejected API key."""
    lowered = message.lower()
    return any(marker in lowered for marker in CREDENTIAL_ERROR_MARKERS)
