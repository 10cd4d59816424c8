"""Pipeline orchestrator - drives one session from API key entry to quiz.

States:
    CREDENTIAL_NEEDED → READY → EXTRACTING → GENERATING → COMPLETE
                                     ↘            ↘
                                       FAILED ←────

Only user actions move the pipeline out of a resting state. The work
attached to the EXTRACTING edge (extraction followed by generation) is run
by ``advance()``, at most once per accepted document.
"""

from __future__ import annotations

import logging
from typing import Callable

from quizgenius.errors import (
    InvalidCredentialError,
    InvalidTransitionError,
    MissingCredentialError,
    QuizPipelineError,
    UnsupportedFileTypeError,
    is_credential_message,
)
from quizgenius.models import Document, PipelineSnapshot, PipelineState, QuizData
from quizgenius.pipeline.generator import QuizGenerator
from quizgenius.pipeline.normalizer import collect_item_warnings
from quizgenius.pipeline.pdf_parser import PDFParser, TextExtractor
from quizgenius.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)

UNSUPPORTED_FILE_MESSAGE = "Only PDF files are accepted. Please try again."
INVALID_CREDENTIAL_MESSAGE = (
    "Your API Key appears to be invalid or has expired. Please enter a valid key."
)
GENERIC_FAILURE_PREFIX = "Failed to process your request."

TransitionListener = Callable[[PipelineState, PipelineState], None]

IN_FLIGHT_STATES = frozenset({PipelineState.EXTRACTING, PipelineState.GENERATING})


def is_credential_failure(error: BaseException) -> bool:
    """Check whether a pipeline failure should send the user back to key entry."""
    return isinstance(error, InvalidCredentialError) or is_credential_message(str(error))


class QuizPipeline:
    """State machine for a single user session.

    Collaborators are injected so the pipeline can run against fakes:
    the credential store (session scope), the text extractor and the
    quiz generator.
    """

    def __init__(
        self,
        store: CredentialStore,
        extractor: TextExtractor | None = None,
        generator: QuizGenerator | None = None,
    ) -> None:
        self._store = store
        self._extractor = extractor or PDFParser()
        self._generator = generator or QuizGenerator()
        self._listeners: list[TransitionListener] = []

        self._document: Document | None = None
        self._quiz_data: QuizData | None = None
        self._warnings: list[str] = []
        self._error_message = ""
        self._credential_error = False
        self._running = False

        self._state = (
            PipelineState.READY if store.get() else PipelineState.CREDENTIAL_NEEDED
        )

    # -------------------------------------------------------------------------
    # Read-only view
    # -------------------------------------------------------------------------

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def document(self) -> Document | None:
        return self._document

    @property
    def quiz_data(self) -> QuizData | None:
        return self._quiz_data

    @property
    def error_message(self) -> str:
        return self._error_message

    @property
    def credential_error(self) -> bool:
        return self._credential_error

    @property
    def content_unavailable(self) -> bool:
        """Generation succeeded but every section came back empty."""
        return (
            self._state is PipelineState.COMPLETE
            and self._quiz_data is not None
            and self._quiz_data.is_empty
        )

    def snapshot(self) -> PipelineSnapshot:
        """Serializable view of the current state for presentation."""
        active_section = None
        if self._state is PipelineState.COMPLETE and self._quiz_data is not None:
            active_section = self._quiz_data.first_available_section()
        return PipelineSnapshot(
            state=self._state,
            error_message=self._error_message,
            credential_error=self._credential_error,
            has_document=self._document is not None,
            quiz_data=self._quiz_data,
            content_unavailable=self.content_unavailable,
            active_section=active_section,
            warnings=list(self._warnings),
        )

    def subscribe(self, listener: TransitionListener) -> None:
        """Register a callback invoked with (previous, current) on every transition."""
        self._listeners.append(listener)

    # -------------------------------------------------------------------------
    # User actions
    # -------------------------------------------------------------------------

    def submit_credential(self, credential: str) -> PipelineState:
        """Store the session API key: CREDENTIAL_NEEDED → READY."""
        self._require({PipelineState.CREDENTIAL_NEEDED}, "submit a credential")
        credential = (credential or "").strip()
        if not credential:
            raise MissingCredentialError("API Key is missing. Please provide a valid key.")

        self._store.set(credential)
        self._credential_error = False
        self._error_message = ""
        self._transition(PipelineState.READY)
        return self._state

    def select_file(self, document: Document) -> PipelineState:
        """Accept a document: READY → EXTRACTING, or FAILED if it is not a PDF."""
        self._require({PipelineState.READY}, "select a file")
        self._quiz_data = None
        self._warnings = []

        if not document.is_pdf:
            logger.warning(
                f"Rejected {document.filename or 'upload'}: "
                f"declared type {document.media_type} is not a PDF"
            )
            self._fail(UnsupportedFileTypeError(UNSUPPORTED_FILE_MESSAGE))
            return self._state

        self._document = document
        self._error_message = ""
        self._credential_error = False
        self._transition(PipelineState.EXTRACTING)
        return self._state

    def advance(self) -> PipelineState:
        """Run extraction then generation for the pending document.

        A no-op unless a document is waiting in EXTRACTING, so repeated
        calls never trigger a second run.
        """
        if (
            self._state is not PipelineState.EXTRACTING
            or self._document is None
            or self._running
        ):
            return self._state

        document = self._document
        self._running = True
        try:
            text = self._extractor.extract(document.content)
            self._document = None
            self._transition(PipelineState.GENERATING)
            quiz = self._generator.generate(text, self._store.get())
        except QuizPipelineError as e:
            logger.error(f"Pipeline failed for {document.filename or 'upload'}: {e}")
            self._fail(e)
        except Exception as e:
            logger.exception(f"Unexpected pipeline error for {document.filename or 'upload'}")
            self._fail(e)
        else:
            self._quiz_data = quiz
            self._warnings = collect_item_warnings(quiz)
            self._transition(PipelineState.COMPLETE)
        finally:
            self._running = False

        return self._state

    def process(self, document: Document) -> PipelineState:
        """Select a document and run the pipeline to a resting state."""
        self.select_file(document)
        return self.advance()

    def retry(self) -> PipelineState:
        """Dismiss a failure and go back to file selection: FAILED → READY.

        ``retry`` and ``restart`` are aliases: both clear the run and are
        accepted from FAILED and from COMPLETE. Refused while the last
        failure was a rejected key (use ``retry_credential``).
        """
        self._require({PipelineState.FAILED, PipelineState.COMPLETE}, "retry")
        if self._credential_error:
            raise InvalidTransitionError(
                "The last failure was caused by the API key; re-enter the key instead."
            )
        self._clear_run()
        self._transition(PipelineState.READY)
        return self._state

    def restart(self) -> PipelineState:
        """Discard the quiz and go back to file selection: COMPLETE → READY.

        Alias of ``retry``.
        """
        return self.retry()

    def retry_credential(self) -> PipelineState:
        """After a credential failure: clear the key and go back to key entry."""
        self._require({PipelineState.FAILED}, "re-enter the credential")
        if not self._credential_error:
            raise InvalidTransitionError("The last failure was not caused by the API key.")
        return self.reset_credential()

    def reset_credential(self) -> PipelineState:
        """Explicit user reset of the key from any resting state."""
        if self._state in IN_FLIGHT_STATES:
            raise InvalidTransitionError(
                f"Cannot change the API key while {self._state.value}."
            )
        self._store.clear()
        self._clear_run()
        self._transition(PipelineState.CREDENTIAL_NEEDED)
        return self._state

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, allowed: set[PipelineState], action: str) -> None:
        if self._state not in allowed:
            raise InvalidTransitionError(
                f"Cannot {action} while the pipeline is {self._state.value}."
            )

    def _fail(self, error: BaseException) -> None:
        self._document = None
        self._quiz_data = None
        self._warnings = []
        if isinstance(error, UnsupportedFileTypeError):
            self._credential_error = False
            self._error_message = str(error)
        elif is_credential_failure(error):
            self._credential_error = True
            self._error_message = INVALID_CREDENTIAL_MESSAGE
        else:
            self._credential_error = False
            detail = str(error) or "An unknown error occurred."
            self._error_message = f"{GENERIC_FAILURE_PREFIX} {detail}"
        self._transition(PipelineState.FAILED)

    def _clear_run(self) -> None:
        self._document = None
        self._quiz_data = None
        self._warnings = []
        self._error_message = ""
        self._credential_error = False

    def _transition(self, new_state: PipelineState) -> None:
        previous = self._state
        self._state = new_state
        logger.debug(f"State {previous.value} → {new_state.value}")
        for listener in list(self._listeners):
            listener(previous, new_state)
