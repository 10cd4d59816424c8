"""Tests for the pipeline state machine."""

import pytest

from conftest import FakeExtractor, VALID_KEY

from quizgenius.errors import (
    ExtractionError,
    GenerationError,
    InvalidCredentialError,
    InvalidTransitionError,
    MissingCredentialError,
)
from quizgenius.models import PipelineState
from quizgenius.pipeline import is_credential_failure
from quizgenius.pipeline.orchestrator import (
    INVALID_CREDENTIAL_MESSAGE,
    UNSUPPORTED_FILE_MESSAGE,
)
from quizgenius.services import GENERATION_FAILED_MESSAGE


# =============================================================================
# Initial state and credential entry
# =============================================================================


class TestCredentialEntry:
    def test_starts_ready_when_store_has_key(self, make_pipeline, store):
        pipeline, _, _ = make_pipeline(store)

        assert pipeline.state is PipelineState.READY

    def test_starts_credential_needed_when_store_empty(self, make_pipeline, empty_store):
        pipeline, _, _ = make_pipeline(empty_store)

        assert pipeline.state is PipelineState.CREDENTIAL_NEEDED

    def test_submit_credential_stores_key(self, make_pipeline, empty_store):
        pipeline, _, _ = make_pipeline(empty_store)

        state = pipeline.submit_credential("  new-key  ")

        assert state is PipelineState.READY
        assert empty_store.get() == "new-key"

    @pytest.mark.parametrize("key", ["", "   "])
    def test_blank_credential_is_refused(self, make_pipeline, empty_store, key):
        pipeline, _, _ = make_pipeline(empty_store)

        with pytest.raises(MissingCredentialError):
            pipeline.submit_credential(key)

        assert pipeline.state is PipelineState.CREDENTIAL_NEEDED
        assert empty_store.get() is None

    def test_submit_credential_only_from_credential_needed(self, make_pipeline, store):
        pipeline, _, _ = make_pipeline(store)

        with pytest.raises(InvalidTransitionError):
            pipeline.submit_credential("other")


# =============================================================================
# Happy path
# =============================================================================


class TestSuccessfulRun:
    def test_pdf_goes_to_complete(self, make_pipeline, store, pdf_document, full_payload):
        pipeline, extractor, factory = make_pipeline(store, payload=full_payload)

        state = pipeline.process(pdf_document)

        assert state is PipelineState.COMPLETE
        assert extractor.calls == [pdf_document.content]
        assert factory.keys == [VALID_KEY]
        assert all(count > 0 for count in pipeline.quiz_data.section_counts().values())
        assert pipeline.error_message == ""
        assert not pipeline.content_unavailable

    def test_transitions_are_reported_in_order(
        self, make_pipeline, store, pdf_document, full_payload
    ):
        pipeline, _, _ = make_pipeline(store, payload=full_payload)
        seen = []
        pipeline.subscribe(lambda previous, current: seen.append((previous, current)))

        pipeline.process(pdf_document)

        assert seen == [
            (PipelineState.READY, PipelineState.EXTRACTING),
            (PipelineState.EXTRACTING, PipelineState.GENERATING),
            (PipelineState.GENERATING, PipelineState.COMPLETE),
        ]

    def test_document_is_discarded_after_extraction(
        self, make_pipeline, store, pdf_document, full_payload
    ):
        pipeline, _, _ = make_pipeline(store, payload=full_payload)
        documents_while_generating = []
        pipeline.subscribe(
            lambda previous, current: documents_while_generating.append(pipeline.document)
            if current is PipelineState.GENERATING
            else None
        )

        pipeline.process(pdf_document)

        assert documents_while_generating == [None]
        assert pipeline.document is None

    def test_missing_sections_give_first_available_tab(self, make_pipeline, store, pdf_document):
        payload = {"shortAnswer": [{"question": "Q", "answer": "A"}]}
        pipeline, _, _ = make_pipeline(store, payload=payload)

        pipeline.process(pdf_document)
        snapshot = pipeline.snapshot()

        assert snapshot.state is PipelineState.COMPLETE
        assert snapshot.quiz_data.multipleChoice == []
        assert snapshot.active_section == "shortAnswer"

    def test_all_sections_empty_is_content_unavailable(self, make_pipeline, store, pdf_document):
        pipeline, _, _ = make_pipeline(store, payload={})

        pipeline.process(pdf_document)

        assert pipeline.state is PipelineState.COMPLETE
        assert pipeline.content_unavailable
        assert pipeline.snapshot().content_unavailable

    def test_item_warnings_surface_in_snapshot(self, make_pipeline, store, pdf_document):
        payload = {
            "multipleChoice": [{"question": "Q", "options": ["a", "b"], "correctAnswer": "a"}]
        }
        pipeline, _, _ = make_pipeline(store, payload=payload)

        pipeline.process(pdf_document)

        assert pipeline.snapshot().warnings == ["Multiple choice 1: expected 4 options, got 2"]
        assert len(pipeline.quiz_data.multipleChoice) == 1


# =============================================================================
# Failures
# =============================================================================


class TestFailures:
    def test_non_pdf_is_rejected_without_extraction(
        self, make_pipeline, store, docx_document
    ):
        pipeline, extractor, factory = make_pipeline(store, payload={})

        state = pipeline.process(docx_document)

        assert state is PipelineState.FAILED
        assert pipeline.error_message == UNSUPPORTED_FILE_MESSAGE
        assert not pipeline.credential_error
        assert extractor.calls == []
        assert factory.keys == []

    def test_extraction_failure(self, make_pipeline, store, pdf_document):
        broken = FakeExtractor(error=ExtractionError("No text could be extracted"))
        pipeline, _, factory = make_pipeline(store, payload={}, extractor_override=broken)

        pipeline.process(pdf_document)

        assert pipeline.state is PipelineState.FAILED
        assert pipeline.error_message == "Failed to process your request. No text could be extracted"
        assert pipeline.document is None
        assert factory.keys == []

    def test_generation_failure_message(self, make_pipeline, store, pdf_document):
        pipeline, _, _ = make_pipeline(store, error=GenerationError(GENERATION_FAILED_MESSAGE))

        pipeline.process(pdf_document)

        assert pipeline.state is PipelineState.FAILED
        assert pipeline.error_message == f"Failed to process your request. {GENERATION_FAILED_MESSAGE}"
        assert not pipeline.credential_error
        assert pipeline.quiz_data is None

    def test_unexpected_exception_becomes_failed(self, make_pipeline, store, pdf_document):
        pipeline, _, _ = make_pipeline(store, error=RuntimeError("boom"))

        pipeline.process(pdf_document)

        assert pipeline.state is PipelineState.FAILED
        assert pipeline.error_message == "Failed to process your request. boom"

    def test_rejected_key_sets_credential_flag(self, make_pipeline, store, pdf_document):
        pipeline, _, _ = make_pipeline(store, error=InvalidCredentialError("rejected"))

        pipeline.process(pdf_document)

        assert pipeline.state is PipelineState.FAILED
        assert pipeline.credential_error
        assert pipeline.error_message == INVALID_CREDENTIAL_MESSAGE

    def test_rejection_detected_from_message_text(self, make_pipeline, store, pdf_document):
        pipeline, _, _ = make_pipeline(
            store, error=RuntimeError("API key is not valid. Please pass a valid API key.")
        )

        pipeline.process(pdf_document)

        assert pipeline.credential_error
        assert pipeline.error_message == INVALID_CREDENTIAL_MESSAGE

    def test_key_cleared_between_select_and_generate(self, make_pipeline, store, pdf_document):
        pipeline, _, factory = make_pipeline(store, payload={})
        pipeline.select_file(pdf_document)
        store.clear()

        pipeline.advance()

        assert pipeline.state is PipelineState.FAILED
        assert pipeline.credential_error
        assert factory.keys == []

    def test_is_credential_failure(self):
        assert is_credential_failure(MissingCredentialError("missing"))
        assert is_credential_failure(Exception("API Key is not valid"))
        assert not is_credential_failure(GenerationError("timeout"))


# =============================================================================
# Recovery actions
# =============================================================================


class TestRecovery:
    def test_retry_after_failure_keeps_key(self, make_pipeline, store, docx_document):
        pipeline, _, _ = make_pipeline(store, payload={})
        pipeline.process(docx_document)

        state = pipeline.retry()

        assert state is PipelineState.READY
        assert pipeline.error_message == ""
        assert store.get() == VALID_KEY

    def test_restart_after_complete(self, make_pipeline, store, pdf_document, full_payload):
        pipeline, _, _ = make_pipeline(store, payload=full_payload)
        pipeline.process(pdf_document)

        pipeline.restart()

        assert pipeline.state is PipelineState.READY
        assert pipeline.quiz_data is None

    def test_retry_and_restart_are_aliases(
        self, make_pipeline, store, docx_document, pdf_document, full_payload
    ):
        pipeline, _, _ = make_pipeline(store, payload=full_payload)
        pipeline.process(docx_document)

        assert pipeline.restart() is PipelineState.READY

        pipeline.process(pdf_document)
        assert pipeline.retry() is PipelineState.READY
        assert pipeline.quiz_data is None

    def test_restart_twice_is_rejected(self, make_pipeline, store, pdf_document, full_payload):
        pipeline, _, _ = make_pipeline(store, payload=full_payload)
        pipeline.process(pdf_document)
        pipeline.restart()

        with pytest.raises(InvalidTransitionError):
            pipeline.restart()

        assert pipeline.state is PipelineState.READY

    def test_retry_credential_clears_key(self, make_pipeline, store, pdf_document):
        pipeline, _, _ = make_pipeline(store, error=InvalidCredentialError("rejected"))
        pipeline.process(pdf_document)

        state = pipeline.retry_credential()

        assert state is PipelineState.CREDENTIAL_NEEDED
        assert store.get() is None
        assert not pipeline.credential_error
        assert pipeline.error_message == ""

    def test_plain_retry_refused_after_credential_failure(
        self, make_pipeline, store, pdf_document
    ):
        pipeline, _, _ = make_pipeline(store, error=InvalidCredentialError("rejected"))
        pipeline.process(pdf_document)

        with pytest.raises(InvalidTransitionError):
            pipeline.retry()

        assert pipeline.state is PipelineState.FAILED

    def test_retry_credential_refused_after_other_failure(
        self, make_pipeline, store, docx_document
    ):
        pipeline, _, _ = make_pipeline(store, payload={})
        pipeline.process(docx_document)

        with pytest.raises(InvalidTransitionError):
            pipeline.retry_credential()

    def test_reset_credential_from_ready(self, make_pipeline, store):
        pipeline, _, _ = make_pipeline(store)

        pipeline.reset_credential()

        assert pipeline.state is PipelineState.CREDENTIAL_NEEDED
        assert store.get() is None

    def test_full_recovery_cycle(self, make_pipeline, store, pdf_document, full_payload):
        pipeline, _, factory = make_pipeline(store, error=InvalidCredentialError("rejected"))
        pipeline.process(pdf_document)
        pipeline.retry_credential()
        pipeline.submit_credential("fresh-key")
        factory.client.error = None
        factory.client.payload = full_payload

        pipeline.process(pdf_document)

        assert pipeline.state is PipelineState.COMPLETE
        assert factory.keys == [VALID_KEY, "fresh-key"]


# =============================================================================
# Guards
# =============================================================================


class TestGuards:
    def test_select_file_requires_ready(self, make_pipeline, empty_store, pdf_document):
        pipeline, extractor, _ = make_pipeline(empty_store)

        with pytest.raises(InvalidTransitionError):
            pipeline.select_file(pdf_document)

        assert extractor.calls == []

    def test_advance_outside_extracting_is_a_no_op(self, make_pipeline, store):
        pipeline, extractor, _ = make_pipeline(store)

        assert pipeline.advance() is PipelineState.READY
        assert extractor.calls == []

    def test_advance_runs_once_per_document(
        self, make_pipeline, store, pdf_document, full_payload
    ):
        pipeline, extractor, factory = make_pipeline(store, payload=full_payload)
        pipeline.select_file(pdf_document)

        pipeline.advance()
        pipeline.advance()

        assert len(extractor.calls) == 1
        assert len(factory.client.requests) == 1

    def test_reentrant_advance_is_ignored(self, make_pipeline, store, pdf_document, full_payload):
        pipeline, extractor, _ = make_pipeline(store, payload=full_payload)
        nested = []
        pipeline.subscribe(
            lambda previous, current: nested.append(pipeline.advance())
            if current is PipelineState.GENERATING
            else None
        )

        pipeline.process(pdf_document)

        assert nested == [PipelineState.GENERATING]
        assert len(extractor.calls) == 1

    def test_reset_credential_refused_while_in_flight(
        self, make_pipeline, store, pdf_document
    ):
        pipeline, _, _ = make_pipeline(store, payload={})
        pipeline.select_file(pdf_document)

        with pytest.raises(InvalidTransitionError):
            pipeline.reset_credential()

        assert store.get() == VALID_KEY
