"""Session router - drives the quiz pipeline of the caller's session.

Endpoints:
    GET    /api/session - Current pipeline state
    POST   /api/session/credential - Submit the API key
    POST   /api/session/document - Upload a PDF and run the pipeline
    POST   /api/session/retry - Dismiss a failure, back to file selection
    POST   /api/session/restart - Discard the quiz, back to file selection
    POST   /api/session/retry-credential - Re-enter the key after it was rejected
    POST   /api/session/reset-credential - Forget the key
    GET    /api/session/export - Copy-ready text of the generated quiz
    DELETE /api/session - End the session
"""

from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from api.config import get_settings
from api.schemas.api_models import CredentialRequest, SessionResponse
from api.services.session_registry import Session, SessionRegistry, get_registry
from quizgenius.errors import InvalidTransitionError, MissingCredentialError
from quizgenius.export import format_quiz_for_export
from quizgenius.models import Document, PipelineState

router = APIRouter()


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


def get_session(
    request: Request,
    response: Response,
    registry: SessionRegistry = Depends(get_registry),
) -> Session:
    """Resolve the caller's session from its cookie, creating one if needed."""
    settings = get_settings()
    session = registry.get_or_create(request.cookies.get(settings.session_cookie_name))
    response.set_cookie(
        settings.session_cookie_name,
        session.session_id,
        httponly=True,
        samesite="lax",
    )
    return session


def get_existing_session(
    request: Request,
    registry: SessionRegistry = Depends(get_registry),
) -> Session:
    """Resolve the caller's session without creating one.

    Only reading the state and submitting a key start a session; every
    other action needs one already.
    """
    settings = get_settings()
    session = registry.get(request.cookies.get(settings.session_cookie_name))
    if session is None:
        raise HTTPException(status_code=404, detail="No active session")
    return session


def _respond(session: Session) -> SessionResponse:
    return SessionResponse(session_id=session.session_id, pipeline=session.pipeline.snapshot())


def _act(session: Session, action: Callable[[], object]) -> SessionResponse:
    """Run one user action under the session lock and return the new state."""
    if not session.lock.acquire(blocking=False):
        raise HTTPException(status_code=409, detail="The session is busy processing a document")
    try:
        action()
    except MissingCredentialError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    finally:
        session.lock.release()
    return _respond(session)


# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------


@router.get("", response_model=SessionResponse)
async def get_state(session: Session = Depends(get_session)) -> SessionResponse:
    """Return the current pipeline state."""
    return _respond(session)


@router.delete("")
async def end_session(
    response: Response,
    session: Session = Depends(get_existing_session),
    registry: SessionRegistry = Depends(get_registry),
) -> dict[str, str]:
    """End the session and discard its API key.

    Waits for an upload of the same session to finish first.
    """
    await run_in_threadpool(registry.end, session.session_id)
    response.delete_cookie(get_settings().session_cookie_name)
    return {"status": "ended"}


# -----------------------------------------------------------------------------
# Credential
# -----------------------------------------------------------------------------


@router.post("/credential", response_model=SessionResponse)
async def submit_credential(
    body: CredentialRequest,
    session: Session = Depends(get_session),
) -> SessionResponse:
    """Store the API key for this session."""
    return _act(session, lambda: session.pipeline.submit_credential(body.api_key))


@router.post("/retry-credential", response_model=SessionResponse)
async def retry_credential(session: Session = Depends(get_existing_session)) -> SessionResponse:
    """After the key was rejected, clear it and ask for a new one."""
    return _act(session, session.pipeline.retry_credential)


@router.post("/reset-credential", response_model=SessionResponse)
async def reset_credential(session: Session = Depends(get_existing_session)) -> SessionResponse:
    """Forget the API key."""
    return _act(session, session.pipeline.reset_credential)


# -----------------------------------------------------------------------------
# Document processing
# -----------------------------------------------------------------------------


@router.post("/document", response_model=SessionResponse)
async def upload_document(
    file: UploadFile = File(...),
    session: Session = Depends(get_existing_session),
) -> SessionResponse:
    """Upload a document and run extraction and generation.

    Blocks until the pipeline reaches COMPLETE or FAILED.
    """
    settings = get_settings()
    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.max_upload_bytes // (1024 * 1024)}MB limit",
        )

    document = Document(
        content=content,
        media_type=file.content_type or "application/octet-stream",
        filename=file.filename or "",
    )
    return await run_in_threadpool(_act, session, lambda: session.pipeline.process(document))


@router.post("/retry", response_model=SessionResponse)
async def retry(session: Session = Depends(get_existing_session)) -> SessionResponse:
    """Dismiss a failure and return to file selection."""
    return _act(session, session.pipeline.retry)


@router.post("/restart", response_model=SessionResponse)
async def restart(session: Session = Depends(get_existing_session)) -> SessionResponse:
    """Discard the generated quiz and return to file selection."""
    return _act(session, session.pipeline.restart)


@router.get("/export", response_class=PlainTextResponse)
async def export_quiz(session: Session = Depends(get_existing_session)) -> str:
    """Return the generated quiz as copy-ready text."""
    pipeline = session.pipeline
    if pipeline.state is not PipelineState.COMPLETE or pipeline.quiz_data is None:
        raise HTTPException(status_code=409, detail="No quiz has been generated in this session")
    return format_quiz_for_export(pipeline.quiz_data)
