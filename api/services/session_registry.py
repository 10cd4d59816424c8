"""Session registry - one pipeline and credential store per browser session.

Sessions live in process memory only. Ending a session, leaving it idle
past the TTL, or restarting the server discards its API key.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from api.config import get_settings
from quizgenius.pipeline import QuizPipeline
from quizgenius.pipeline.orchestrator import IN_FLIGHT_STATES
from quizgenius.services import CredentialStore, InMemoryCredentialStore

logger = logging.getLogger(__name__)

PipelineFactory = Callable[[CredentialStore], QuizPipeline]


@dataclass
class Session:
    """A browser session and its pipeline."""

    session_id: str
    pipeline: QuizPipeline
    last_seen: float = field(default_factory=time.monotonic)
    # Serializes user actions within the session
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class SessionRegistry:
    """
    Thread-safe in-memory map of session id → Session.

    Sessions idle for longer than ``ttl_seconds`` are evicted, and at most
    ``max_sessions`` are kept (least recently seen go first). A session
    whose lock is held (a document is being processed) is never evicted.
    """

    def __init__(
        self,
        pipeline_factory: PipelineFactory | None = None,
        ttl_seconds: float | None = None,
        max_sessions: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._pipeline_factory = pipeline_factory or (lambda store: QuizPipeline(store))
        self._ttl_seconds = ttl_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create(self) -> Session:
        """Start a new session with an empty credential store."""
        session_id = secrets.token_urlsafe(24)
        session = Session(
            session_id=session_id,
            pipeline=self._pipeline_factory(InMemoryCredentialStore()),
            last_seen=self._clock(),
        )
        with self._lock:
            evicted = self._collect_expired()
            if self._max_sessions is not None:
                evicted += self._collect_overflow(self._max_sessions - 1)
            self._sessions[session_id] = session
        self._discard(evicted)
        logger.info(f"Created session {session_id[:6]}…")
        return session

    def get(self, session_id: str | None) -> Session | None:
        """Look up a live session and mark it as seen."""
        if not session_id:
            return None
        with self._lock:
            evicted = self._collect_expired()
            session = self._sessions.get(session_id)
            if session is not None:
                session.last_seen = self._clock()
        self._discard(evicted)
        return session

    def get_or_create(self, session_id: str | None) -> Session:
        return self.get(session_id) or self.create()

    def end(self, session_id: str) -> bool:
        """Drop a session and discard its API key. Returns False if it did not exist.

        Waits for a running action of the session to finish first.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        with session.lock:
            self._reset(session)
        logger.info(f"Ended session {session_id[:6]}…")
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    # =========================================================================
    # Eviction (callers hold self._lock)
    # =========================================================================

    def _collect_expired(self) -> list[Session]:
        if self._ttl_seconds is None:
            return []
        cutoff = self._clock() - self._ttl_seconds
        expired = [
            s for s in self._sessions.values()
            if s.last_seen < cutoff and not s.lock.locked()
        ]
        for session in expired:
            del self._sessions[session.session_id]
        return expired

    def _collect_overflow(self, limit: int) -> list[Session]:
        excess = len(self._sessions) - max(limit, 0)
        if excess <= 0:
            return []
        idle = sorted(
            (s for s in self._sessions.values() if not s.lock.locked()),
            key=lambda s: s.last_seen,
        )
        overflow = idle[:excess]
        for session in overflow:
            del self._sessions[session.session_id]
        return overflow

    def _discard(self, sessions: list[Session]) -> None:
        for session in sessions:
            if session.lock.acquire(blocking=False):
                try:
                    self._reset(session)
                finally:
                    session.lock.release()
            logger.info(f"Evicted idle session {session.session_id[:6]}…")

    @staticmethod
    def _reset(session: Session) -> None:
        if session.pipeline.state not in IN_FLIGHT_STATES:
            session.pipeline.reset_credential()


_registry: SessionRegistry | None = None


def get_registry() -> SessionRegistry:
    """Get the global session registry."""
    global _registry
    if _registry is None:
        settings = get_settings()
        _registry = SessionRegistry(
            ttl_seconds=settings.session_ttl_seconds,
            max_sessions=settings.max_sessions,
        )
    return _registry
