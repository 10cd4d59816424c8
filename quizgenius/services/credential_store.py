"""Session-scoped credential storage.

The API key lives only as long as the session that holds the store.
Nothing here writes to disk.
"""

from __future__ import annotations

import threading
from typing import Protocol


class CredentialStore(Protocol):
    """Key-value storage for the session credential."""

    def get(self) -> str | None:
        ...

    def set(self, credential: str) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryCredentialStore:
    """Holds one credential in process memory."""

    def __init__(self, credential: str | None = None) -> None:
        self._credential = credential or None
        self._lock = threading.Lock()

    def get(self) -> str | None:
        with self._lock:
            return self._credential

    def set(self, credential: str) -> None:
        with self._lock:
            self._credential = credential

    def clear(self) -> None:
        with self._lock:
            self._credential = None

    def __repr__(self) -> str:
        # Never leak the key into logs or tracebacks
        held = "set" if self._credential else "empty"
        return f"InMemoryCredentialStore({held})"
