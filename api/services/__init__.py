"""API services package."""

from api.services.session_registry import Session, SessionRegistry, get_registry

__all__ = ["Session", "SessionRegistry", "get_registry"]
