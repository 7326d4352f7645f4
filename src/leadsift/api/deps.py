"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from leadsift.core.engine import LeadSearchEngine

# Global engine instance (set during application lifespan)
_engine: LeadSearchEngine | None = None


def set_engine(engine: LeadSearchEngine | None) -> None:
    """Set the global engine instance (called during app lifespan)."""
    global _engine
    _engine = engine


def get_engine() -> LeadSearchEngine:
    """Get the global LeadSift engine instance.

    Raises:
        RuntimeError: If the engine is not initialized.
    """
    if _engine is None:
        raise RuntimeError("LeadSift engine not initialized. Is the server running?")
    return _engine
