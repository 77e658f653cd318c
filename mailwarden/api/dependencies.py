"""
MailWarden API Dependencies

FastAPI dependency injection for settings, the store and the detection engine.
"""

import logging
from typing import Optional

from mailwarden.config import Settings, get_settings
from mailwarden.services.detection import DetectionEngine
from mailwarden.services.storage import Store, get_sqlite_store

logger = logging.getLogger(__name__)

_store: Optional[Store] = None
_engine: Optional[DetectionEngine] = None


def init_store(store: Optional[Store] = None, settings: Optional[Settings] = None) -> Store:
    """Initialize the analysis store (SQLite unless one is supplied)."""
    global _store
    if store is None:
        settings = settings or get_settings()
        store = get_sqlite_store(settings.database_path)
    _store = store
    logger.info(f"Analysis store initialized: {type(store).__name__}")
    return _store


def init_engine(settings: Optional[Settings] = None) -> DetectionEngine:
    """Initialize the detection engine from settings."""
    global _engine
    _engine = DetectionEngine.from_settings(settings or get_settings())
    return _engine


def get_store() -> Store:
    """Get the analysis store, initializing it on first use."""
    if _store is None:
        return init_store()
    return _store


def get_engine() -> DetectionEngine:
    """Get the detection engine, initializing it on first use."""
    if _engine is None:
        return init_engine()
    return _engine


def reset_dependencies() -> None:
    """Drop the cached store and engine."""
    global _store, _engine
    _store = None
    _engine = None


__all__ = [
    'get_settings',
    'get_store',
    'get_engine',
    'init_store',
    'init_engine',
    'reset_dependencies',
]
