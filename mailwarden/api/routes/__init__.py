"""
MailWarden API Routes

All API route modules.
"""

from fastapi import APIRouter

from .analyze import router as analyze_router
from .analyses import router as analyses_router
from .health import router as health_router


def get_api_router() -> APIRouter:
    """Create and return the main API router."""
    api_router = APIRouter(prefix="/api/v1")

    api_router.include_router(health_router)
    api_router.include_router(analyze_router)
    api_router.include_router(analyses_router)

    return api_router


__all__ = [
    'get_api_router',
    'analyze_router',
    'analyses_router',
    'health_router',
]
