"""
MailWarden Health API Routes

Health check and status endpoints.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from mailwarden.api.dependencies import get_engine, get_settings
from mailwarden.utils.helpers import utc_now

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(
    settings=Depends(get_settings),
    engine=Depends(get_engine),
) -> Dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "service": "mailwarden-api",
        "version": settings.app_version,
        "strategies_loaded": len(engine.strategies),
    }
