"""
MailWarden Analyses API Routes

Read access to stored fraud analyses.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from mailwarden.api.dependencies import get_store
from mailwarden.models.detection import FraudVerdict
from mailwarden.services.storage import Store
from mailwarden.utils.exceptions import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analyses", tags=["analyses"])


@router.get("/high-risk", response_model=List[FraudVerdict])
async def high_risk_analyses(
    tenant_id: UUID = Query(..., description="Tenant to report on"),
    limit: int = Query(10, ge=1, le=100),
    store: Store = Depends(get_store),
) -> List[FraudVerdict]:
    """High and critical analyses of a tenant, highest score first."""
    try:
        return await store.get_high_risk_analyses(tenant_id, limit)
    except StorageError as e:
        logger.error(f"Failed to load high-risk analyses: {e}")
        raise HTTPException(status_code=503, detail="Analysis store unavailable")
