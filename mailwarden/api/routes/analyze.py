"""
MailWarden Analyze API Routes

Synchronous analysis of a single message. Nothing is persisted.
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from mailwarden.api.dependencies import get_engine
from mailwarden.models.email import Message, Recipient
from mailwarden.models.detection import FraudVerdict
from mailwarden.services.detection import DetectionEngine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


class AnalyzeRequest(BaseModel):
    """Message to analyse plus the optional recipient identity."""
    message: Message
    recipient: Optional[Recipient] = None


class AnalyzeResponse(BaseModel):
    verdict: FraudVerdict
    breakdown: Dict[str, float] = Field(default_factory=dict, description="Weighted contribution per signal type")


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    request: AnalyzeRequest,
    engine: DetectionEngine = Depends(get_engine),
) -> AnalyzeResponse:
    """Run every detection strategy against the message and return the verdict."""
    verdict = engine.analyze(request.message, request.recipient)
    return AnalyzeResponse(
        verdict=verdict,
        breakdown=engine.scorer.get_breakdown(verdict.signals),
    )


@router.get("/rules")
async def list_rules(engine: DetectionEngine = Depends(get_engine)):
    """Configured strategies and the signal types they emit."""
    return engine.get_rule_summary()
