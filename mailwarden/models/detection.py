"""
MailWarden Detection Data Models

Pydantic models for detection signals and the aggregate fraud verdict.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mailwarden.utils.constants import HIGH_RISK_LEVELS
from mailwarden.utils.helpers import generate_id, get_risk_level, utc_now


class SignalType(str, Enum):
    """Every signal type a detection strategy can emit."""
    DISPLAY_NAME_MISMATCH = "DISPLAY_NAME_MISMATCH"
    DOMAIN_TYPOSQUATTING = "DOMAIN_TYPOSQUATTING"
    AUTH_FAILURES = "AUTH_FAILURES"
    URGENCY_FINANCIAL_LANGUAGE = "URGENCY_FINANCIAL_LANGUAGE"
    REPLY_TO_MISMATCH = "REPLY_TO_MISMATCH"
    HIGH_RISK_ATTACHMENT = "HIGH_RISK_ATTACHMENT"
    SUSPICIOUS_ATTACHMENT_NAME = "SUSPICIOUS_ATTACHMENT_NAME"
    MEDIUM_RISK_ATTACHMENT_WITH_URGENCY = "MEDIUM_RISK_ATTACHMENT_WITH_URGENCY"
    BEC_CSUITE_TARGETING = "BEC_CSUITE_TARGETING"
    BEC_FINANCE_TARGETING = "BEC_FINANCE_TARGETING"
    BEC_HR_PAYROLL_SCAM = "BEC_HR_PAYROLL_SCAM"
    BEC_HIGH_VALUE_TARGET = "BEC_HIGH_VALUE_TARGET"


class RiskLevel(str, Enum):
    """Risk level classification."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def from_score(cls, score: float) -> "RiskLevel":
        return cls(get_risk_level(score))


class DetectionSignal(BaseModel):
    """A single threat signal emitted by one strategy."""
    signal_type: SignalType = Field(..., description="Type of threat detected")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Detection confidence 0-1")
    evidence: str = Field(..., description="Human-readable justification")

    model_config = ConfigDict(frozen=True)


class FraudVerdict(BaseModel):
    """Aggregated detection result for one message."""
    id: UUID = Field(default_factory=generate_id)
    message_id: Optional[UUID] = Field(None, description="Analysed message")
    risk_score: float = Field(..., ge=0.0, le=1.0, description="Risk score 0-1")
    risk_level: RiskLevel = Field(..., description="Risk level derived from the score")
    signals: List[DetectionSignal] = Field(default_factory=list, description="Signals in strategy order")
    analyzed_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _level_matches_score(self) -> "FraudVerdict":
        expected = RiskLevel.from_score(self.risk_score)
        if self.risk_level != expected:
            raise ValueError(
                f"risk_level {self.risk_level.value!r} does not match score "
                f"{self.risk_score} (expected {expected.value!r})"
            )
        return self

    @property
    def signal_types(self) -> List[SignalType]:
        """Distinct signal types in the order they were detected."""
        seen: List[SignalType] = []
        for signal in self.signals:
            if signal.signal_type not in seen:
                seen.append(signal.signal_type)
        return seen

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level.value in HIGH_RISK_LEVELS
