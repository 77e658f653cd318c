"""
MailWarden Social Engineering Strategy

Scores the combination of urgency, financial and authority language that
characterises payment fraud requests.
"""

from typing import Optional

from mailwarden.models.email import Message, Recipient
from mailwarden.models.detection import DetectionSignal, SignalType
from mailwarden.utils.constants import (
    AUTHORITY_KEYWORDS,
    AUTHORITY_WEIGHT,
    FINANCIAL_KEYWORDS,
    FINANCIAL_WEIGHT,
    LANGUAGE_BASE_CONFIDENCE,
    LANGUAGE_CONFIDENCE_SLOPE,
    LANGUAGE_MAX_CONFIDENCE,
    LANGUAGE_SCORE_THRESHOLD,
    URGENCY_KEYWORDS,
    URGENCY_WEIGHT,
)
from mailwarden.utils.helpers import count_keywords

from .base import DetectionContext, DetectionStrategy


def language_score(urgency_count: int, financial_count: int, authority_count: int) -> float:
    """Weighted keyword score; financial language weighs the most."""
    return (
        urgency_count * URGENCY_WEIGHT
        + financial_count * FINANCIAL_WEIGHT
        + authority_count * AUTHORITY_WEIGHT
    )


def language_confidence(score: float) -> float:
    """Confidence grows linearly past the threshold and saturates."""
    confidence = LANGUAGE_BASE_CONFIDENCE + (score - LANGUAGE_SCORE_THRESHOLD) * LANGUAGE_CONFIDENCE_SLOPE
    return min(confidence, LANGUAGE_MAX_CONFIDENCE)


class UrgencyFinancialStrategy(DetectionStrategy):
    """Detect urgency + financial keywords in subject and body."""

    name = "Urgency + Financial Keywords"
    signal_types = frozenset({SignalType.URGENCY_FINANCIAL_LANGUAGE})

    def detect(
        self,
        message: Message,
        recipient: Optional[Recipient],
        context: DetectionContext,
    ) -> Optional[DetectionSignal]:
        text = message.text

        urgency_count = count_keywords(text, URGENCY_KEYWORDS)
        financial_count = count_keywords(text, FINANCIAL_KEYWORDS)
        authority_count = count_keywords(text, AUTHORITY_KEYWORDS)

        score = language_score(urgency_count, financial_count, authority_count)
        if score <= LANGUAGE_SCORE_THRESHOLD:
            return None

        return self.create_signal(
            SignalType.URGENCY_FINANCIAL_LANGUAGE,
            round(language_confidence(score), 4),
            f"High-risk language detected (score: {score:.2f}): "
            f"{urgency_count} urgency, {financial_count} financial, "
            f"{authority_count} authority keywords",
        )
