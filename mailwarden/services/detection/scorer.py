"""
MailWarden Risk Scorer

Aggregates detection signals into a single risk score and level.
"""

import logging
from typing import Dict, List, Mapping, Optional

from mailwarden.models.detection import DetectionSignal, RiskLevel, SignalType
from mailwarden.utils.constants import DEFAULT_SIGNAL_WEIGHT, SIGNAL_WEIGHTS
from mailwarden.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class RiskScorer:
    """
    Weighted-maximum aggregation.

    Each signal contributes confidence * weight(type); the score is the
    largest contribution, capped at 1.0.
    """

    def __init__(self, weights: Optional[Mapping[str, float]] = None):
        self.weights: Dict[str, float] = dict(SIGNAL_WEIGHTS if weights is None else weights)
        for signal_type, weight in self.weights.items():
            if weight < 0:
                raise ConfigurationError(f"Negative weight for {signal_type}: {weight}")
        self.max_score = 1.0

    def get_weight(self, signal_type: SignalType) -> float:
        """Weight for a signal type; unknown types weigh 1.0."""
        return self.weights.get(signal_type.value, DEFAULT_SIGNAL_WEIGHT)

    def weighted_confidence(self, signal: DetectionSignal) -> float:
        return signal.confidence * self.get_weight(signal.signal_type)

    def calculate_score(self, signals: List[DetectionSignal]) -> float:
        """
        Calculate aggregate risk score from signals.

        Args:
            signals: Signals emitted by the strategies

        Returns:
            Risk score 0.0-1.0
        """
        if not signals:
            return 0.0

        max_weighted = max(self.weighted_confidence(signal) for signal in signals)
        return min(max_weighted, self.max_score)

    def get_risk_level(self, score: float) -> RiskLevel:
        """
        Get risk level from numeric score.

        Args:
            score: Risk score 0.0-1.0

        Returns:
            RiskLevel enum value
        """
        return RiskLevel.from_score(score)

    def get_breakdown(self, signals: List[DetectionSignal]) -> Dict[str, float]:
        """Weighted contribution per signal type, for reporting."""
        breakdown: Dict[str, float] = {}
        for signal in signals:
            key = signal.signal_type.value
            breakdown[key] = max(breakdown.get(key, 0.0), round(self.weighted_confidence(signal), 4))
        return breakdown
