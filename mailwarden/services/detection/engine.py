"""
MailWarden Detection Engine

Runs the fixed strategy set against a message and aggregates the signals
into a fraud verdict.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from mailwarden.models.email import Message, Recipient, Tenant
from mailwarden.models.detection import DetectionSignal, FraudVerdict
from mailwarden.services.detection.rules import (
    DetectionContext,
    DetectionStrategy,
    get_default_strategies,
)
from mailwarden.services.detection.scorer import RiskScorer
from mailwarden.utils.exceptions import DetectionError

logger = logging.getLogger(__name__)


class DetectionEngine:
    """
    Main detection engine.

    Holds the ordered strategies and the detection context. Nothing is
    mutated after construction, so one engine can serve concurrent callers.
    """

    def __init__(
        self,
        internal_domains: Iterable[str] = (),
        trusted_domains: Iterable[str] = (),
        strategies: Optional[Sequence[DetectionStrategy]] = None,
        weights: Optional[Mapping[str, float]] = None,
    ):
        """Initialize detection engine with its context and strategies."""
        self.context = DetectionContext(
            internal_domains=internal_domains,
            trusted_domains=trusted_domains,
        )
        self._strategies = tuple(strategies if strategies is not None else get_default_strategies())
        if not self._strategies:
            raise DetectionError("Detection engine needs at least one strategy")
        self.scorer = RiskScorer(weights)

    @classmethod
    def from_settings(cls, settings) -> "DetectionEngine":
        """Build an engine from application settings."""
        return cls(settings.internal_domains, settings.trusted_domains)

    @classmethod
    def from_tenant(cls, tenant: Tenant, settings=None) -> "DetectionEngine":
        """Build an engine from a tenant's domains, falling back to settings."""
        internal = tenant.internal_domains or (settings.internal_domains if settings else [])
        trusted = tenant.trusted_domains or (settings.trusted_domains if settings else [])
        return cls(internal, trusted)

    @property
    def strategies(self) -> Sequence[DetectionStrategy]:
        return self._strategies

    def collect_signals(
        self,
        message: Message,
        recipient: Optional[Recipient] = None,
    ) -> List[DetectionSignal]:
        """Run every strategy in order and keep the non-abstaining signals."""
        signals: List[DetectionSignal] = []
        for strategy in self._strategies:
            signal = strategy.detect(message, recipient, self.context)
            if signal is None:
                logger.debug(f"{strategy.name}: no signal")
                continue
            logger.debug(f"{strategy.name}: {signal.signal_type.value} ({signal.confidence:.2f})")
            signals.append(signal)
        return signals

    def analyze(
        self,
        message: Message,
        recipient: Optional[Recipient] = None,
    ) -> FraudVerdict:
        """
        Run all detection strategies and return the verdict.

        Args:
            message: Message to analyse
            recipient: Known recipient identity, if any

        Returns:
            FraudVerdict with score, level and signals in strategy order
        """
        signals = self.collect_signals(message, recipient)
        score = self.scorer.calculate_score(signals)
        risk_level = self.scorer.get_risk_level(score)

        logger.info(
            f"Detection complete for message {message.id}: "
            f"score={score:.2f} level={risk_level.value} signals={len(signals)}"
        )

        return FraudVerdict(
            message_id=message.id,
            risk_score=score,
            risk_level=risk_level,
            signals=signals,
        )

    def get_rule_summary(self) -> Dict[str, Any]:
        """
        Get summary of the configured strategies.

        Returns:
            Dictionary with strategy names and the signal types they emit
        """
        return {
            'total_strategies': len(self._strategies),
            'strategies': [
                {
                    'name': strategy.name,
                    'signal_types': sorted(t.value for t in strategy.signal_types),
                }
                for strategy in self._strategies
            ],
            'internal_domains': list(self.context.internal_domains),
            'trusted_domains': list(self.context.trusted_domains),
        }


def analyze_message(
    message: Message,
    recipient: Optional[Recipient] = None,
    internal_domains: Iterable[str] = (),
    trusted_domains: Iterable[str] = (),
) -> FraudVerdict:
    """
    Convenience function to analyse a single message.

    Args:
        message: Message to analyse
        recipient: Known recipient identity, if any
        internal_domains: Organization's own domains
        trusted_domains: Legitimate partner domains

    Returns:
        FraudVerdict
    """
    engine = DetectionEngine(internal_domains, trusted_domains)
    return engine.analyze(message, recipient)
