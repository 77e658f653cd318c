"""
MailWarden Lookalike Domain Strategy

Detects sender domains that are edit-distance close to, but not the same as,
a trusted partner domain.
"""

from typing import Optional

from mailwarden.models.email import Message, Recipient
from mailwarden.models.detection import DetectionSignal, SignalType
from mailwarden.utils.constants import (
    TYPOSQUATTING_CONFIDENCE,
    TYPOSQUATTING_MAX_SIMILARITY,
    TYPOSQUATTING_MIN_SIMILARITY,
)
from mailwarden.utils.helpers import similarity_percent

from .base import DetectionContext, DetectionStrategy


class TyposquattingStrategy(DetectionStrategy):
    """
    Compare the sender domain against each trusted domain in list order.

    The first trusted domain whose similarity falls strictly between the two
    thresholds wins; there is no search for the globally closest domain.
    """

    name = "Domain Typosquatting"
    signal_types = frozenset({SignalType.DOMAIN_TYPOSQUATTING})

    def detect(
        self,
        message: Message,
        recipient: Optional[Recipient],
        context: DetectionContext,
    ) -> Optional[DetectionSignal]:
        sender_domain = self.get_sender_domain(message)
        if not sender_domain:
            return None

        for trusted_domain in context.trusted_domains:
            if sender_domain == trusted_domain:
                continue

            similarity = similarity_percent(sender_domain, trusted_domain)
            if TYPOSQUATTING_MIN_SIMILARITY < similarity < TYPOSQUATTING_MAX_SIMILARITY:
                return self.create_signal(
                    SignalType.DOMAIN_TYPOSQUATTING,
                    TYPOSQUATTING_CONFIDENCE,
                    f"Sender domain '{sender_domain}' is {similarity:.1f}% similar to "
                    f"trusted domain '{trusted_domain}' (potential typosquatting)",
                )

        return None
