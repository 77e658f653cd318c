"""
MailWarden Display Name Impersonation Strategy

Flags external senders whose display name claims an executive title
(CEO fraud / "fraude au président").
"""

from typing import Optional

from mailwarden.models.email import Message, Recipient
from mailwarden.models.detection import DetectionSignal, SignalType
from mailwarden.utils.constants import DISPLAY_NAME_CONFIDENCE, EXECUTIVE_TITLES

from .base import DetectionContext, DetectionStrategy


class DisplayNameStrategy(DetectionStrategy):
    """Detect executive title in display name with an external sender domain."""

    name = "Display Name Mismatch"
    signal_types = frozenset({SignalType.DISPLAY_NAME_MISMATCH})

    def detect(
        self,
        message: Message,
        recipient: Optional[Recipient],
        context: DetectionContext,
    ) -> Optional[DetectionSignal]:
        display_name = message.sender_name.lower()
        sender_domain = self.get_sender_domain(message)

        has_title = any(title in display_name for title in EXECUTIVE_TITLES)
        if not has_title or context.is_internal(sender_domain):
            return None

        return self.create_signal(
            SignalType.DISPLAY_NAME_MISMATCH,
            DISPLAY_NAME_CONFIDENCE,
            f"Display name '{message.sender_name}' contains executive title "
            f"but sender domain '{sender_domain}' is external",
        )
