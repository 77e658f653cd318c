"""
MailWarden Attachment Strategy

Flags executable attachments, double-extension file names and macro-capable
office documents delivered with urgent language.
"""

from typing import Optional

from mailwarden.models.email import Message, Recipient
from mailwarden.models.detection import DetectionSignal, SignalType
from mailwarden.utils.constants import (
    ATTACHMENT_URGENCY_KEYWORDS,
    HIGH_RISK_ATTACHMENT_CONFIDENCE,
    HIGH_RISK_EXTENSIONS,
    MEDIUM_RISK_ATTACHMENT_CONFIDENCE,
    MEDIUM_RISK_EXTENSIONS,
    SUSPICIOUS_ATTACHMENT_NAME_CONFIDENCE,
)
from mailwarden.utils.helpers import contains_any

from .base import DetectionContext, DetectionStrategy


class AttachmentStrategy(DetectionStrategy):
    """
    Scan attachment names in the order given.

    For each name the checks run high-risk extension, then double extension,
    then macro document + urgency. The first attachment that trips any check
    produces the signal and the scan stops.
    """

    name = "Suspicious Attachments"
    signal_types = frozenset({
        SignalType.HIGH_RISK_ATTACHMENT,
        SignalType.SUSPICIOUS_ATTACHMENT_NAME,
        SignalType.MEDIUM_RISK_ATTACHMENT_WITH_URGENCY,
    })

    def detect(
        self,
        message: Message,
        recipient: Optional[Recipient],
        context: DetectionContext,
    ) -> Optional[DetectionSignal]:
        if not message.has_attachments:
            return None

        has_urgency = contains_any(message.text, ATTACHMENT_URGENCY_KEYWORDS)

        for name in message.attachment_names:
            filename = name.lower()

            if filename.endswith(tuple(HIGH_RISK_EXTENSIONS)):
                return self.create_signal(
                    SignalType.HIGH_RISK_ATTACHMENT,
                    HIGH_RISK_ATTACHMENT_CONFIDENCE,
                    f"High-risk attachment type: {name}",
                )

            if filename.count(".") > 1:
                return self.create_signal(
                    SignalType.SUSPICIOUS_ATTACHMENT_NAME,
                    SUSPICIOUS_ATTACHMENT_NAME_CONFIDENCE,
                    f"Suspicious attachment name (double extension): {name}",
                )

            if has_urgency and filename.endswith(tuple(MEDIUM_RISK_EXTENSIONS)):
                return self.create_signal(
                    SignalType.MEDIUM_RISK_ATTACHMENT_WITH_URGENCY,
                    MEDIUM_RISK_ATTACHMENT_CONFIDENCE,
                    f"Medium-risk attachment + urgent language: {name}",
                )

        return None
