"""
MailWarden Authentication Strategies

Strategies for detecting email authentication failures and reply
redirection through the message headers.
"""

from typing import List, Optional

from mailwarden.models.email import Message, Recipient
from mailwarden.models.detection import DetectionSignal, SignalType
from mailwarden.utils.constants import (
    AUTH_FAILURE_MIN_COUNT,
    AUTH_FAILURES_CONFIDENCE,
    FREEMAIL_DOMAINS,
    HEADER_AUTHENTICATION_RESULTS,
    HEADER_RECEIVED_SPF,
    HEADER_REPLY_TO,
    REPLY_TO_CONFIDENCE,
)
from mailwarden.utils.helpers import extract_domain

from .base import DetectionContext, DetectionStrategy


class AuthFailuresStrategy(DetectionStrategy):
    """
    Detect combined SPF, DKIM and DMARC failures.

    A single failing protocol is common with forwarding and relays, so at
    least two failures are required.
    """

    name = "Authentication Failures"
    signal_types = frozenset({SignalType.AUTH_FAILURES})

    def detect(
        self,
        message: Message,
        recipient: Optional[Recipient],
        context: DetectionContext,
    ) -> Optional[DetectionSignal]:
        failures: List[str] = []

        spf = message.header(HEADER_RECEIVED_SPF).lower()
        if "fail" in spf:
            failures.append("SPF_FAIL")

        auth_results = message.header(HEADER_AUTHENTICATION_RESULTS).lower()
        if "dkim=fail" in auth_results:
            failures.append("DKIM_FAIL")
        if "dmarc=fail" in auth_results:
            failures.append("DMARC_FAIL")

        if len(failures) < AUTH_FAILURE_MIN_COUNT:
            return None

        return self.create_signal(
            SignalType.AUTH_FAILURES,
            AUTH_FAILURES_CONFIDENCE,
            f"Email authentication failures: {', '.join(failures)}",
        )


class ReplyToStrategy(DetectionStrategy):
    """Detect a Reply-To header that redirects answers to a freemail mailbox."""

    name = "Reply-To Mismatch"
    signal_types = frozenset({SignalType.REPLY_TO_MISMATCH})

    def detect(
        self,
        message: Message,
        recipient: Optional[Recipient],
        context: DetectionContext,
    ) -> Optional[DetectionSignal]:
        sender_email = message.sender_email.strip().lower()
        reply_to = message.header(HEADER_REPLY_TO).strip().lower()

        if not reply_to or reply_to == sender_email:
            return None

        reply_to_domain = extract_domain(reply_to)
        if reply_to_domain not in FREEMAIL_DOMAINS:
            return None
        if reply_to_domain == extract_domain(sender_email):
            return None

        return self.create_signal(
            SignalType.REPLY_TO_MISMATCH,
            REPLY_TO_CONFIDENCE,
            f"Sender: {sender_email}, Reply-To: {reply_to} "
            f"(free email service, redirects responses)",
        )
