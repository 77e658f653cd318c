"""
MailWarden Sample Email Source

Deterministic provider adapter returning demonstration mailboxes for the
Microsoft and Google providers. Real Graph / Gmail clients would implement
the same EmailSource contract.
"""

import logging
from datetime import datetime, timedelta
from email.utils import parseaddr
from typing import Dict, List, Tuple
from uuid import UUID

from mailwarden.models.email import Message, Provider, Recipient
from mailwarden.utils.constants import MAX_BODY_PREVIEW_LENGTH
from mailwarden.utils.helpers import truncate_string, utc_now

from .base import EmailSource

logger = logging.getLogger(__name__)


# provider -> [(provider_user_id, email, display_name, role)]
SAMPLE_USERS: Dict[Provider, List[Tuple[str, str, str, str]]] = {
    Provider.MICROSOFT: [
        ("user-1", "john.doe@company.com", "John Doe", "CFO"),
        ("user-2", "jane.smith@company.com", "Jane Smith", "HR Director"),
    ],
    Provider.GOOGLE: [
        ("google-user-1", "alice@example.com", "Alice Johnson", "CEO"),
    ],
}


def parse_address(value: str) -> Tuple[str, str]:
    """
    Split "Name <addr>" into (display name, address).

    Unparsable values degrade to ("", raw value).
    """
    name, address = parseaddr(value)
    if not address:
        logger.warning(f"Failed to parse email address {value!r}")
        return "", value
    return name, address


class SampleEmailSource(EmailSource):
    """Email source serving fixed sample data for one provider."""

    def __init__(self, provider: Provider):
        self.provider = provider

    async def get_users(self, tenant_id: UUID) -> List[Recipient]:
        return [
            Recipient(
                tenant_id=tenant_id,
                provider_user_id=provider_user_id,
                email=email,
                display_name=display_name,
                role=role,
            )
            for provider_user_id, email, display_name, role in SAMPLE_USERS.get(self.provider, [])
        ]

    async def get_messages(self, user: Recipient, received_after: datetime) -> List[Message]:
        now = utc_now()
        if self.provider == Provider.MICROSOFT:
            messages = [self._wire_transfer_request(user, now)]
        else:
            messages = [self._lookalike_invoice(user, now)]
        return [m for m in messages if m.received_at > received_after]

    def _wire_transfer_request(self, user: Recipient, now: datetime) -> Message:
        return Message(
            tenant_id=user.tenant_id,
            user_id=user.id,
            provider_message_id=f"msg-{user.provider_user_id}-001",
            subject="Urgent: Wire Transfer Needed",
            sender_email="john@external-domain.com",
            sender_name="CEO John Smith",
            recipient_email=user.email,
            received_at=now - timedelta(hours=1),
            body_preview=truncate_string(
                "Please process this wire transfer immediately. Keep this confidential "
                "and do not discuss it with anyone until the deal is announced.",
                MAX_BODY_PREVIEW_LENGTH,
            ),
            headers={},
            ingested_at=now,
        )

    def _lookalike_invoice(self, user: Recipient, now: datetime) -> Message:
        sender_name, sender_email = parse_address("Accounts Payable <accounts@companny.com>")
        return Message(
            tenant_id=user.tenant_id,
            user_id=user.id,
            provider_message_id=f"gmail-{user.provider_user_id}-001",
            subject="Invoice #4821 - Payment Required",
            sender_email=sender_email,
            sender_name=sender_name,
            recipient_email=user.email,
            received_at=now - timedelta(hours=2),
            body_preview=(
                "Please find attached invoice for immediate payment. "
                "Wire transfer to the new account urgently."
            ),
            has_attachments=True,
            attachment_names=("Invoice_4821.pdf.exe",),
            headers={
                "Reply-To": "urgent-payments@gmail.com",
                "Received-SPF": "fail (domain of companny.com does not designate sender)",
                "Authentication-Results": "mx.google.com; dkim=fail; spf=fail; dmarc=fail",
            },
            ingested_at=now,
        )
