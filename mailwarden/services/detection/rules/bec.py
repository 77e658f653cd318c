"""
MailWarden Business Email Compromise (BEC) Strategy

Detects external messages aimed at high-value roles (executives, finance,
HR) that carry the language of CEO fraud, invoice fraud or payroll
phishing. Role labels and keywords are matched in English and French.
"""

from typing import Optional

from mailwarden.models.email import Message, Recipient
from mailwarden.models.detection import DetectionSignal, SignalType
from mailwarden.utils.constants import (
    BEC_CSUITE_CONFIDENCE,
    BEC_FINANCE_CONFIDENCE,
    BEC_HIGH_VALUE_CONFIDENCE,
    BEC_HR_PAYROLL_CONFIDENCE,
    BEC_PAYROLL_KEYWORDS,
    BEC_URGENCY_KEYWORDS,
    BEC_WIRE_TRANSFER_KEYWORDS,
    CSUITE_ROLES,
    FINANCE_ROLES,
    HR_ROLES,
)
from mailwarden.utils.helpers import contains_any

from .base import DetectionContext, DetectionStrategy


class BECRoleStrategy(DetectionStrategy):
    """
    Detect BEC attempts targeting high-value roles.

    Rules are evaluated in priority order and only the first match is
    reported:
    1. C-suite + urgency + wire transfer   -> BEC_CSUITE_TARGETING
    2. Finance + wire transfer             -> BEC_FINANCE_TARGETING
    3. HR + payroll documents              -> BEC_HR_PAYROLL_SCAM
    4. Any high-value role + urgency       -> BEC_HIGH_VALUE_TARGET
    """

    name = "BEC Role Targeting"
    signal_types = frozenset({
        SignalType.BEC_CSUITE_TARGETING,
        SignalType.BEC_FINANCE_TARGETING,
        SignalType.BEC_HR_PAYROLL_SCAM,
        SignalType.BEC_HIGH_VALUE_TARGET,
    })

    def detect(
        self,
        message: Message,
        recipient: Optional[Recipient],
        context: DetectionContext,
    ) -> Optional[DetectionSignal]:
        # Role-based targeting needs a known recipient
        if recipient is None or not recipient.role.strip():
            return None

        # Internal mail to executives is normal business communication
        if context.is_internal(self.get_sender_domain(message)):
            return None

        role = recipient.role.lower()
        is_csuite = contains_any(role, CSUITE_ROLES)
        is_finance = contains_any(role, FINANCE_ROLES)
        is_hr = contains_any(role, HR_ROLES)

        if not (is_csuite or is_finance or is_hr):
            return None

        text = message.text
        has_urgency = contains_any(text, BEC_URGENCY_KEYWORDS)
        has_wire_transfer = contains_any(text, BEC_WIRE_TRANSFER_KEYWORDS)
        has_payroll_doc = contains_any(text, BEC_PAYROLL_KEYWORDS)

        if is_csuite and has_urgency and has_wire_transfer:
            return self.create_signal(
                SignalType.BEC_CSUITE_TARGETING,
                BEC_CSUITE_CONFIDENCE,
                f"Executive recipient ({recipient.role}) + external sender + urgent wire "
                f"transfer request (potential CEO fraud / fraude au président)",
            )

        if is_finance and has_wire_transfer:
            return self.create_signal(
                SignalType.BEC_FINANCE_TARGETING,
                BEC_FINANCE_CONFIDENCE,
                f"Finance role ({recipient.role}) + external sender + payment/wire "
                f"transfer language (potential invoice fraud)",
            )

        if is_hr and has_payroll_doc:
            return self.create_signal(
                SignalType.BEC_HR_PAYROLL_SCAM,
                BEC_HR_PAYROLL_CONFIDENCE,
                f"HR role ({recipient.role}) + external sender + payroll/tax document "
                f"request (W-2 / bulletin de paie phishing)",
            )

        if has_urgency:
            return self.create_signal(
                SignalType.BEC_HIGH_VALUE_TARGET,
                BEC_HIGH_VALUE_CONFIDENCE,
                f"High-value role ({recipient.role}) + external sender + urgent language",
            )

        return None
