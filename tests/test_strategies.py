"""
Tests for MailWarden detection strategies.
"""

import pytest

from mailwarden.models.detection import SignalType
from mailwarden.services.detection import DetectionContext
from mailwarden.services.detection.rules import (
    AttachmentStrategy,
    AuthFailuresStrategy,
    BECRoleStrategy,
    DisplayNameStrategy,
    ReplyToStrategy,
    TyposquattingStrategy,
    UrgencyFinancialStrategy,
    get_default_strategies,
)

from conftest import make_message, make_recipient


class TestDisplayNameStrategy:
    """Tests for executive display name impersonation."""

    def test_executive_title_from_external_domain(self, context):
        message = make_message(sender_name="John Smith CEO", sender_email="attacker@evil.com")

        signal = DisplayNameStrategy().detect(message, None, context)

        assert signal is not None
        assert signal.signal_type == SignalType.DISPLAY_NAME_MISMATCH
        assert signal.confidence == 0.85
        assert "evil.com" in signal.evidence

    def test_executive_title_from_internal_domain(self, context):
        message = make_message(sender_name="John Smith CEO", sender_email="john.smith@company.com")
        assert DisplayNameStrategy().detect(message, None, context) is None

    def test_internal_domain_match_is_case_insensitive(self, context):
        message = make_message(sender_name="Chief Financial Officer", sender_email="cfo@COMPANY.com")
        assert DisplayNameStrategy().detect(message, None, context) is None

    def test_plain_name_from_external_domain(self, context):
        message = make_message(sender_name="Bob Martin", sender_email="bob@vendor.io")
        assert DisplayNameStrategy().detect(message, None, context) is None


class TestTyposquattingStrategy:
    """Tests for lookalike sender domains."""

    def test_one_character_substitution(self, context):
        message = make_message(sender_email="security@micros0ft.com")

        signal = TyposquattingStrategy().detect(message, None, context)

        assert signal is not None
        assert signal.signal_type == SignalType.DOMAIN_TYPOSQUATTING
        assert signal.confidence == 0.90
        assert "'microsoft.com'" in signal.evidence
        assert "92.3%" in signal.evidence

    def test_exact_trusted_domain(self, context):
        message = make_message(sender_email="security@microsoft.com")
        assert TyposquattingStrategy().detect(message, None, context) is None

    def test_unrelated_domain(self, context):
        message = make_message(sender_email="someone@evil.com")
        assert TyposquattingStrategy().detect(message, None, context) is None

    def test_short_domains_fall_below_threshold(self):
        context = DetectionContext(trusted_domains=["abc.io"])
        message = make_message(sender_email="x@abd.io")

        # 1 edit over 6 characters is 83.3%
        assert TyposquattingStrategy().detect(message, None, context) is None

    def test_first_trusted_domain_in_list_order_wins(self):
        context = DetectionContext(trusted_domains=["paypal.com", "paypall.co"])
        message = make_message(sender_email="billing@paypall.com")

        signal = TyposquattingStrategy().detect(message, None, context)

        assert signal is not None
        assert "trusted domain 'paypal.com'" in signal.evidence

    def test_malformed_sender_does_not_raise(self, context):
        message = make_message(sender_email="not-an-address")
        assert TyposquattingStrategy().detect(message, None, context) is None


class TestAuthFailuresStrategy:
    """Tests for SPF/DKIM/DMARC failure detection."""

    def test_two_failures(self, context):
        message = make_message(headers={
            "Received-SPF": "fail (domain does not designate sender)",
            "Authentication-Results": "mx.company.com; dkim=fail header.d=evil.com",
        })

        signal = AuthFailuresStrategy().detect(message, None, context)

        assert signal is not None
        assert signal.confidence == 0.80
        assert signal.evidence == "Email authentication failures: SPF_FAIL, DKIM_FAIL"

    def test_results_are_case_insensitive(self, context):
        message = make_message(headers={
            "Authentication-Results": "DKIM=FAIL; DMARC=FAIL",
        })

        signal = AuthFailuresStrategy().detect(message, None, context)

        assert signal is not None
        assert "DKIM_FAIL, DMARC_FAIL" in signal.evidence

    def test_single_failure_is_not_enough(self, context):
        message = make_message(headers={
            "Received-SPF": "pass",
            "Authentication-Results": "spf=pass; dkim=fail; dmarc=pass",
        })
        assert AuthFailuresStrategy().detect(message, None, context) is None

    def test_missing_headers(self, context):
        assert AuthFailuresStrategy().detect(make_message(), None, context) is None


class TestReplyToStrategy:
    """Tests for Reply-To redirection to free mail."""

    def test_reply_to_freemail(self, context):
        message = make_message(
            sender_email="ceo@company.com",
            headers={"Reply-To": "ceo.private@gmail.com"},
        )

        signal = ReplyToStrategy().detect(message, None, context)

        assert signal is not None
        assert signal.confidence == 0.75
        assert signal.evidence == (
            "Sender: ceo@company.com, Reply-To: ceo.private@gmail.com "
            "(free email service, redirects responses)"
        )

    def test_reply_to_equals_sender_ignoring_case(self, context):
        message = make_message(
            sender_email="Alice@Gmail.com",
            headers={"Reply-To": "alice@gmail.com"},
        )
        assert ReplyToStrategy().detect(message, None, context) is None

    def test_reply_to_corporate_domain(self, context):
        message = make_message(
            sender_email="ceo@company.com",
            headers={"Reply-To": "ceo@evil.com"},
        )
        assert ReplyToStrategy().detect(message, None, context) is None

    def test_same_freemail_domain(self, context):
        message = make_message(
            sender_email="alice@gmail.com",
            headers={"Reply-To": "alice.backup@gmail.com"},
        )
        assert ReplyToStrategy().detect(message, None, context) is None


class TestUrgencyFinancialStrategy:
    """Tests for urgency + financial language scoring."""

    def test_fraud_language(self, context):
        message = make_message(
            subject="Urgent wire transfer",
            body_preview="Please pay the invoice today. Keep this confidential.",
        )

        signal = UrgencyFinancialStrategy().detect(message, None, context)

        # 2 urgency, 5 financial, 1 authority -> 3.30
        assert signal is not None
        assert signal.confidence == pytest.approx(0.88)
        assert signal.evidence == (
            "High-risk language detected (score: 3.30): "
            "2 urgency, 5 financial, 1 authority keywords"
        )

    def test_score_at_threshold_is_not_flagged(self, context):
        message = make_message(subject="invoice", body_preview="swift fund")
        assert UrgencyFinancialStrategy().detect(message, None, context) is None

    def test_confidence_saturates(self, context):
        message = make_message(
            subject="URGENT payment needed immediately, asap, today",
            body_preview=(
                "Wire transfer to the bank account with routing number and swift. "
                "Buy a gift card, itunes or google play prepaid card. Confidential, between us."
            ),
        )

        signal = UrgencyFinancialStrategy().detect(message, None, context)

        assert signal is not None
        assert signal.confidence == 0.95

    def test_ordinary_message(self, context):
        message = make_message(subject="Lunch today?", body_preview="Are you free for lunch")
        assert UrgencyFinancialStrategy().detect(message, None, context) is None


class TestAttachmentStrategy:
    """Tests for attachment analysis."""

    def test_executable(self, context):
        message = make_message(has_attachments=True, attachment_names=("Invoice.pdf.exe",))

        signal = AttachmentStrategy().detect(message, None, context)

        assert signal.signal_type == SignalType.HIGH_RISK_ATTACHMENT
        assert signal.confidence == 0.90

    def test_double_extension(self, context):
        message = make_message(has_attachments=True, attachment_names=("invoice.pdf.zip",))

        signal = AttachmentStrategy().detect(message, None, context)

        assert signal.signal_type == SignalType.SUSPICIOUS_ATTACHMENT_NAME
        assert signal.confidence == 0.85

    def test_macro_document_with_urgency(self, context):
        message = make_message(
            subject="Urgent: updated figures",
            has_attachments=True,
            attachment_names=("report.docm",),
        )

        signal = AttachmentStrategy().detect(message, None, context)

        assert signal.signal_type == SignalType.MEDIUM_RISK_ATTACHMENT_WITH_URGENCY
        assert signal.confidence == 0.70

    def test_macro_document_without_urgency(self, context):
        message = make_message(has_attachments=True, attachment_names=("report.docm",))
        assert AttachmentStrategy().detect(message, None, context) is None

    def test_first_attachment_decides(self, context):
        message = make_message(
            has_attachments=True,
            attachment_names=("notes.txt", "archive.tar.gz", "setup.exe"),
        )

        signal = AttachmentStrategy().detect(message, None, context)

        assert signal.signal_type == SignalType.SUSPICIOUS_ATTACHMENT_NAME
        assert "archive.tar.gz" in signal.evidence

    def test_flag_off_ignores_names(self, context):
        message = make_message(has_attachments=False, attachment_names=("setup.exe",))
        assert AttachmentStrategy().detect(message, None, context) is None


class TestBECRoleStrategy:
    """Tests for role-based BEC targeting."""

    URGENT_WIRE = {
        'subject': "URGENT: Wire Transfer Required",
        'body_preview': "Please process this wire transfer immediately to our new bank account",
    }

    def test_ceo_urgent_wire_transfer(self, context):
        message = make_message(sender_email="attacker@evil.com", **self.URGENT_WIRE)

        signal = BECRoleStrategy().detect(message, make_recipient("CEO"), context)

        assert signal.signal_type == SignalType.BEC_CSUITE_TARGETING
        assert signal.confidence >= 0.90

    def test_internal_sender(self, context):
        message = make_message(sender_email="colleague@company.com", **self.URGENT_WIRE)
        assert BECRoleStrategy().detect(message, make_recipient("CEO"), context) is None

    def test_unknown_recipient(self, context):
        message = make_message(sender_email="attacker@evil.com", **self.URGENT_WIRE)
        assert BECRoleStrategy().detect(message, None, context) is None

    def test_blank_role(self, context):
        message = make_message(sender_email="attacker@evil.com", **self.URGENT_WIRE)
        assert BECRoleStrategy().detect(message, make_recipient("  "), context) is None

    def test_low_value_role(self, context):
        message = make_message(sender_email="attacker@evil.com", **self.URGENT_WIRE)
        assert BECRoleStrategy().detect(message, make_recipient("Software Engineer"), context) is None

    def test_finance_invoice(self, context):
        message = make_message(
            sender_email="billing@supplier-invoices.net",
            subject="Invoice Payment",
            body_preview="Please process payment for invoice 4471 by wire transfer.",
        )

        signal = BECRoleStrategy().detect(message, make_recipient("Finance Manager"), context)

        assert signal.signal_type == SignalType.BEC_FINANCE_TARGETING
        assert signal.confidence == 0.85

    def test_french_hr_payroll(self, context):
        message = make_message(
            sender_email="direction@groupe-externe.fr",
            subject="Demande de bulletin de paie",
            body_preview="Merci de m'envoyer le bulletin de salaire des employés",
        )

        signal = BECRoleStrategy().detect(message, make_recipient("Responsable RH"), context)

        assert signal.signal_type == SignalType.BEC_HR_PAYROLL_SCAM
        assert signal.confidence == 0.80

    def test_french_ceo_fraud(self, context):
        message = make_message(
            sender_email="president@groupe-externe.fr",
            subject="Virement urgent",
            body_preview="Merci d'effectuer ce virement immédiatement",
        )

        signal = BECRoleStrategy().detect(message, make_recipient("PDG"), context)

        assert signal.signal_type == SignalType.BEC_CSUITE_TARGETING

    def test_executive_with_urgency_only(self, context):
        message = make_message(
            sender_email="partner@evil.com",
            subject="Urgent",
            body_preview="Call me right away",
        )

        signal = BECRoleStrategy().detect(message, make_recipient("CEO"), context)

        assert signal.signal_type == SignalType.BEC_HIGH_VALUE_TARGET
        assert signal.confidence == 0.70

    def test_first_matching_rule_only(self, context):
        message = make_message(sender_email="attacker@evil.com", **self.URGENT_WIRE)

        signal = BECRoleStrategy().detect(message, make_recipient("CFO and Head of Finance"), context)

        assert signal.signal_type == SignalType.BEC_CSUITE_TARGETING


class TestStrategySet:
    """Tests for the strategy set as a whole."""

    def test_fixed_order(self):
        names = [s.name for s in get_default_strategies()]
        assert names == [
            "Display Name Mismatch",
            "Domain Typosquatting",
            "Authentication Failures",
            "Urgency + Financial Keywords",
            "Reply-To Mismatch",
            "Suspicious Attachments",
            "BEC Role Targeting",
        ]

    def test_degenerate_message_never_raises(self, context):
        from mailwarden.models.email import Message

        for strategy in get_default_strategies():
            assert strategy.detect(Message(), None, context) is None
            assert strategy.detect(Message(), make_recipient(""), context) is None

    def test_create_signal_rejects_foreign_type(self):
        with pytest.raises(ValueError):
            ReplyToStrategy().create_signal(SignalType.AUTH_FAILURES, 0.5, "wrong strategy")
