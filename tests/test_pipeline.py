"""
Tests for the MailWarden ingestion -> detection pipeline.
"""

import asyncio
from datetime import datetime
from typing import List
from uuid import UUID

import pytest

from mailwarden.config import Settings
from mailwarden.models.detection import FraudVerdict, SignalType
from mailwarden.models.email import Message, Provider, Recipient, Tenant
from mailwarden.services.detection import DetectionEngine
from mailwarden.services.ingestion import EmailSource, SampleEmailSource, parse_address
from mailwarden.services.pipeline import FraudDetectionService
from mailwarden.services.storage import SQLiteStore
from mailwarden.utils.exceptions import IngestionError, ProviderNotConfiguredError, StorageError

from conftest import make_message

ACME = Tenant(
    name="Acme Insurance Co.",
    provider=Provider.MICROSOFT,
    internal_domains=["company.com"],
    trusted_domains=["microsoft.com", "google.com", "paypal.com"],
)

BETA = Tenant(
    name="Beta Corp.",
    provider=Provider.GOOGLE,
    internal_domains=["example.com"],
    trusted_domains=["company.com", "microsoft.com", "paypal.com"],
)


class BrokenSource(EmailSource):
    """Source whose provider cannot be reached."""

    async def get_users(self, tenant_id: UUID) -> List[Recipient]:
        raise ConnectionError("provider unreachable")

    async def get_messages(self, user: Recipient, received_after: datetime) -> List[Message]:
        return []


class FlakySource(EmailSource):
    """Source where one mailbox fails to load."""

    async def get_users(self, tenant_id: UUID) -> List[Recipient]:
        return [
            Recipient(provider_user_id="broken", email="broken@company.com", role="CFO"),
            Recipient(provider_user_id="ok", email="ok@company.com", role="CFO"),
        ]

    async def get_messages(self, user: Recipient, received_after: datetime) -> List[Message]:
        if user.provider_user_id == "broken":
            raise IngestionError("mailbox locked")
        return [make_message(provider_message_id="flaky-1", recipient_email=user.email)]


class FailingAnalysisStore(SQLiteStore):
    async def create_analysis(self, verdict: FraudVerdict) -> None:
        raise StorageError("disk full")


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_path=str(tmp_path / "pipeline.db"))


def make_service(store, settings, sources=None) -> FraudDetectionService:
    if sources is None:
        sources = {provider: SampleEmailSource(provider) for provider in Provider}
    return FraudDetectionService(
        store=store,
        engine=DetectionEngine.from_settings(settings),
        sources=sources,
        settings=settings,
    )


class TestIngestion:
    """Tests for tenant ingestion."""

    def test_ingest_sample_tenant(self, store, settings):
        service = make_service(store, settings)
        asyncio.run(store.create_tenant(ACME))

        assert asyncio.run(service.ingest_tenant(ACME)) == 2
        # provider message ids are stable, so a second run stores nothing new
        assert asyncio.run(service.ingest_tenant(ACME)) == 0

        cfo = asyncio.run(store.get_user_by_email(ACME.id, "john.doe@company.com"))
        assert cfo is not None
        assert cfo.tenant_id == ACME.id
        assert cfo.role == "CFO"

    def test_provider_not_configured(self, store, settings):
        service = make_service(store, settings, sources={Provider.MICROSOFT: SampleEmailSource(Provider.MICROSOFT)})

        with pytest.raises(ProviderNotConfiguredError):
            asyncio.run(service.ingest_tenant(BETA))

    def test_unreachable_provider(self, store, settings):
        service = make_service(store, settings, sources={Provider.MICROSOFT: BrokenSource()})

        with pytest.raises(IngestionError) as exc_info:
            asyncio.run(service.ingest_tenant(ACME))

        assert "provider unreachable" in exc_info.value.message

    def test_failing_mailbox_is_skipped(self, store, settings):
        service = make_service(store, settings, sources={Provider.MICROSOFT: FlakySource()})

        assert asyncio.run(service.ingest_tenant(ACME)) == 1

    def test_parse_address(self):
        assert parse_address("Accounts Payable <accounts@companny.com>") == (
            "Accounts Payable",
            "accounts@companny.com",
        )
        assert parse_address("") == ("", "")


class TestProcessing:
    """Tests for detection over stored messages."""

    def test_process_and_report(self, store, settings):
        service = make_service(store, settings)
        asyncio.run(store.create_tenant(ACME))
        asyncio.run(service.ingest_tenant(ACME))

        verdicts = asyncio.run(service.process_unprocessed(ACME.id))

        assert len(verdicts) == 2
        assert all(v.is_high_risk for v in verdicts)
        assert all(SignalType.DISPLAY_NAME_MISMATCH in v.signal_types for v in verdicts)
        assert any(SignalType.BEC_CSUITE_TARGETING in v.signal_types for v in verdicts)

        # processed messages are not analysed again
        assert asyncio.run(service.process_unprocessed(ACME.id)) == []

        summary = asyncio.run(service.get_high_risk_summary(ACME.id))
        assert len(summary) == 2
        assert {v.message_id for v in summary} == {v.message_id for v in verdicts}

    def test_tenant_domains_drive_detection(self, store, settings):
        service = make_service(store, settings)
        asyncio.run(store.create_tenant(BETA))
        asyncio.run(service.ingest_tenant(BETA))

        verdicts = asyncio.run(service.process_unprocessed(BETA.id))

        assert len(verdicts) == 1
        types = verdicts[0].signal_types
        # companny.com only looks like a trusted domain of this tenant
        assert SignalType.DOMAIN_TYPOSQUATTING in types
        assert SignalType.AUTH_FAILURES in types
        assert SignalType.REPLY_TO_MISMATCH in types
        assert SignalType.HIGH_RISK_ATTACHMENT in types
        assert SignalType.BEC_CSUITE_TARGETING in types

    def test_unknown_recipient_has_no_role_signal(self, store, settings):
        service = make_service(store, settings)
        message = make_message(
            tenant_id=ACME.id,
            provider_message_id="direct-1",
            sender_email="attacker@evil.com",
            subject="URGENT: Wire Transfer Required",
            body_preview="Please send the wire transfer immediately.",
            recipient_email="nobody@company.com",
        )
        asyncio.run(store.create_message(message))

        verdicts = asyncio.run(service.process_unprocessed())

        assert len(verdicts) == 1
        assert not any(t.value.startswith("BEC_") for t in verdicts[0].signal_types)

    def test_failed_analysis_write_keeps_message_queued(self, tmp_path, settings):
        store = FailingAnalysisStore(tmp_path / "failing.db")
        service = make_service(store, settings)
        asyncio.run(store.create_tenant(ACME))
        asyncio.run(service.ingest_tenant(ACME))

        assert asyncio.run(service.process_unprocessed(ACME.id)) == []
        assert len(asyncio.run(store.get_unprocessed_messages(10, ACME.id))) == 2
