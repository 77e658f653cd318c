"""
MailWarden Fraud Detection Pipeline

Sequences ingestion -> detection -> reporting for tenants. The detection
engine itself is pure; everything here is I/O plumbing around it.
"""

import logging
from datetime import timedelta
from typing import Dict, List, Optional
from uuid import UUID

from mailwarden.config import Settings, get_settings
from mailwarden.models.email import Message, Provider, Recipient, Tenant
from mailwarden.models.detection import FraudVerdict
from mailwarden.services.detection import DetectionEngine
from mailwarden.services.ingestion import EmailSource
from mailwarden.services.storage import Store
from mailwarden.utils.exceptions import (
    IngestionError,
    MailWardenError,
    ProviderNotConfiguredError,
    RecordNotFoundError,
    StorageError,
)
from mailwarden.utils.helpers import utc_now

logger = logging.getLogger(__name__)


class FraudDetectionService:
    """
    Orchestrates message ingestion and fraud detection.

    Individual user or message failures are logged and skipped so one bad
    mailbox does not halt a tenant. Failures that prevent any progress are
    raised to the caller.
    """

    def __init__(
        self,
        store: Store,
        engine: DetectionEngine,
        sources: Dict[Provider, EmailSource],
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.engine = engine
        self.sources = sources
        self.settings = settings or get_settings()
        self._tenant_engines: Dict[UUID, DetectionEngine] = {}

    async def ingest_tenant(self, tenant: Tenant) -> int:
        """
        Fetch users and messages from the tenant's provider and store them.

        Args:
            tenant: Tenant to ingest

        Returns:
            Number of newly stored messages

        Raises:
            ProviderNotConfiguredError: no source for the tenant's provider
            IngestionError: the user list could not be fetched
        """
        logger.info(f"Ingesting messages for tenant: {tenant.name} ({tenant.provider.value})")

        source = self.sources.get(tenant.provider)
        if source is None:
            raise ProviderNotConfiguredError(f"Unsupported provider: {tenant.provider.value}")

        try:
            users = await source.get_users(tenant.id)
        except IngestionError:
            raise
        except Exception as e:
            raise IngestionError(f"Failed to fetch users for tenant {tenant.name}: {e}") from e

        stored_users: List[Recipient] = []
        for user in users:
            try:
                stored = await self.store.create_user(user.model_copy(update={"tenant_id": tenant.id}))
            except StorageError as e:
                logger.warning(f"Failed to store user {user.email}: {e}")
                continue
            stored_users.append(stored)
            logger.debug(f"Stored user: {stored.email}")

        received_after = utc_now() - timedelta(days=self.settings.ingestion_lookback_days)
        message_count = 0

        for user in stored_users:
            try:
                messages = await source.get_messages(user, received_after)
            except Exception as e:
                logger.warning(f"Failed to fetch messages for user {user.email}: {e}")
                continue

            for message in messages:
                message = message.model_copy(update={"tenant_id": tenant.id, "user_id": user.id})
                try:
                    if await self.store.create_message(message):
                        message_count += 1
                except StorageError as e:
                    logger.warning(f"Failed to store message {message.provider_message_id}: {e}")

        logger.info(f"Ingested {message_count} messages for tenant {tenant.name}")
        return message_count

    async def process_unprocessed(self, tenant_id: Optional[UUID] = None) -> List[FraudVerdict]:
        """
        Run fraud detection on stored messages that were not analysed yet.

        A message is marked processed only after its analysis is stored, so
        a failed write leaves it queued for the next run.

        Args:
            tenant_id: Restrict processing to one tenant

        Returns:
            Verdicts that were stored
        """
        messages = await self.store.get_unprocessed_messages(
            self.settings.processing_batch_size, tenant_id
        )
        logger.info(f"Found {len(messages)} unprocessed messages")

        verdicts: List[FraudVerdict] = []
        for message in messages:
            recipient = await self._find_recipient(message)
            engine = await self._engine_for(message.tenant_id)

            verdict = engine.analyze(message, recipient)

            try:
                await self.store.create_analysis(verdict)
            except StorageError as e:
                logger.error(f"Failed to store fraud analysis for message {message.id}: {e}")
                continue

            try:
                await self.store.mark_message_processed(message.id)
            except StorageError as e:
                logger.error(f"Failed to mark message {message.id} as processed: {e}")

            if verdict.is_high_risk:
                self._report(message, verdict)
            verdicts.append(verdict)

        return verdicts

    async def get_high_risk_summary(self, tenant_id: UUID, limit: Optional[int] = None) -> List[FraudVerdict]:
        """High and critical verdicts for a tenant, highest score first."""
        return await self.store.get_high_risk_analyses(
            tenant_id, limit or self.settings.high_risk_summary_limit
        )

    async def _find_recipient(self, message: Message) -> Optional[Recipient]:
        # Unknown recipients are analysed without role-based signals
        if message.tenant_id is None or not message.recipient_email:
            return None
        try:
            return await self.store.get_user_by_email(message.tenant_id, message.recipient_email)
        except StorageError as e:
            logger.warning(f"Failed to fetch recipient for message {message.id}: {e}")
            return None

    async def _engine_for(self, tenant_id: Optional[UUID]) -> DetectionEngine:
        """Engine configured with the tenant's own domains when it defines any."""
        if tenant_id is None:
            return self.engine
        if tenant_id in self._tenant_engines:
            return self._tenant_engines[tenant_id]

        engine = self.engine
        try:
            tenant = await self.store.get_tenant(tenant_id)
        except RecordNotFoundError:
            tenant = None
        except MailWardenError as e:
            logger.warning(f"Failed to load tenant {tenant_id}, using default context: {e}")
            return engine

        if tenant is not None and (tenant.internal_domains or tenant.trusted_domains):
            engine = DetectionEngine.from_tenant(tenant, self.settings)
        self._tenant_engines[tenant_id] = engine
        return engine

    def _report(self, message: Message, verdict: FraudVerdict) -> None:
        logger.warning("HIGH RISK EMAIL DETECTED:")
        logger.warning(f"  Subject: {message.subject}")
        logger.warning(f"  From: {message.sender_name} <{message.sender_email}>")
        logger.warning(f"  Risk Score: {verdict.risk_score:.2f} ({verdict.risk_level.value})")
        logger.warning(f"  Threats Detected: {len(verdict.signals)}")
        for signal in verdict.signals:
            logger.warning(
                f"    - {signal.signal_type.value} ({signal.confidence * 100:.0f}% confidence): "
                f"{signal.evidence}"
            )
