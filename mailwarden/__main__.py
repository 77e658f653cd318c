"""
MailWarden one-shot run: ingestion -> detection -> high-risk report.

Usage: python -m mailwarden
"""

import asyncio
import logging
from uuid import NAMESPACE_DNS, uuid5

from mailwarden.config import get_settings
from mailwarden.models.email import Provider, Tenant
from mailwarden.services.detection import DetectionEngine
from mailwarden.services.ingestion import SampleEmailSource
from mailwarden.services.pipeline import FraudDetectionService
from mailwarden.services.storage import SQLiteStore
from mailwarden.utils.exceptions import MailWardenError

logger = logging.getLogger("mailwarden")

DEMO_TENANTS = [
    Tenant(
        id=uuid5(NAMESPACE_DNS, "acme-insurance.mailwarden"),
        name="Acme Insurance Co.",
        provider=Provider.MICROSOFT,
        internal_domains=["company.com"],
        trusted_domains=["microsoft.com", "google.com", "paypal.com"],
    ),
    Tenant(
        id=uuid5(NAMESPACE_DNS, "beta-corp.mailwarden"),
        name="Beta Corp.",
        provider=Provider.GOOGLE,
        internal_domains=["example.com"],
        trusted_domains=["company.com", "microsoft.com", "paypal.com"],
    ),
]


async def run() -> int:
    settings = get_settings()
    store = SQLiteStore(settings.database_path)
    service = FraudDetectionService(
        store=store,
        engine=DetectionEngine.from_settings(settings),
        sources={provider: SampleEmailSource(provider) for provider in Provider},
        settings=settings,
    )

    try:
        for tenant in DEMO_TENANTS:
            if await store.create_tenant(tenant):
                logger.info(f"Created tenant: {tenant.name} ({tenant.provider.value})")

        for tenant in DEMO_TENANTS:
            await service.ingest_tenant(tenant)

        for tenant in DEMO_TENANTS:
            await service.process_unprocessed(tenant.id)

        for tenant in DEMO_TENANTS:
            high_risk = await service.get_high_risk_summary(tenant.id)
            if not high_risk:
                continue
            logger.info(f"=== SECURITY ALERT: {len(high_risk)} high-risk emails for {tenant.name} ===")
            for i, verdict in enumerate(high_risk, 1):
                logger.info(
                    f"{i}. Message {verdict.message_id} | Risk: {verdict.risk_score:.2f} "
                    f"({verdict.risk_level.value}) | Threats: {len(verdict.signals)}"
                )
    except MailWardenError as e:
        logger.error(f"Run failed: {e.message}")
        return 1
    finally:
        await store.close()

    logger.info("MailWarden run completed successfully")
    return 0


def main() -> int:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return asyncio.run(run())


if __name__ == "__main__":
    raise SystemExit(main())
