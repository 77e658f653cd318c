"""
MailWarden Store Port

Contract for persisting tenants, mailbox users, messages and analyses.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from mailwarden.models.email import Message, Recipient, Tenant
from mailwarden.models.detection import FraudVerdict


class Store(ABC):
    """Abstract persistence layer. Implementations raise StorageError on failure."""

    # Tenants
    @abstractmethod
    async def create_tenant(self, tenant: Tenant) -> bool:
        """Insert a tenant; returns False if it already exists."""

    @abstractmethod
    async def get_tenant(self, tenant_id: UUID) -> Tenant:
        """Raises RecordNotFoundError when missing."""

    # Users
    @abstractmethod
    async def create_user(self, user: Recipient) -> Recipient:
        """Upsert on (tenant_id, provider_user_id); returns the stored user."""

    @abstractmethod
    async def get_user_by_email(self, tenant_id: UUID, email: str) -> Optional[Recipient]:
        ...

    # Messages
    @abstractmethod
    async def create_message(self, message: Message) -> bool:
        """Idempotent insert on (tenant_id, provider_message_id); False if already stored."""

    @abstractmethod
    async def get_message(self, message_id: UUID) -> Message:
        """Raises RecordNotFoundError when missing."""

    @abstractmethod
    async def get_unprocessed_messages(self, limit: int, tenant_id: Optional[UUID] = None) -> List[Message]:
        """Messages not yet analysed, oldest received first."""

    @abstractmethod
    async def mark_message_processed(self, message_id: UUID) -> None:
        ...

    # Analyses
    @abstractmethod
    async def create_analysis(self, verdict: FraudVerdict) -> None:
        ...

    @abstractmethod
    async def get_high_risk_analyses(self, tenant_id: UUID, limit: int) -> List[FraudVerdict]:
        """High and critical verdicts of a tenant, highest score first."""

    async def close(self) -> None:
        """Release resources held by the store."""
