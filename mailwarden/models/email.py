"""
MailWarden Email Data Models

Pydantic models for messages, mailbox users and tenants as handed over by the
ingestion layer. All of them are immutable once constructed.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mailwarden.utils.constants import MAX_BODY_PREVIEW_LENGTH
from mailwarden.utils.helpers import generate_id, utc_now


class Provider(str, Enum):
    """Mail providers a tenant can be hosted on."""
    MICROSOFT = "microsoft"
    GOOGLE = "google"


class Tenant(BaseModel):
    """An organization protected by MailWarden."""
    id: UUID = Field(default_factory=generate_id)
    name: str = Field(..., description="Organization name")
    provider: Provider = Field(..., description="Mail provider hosting the tenant")
    status: str = Field("active", description="Tenant lifecycle status")
    internal_domains: List[str] = Field(default_factory=list, description="Organization's own domains")
    trusted_domains: List[str] = Field(default_factory=list, description="Legitimate partner domains")

    model_config = ConfigDict(frozen=True)


class Recipient(BaseModel):
    """Mailbox user within a tenant, used for role-based targeting checks."""
    id: UUID = Field(default_factory=generate_id)
    tenant_id: Optional[UUID] = Field(None, description="Owning tenant")
    provider_user_id: str = Field("", description="User identifier at the provider")
    email: str = Field(..., description="Mailbox address")
    display_name: str = Field("", description="Display name")
    role: str = Field("", description="Free-text role label, e.g. 'CFO' or 'HR Director'")

    model_config = ConfigDict(frozen=True)


class Message(BaseModel):
    """Email message metadata retrieved from a provider."""
    # Identity (owned by the ingestion and storage layers)
    id: UUID = Field(default_factory=generate_id)
    tenant_id: Optional[UUID] = Field(None)
    user_id: Optional[UUID] = Field(None)
    provider_message_id: str = Field("", description="Message identifier at the provider")

    # Content inspected by the detection strategies
    subject: str = Field("", description="Subject line")
    sender_email: str = Field("", description="Sender address")
    sender_name: str = Field("", description="Sender display name")
    recipient_email: str = Field("", description="Recipient address")
    body_preview: str = Field("", description="Bounded plain-text preview of the body")
    has_attachments: bool = Field(False)
    attachment_names: Tuple[str, ...] = Field(default_factory=tuple)
    headers: Dict[str, str] = Field(default_factory=dict, description="Header name -> value, names as received")

    # Timestamps
    received_at: datetime = Field(default_factory=utc_now)
    ingested_at: Optional[datetime] = Field(None)
    processed_at: Optional[datetime] = Field(None)

    model_config = ConfigDict(frozen=True)

    @field_validator("body_preview")
    @classmethod
    def _bound_preview(cls, value: str) -> str:
        return value[:MAX_BODY_PREVIEW_LENGTH]

    @property
    def text(self) -> str:
        """Lower-cased subject and body preview, the text keyword checks run on."""
        return f"{self.subject} {self.body_preview}".lower()

    def header(self, name: str) -> str:
        """Header value by exact name, or an empty string when absent."""
        return self.headers.get(name) or ""
