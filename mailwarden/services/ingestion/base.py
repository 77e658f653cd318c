"""
MailWarden Email Source Port

Contract for fetching mailbox users and messages from a mail provider.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List
from uuid import UUID

from mailwarden.models.email import Message, Recipient


class EmailSource(ABC):
    """Abstract provider of mailbox users and their messages."""

    @abstractmethod
    async def get_users(self, tenant_id: UUID) -> List[Recipient]:
        """
        Fetch all mailbox users of a tenant.

        Raises:
            IngestionError: the provider could not be reached
        """

    @abstractmethod
    async def get_messages(self, user: Recipient, received_after: datetime) -> List[Message]:
        """
        Fetch a user's messages received after a point in time.

        Raises:
            IngestionError: the provider could not be reached
        """
