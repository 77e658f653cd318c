"""
MailWarden Test Configuration

Pytest fixtures and configuration.
"""

import pytest

from mailwarden.models.email import Message, Recipient
from mailwarden.services.detection import DetectionContext, DetectionEngine
from mailwarden.services.storage import SQLiteStore

INTERNAL_DOMAINS = ["company.com"]
TRUSTED_DOMAINS = ["microsoft.com", "google.com", "paypal.com"]


def make_message(**kwargs) -> Message:
    """Create a test message with benign default values."""
    defaults = {
        'subject': 'Team lunch',
        'sender_email': 'colleague@company.com',
        'sender_name': 'Bob Martin',
        'recipient_email': 'alice@company.com',
        'body_preview': 'See you at noon in the cafeteria.',
        'headers': {},
    }
    defaults.update(kwargs)
    return Message(**defaults)


def make_recipient(role: str = "CEO", email: str = "alice@company.com") -> Recipient:
    return Recipient(email=email, display_name="Alice Johnson", role=role)


@pytest.fixture
def context() -> DetectionContext:
    return DetectionContext(internal_domains=INTERNAL_DOMAINS, trusted_domains=TRUSTED_DOMAINS)


@pytest.fixture
def engine() -> DetectionEngine:
    return DetectionEngine(INTERNAL_DOMAINS, TRUSTED_DOMAINS)


@pytest.fixture
def store(tmp_path) -> SQLiteStore:
    return SQLiteStore(tmp_path / "mailwarden-test.db")
