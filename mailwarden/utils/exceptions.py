"""
MailWarden Custom Exceptions

Centralized exception classes for the ingestion, storage and API layers.
Detection strategies never raise; a strategy either emits a signal or abstains.
"""


class MailWardenError(Exception):
    """Base exception for all MailWarden errors."""
    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(MailWardenError):
    """Configuration value is missing or invalid."""
    pass


# ============================================================================
# Ingestion Exceptions
# ============================================================================

class IngestionError(MailWardenError):
    """Error fetching users or messages from a mail provider."""
    pass


class ProviderNotConfiguredError(IngestionError):
    """No email source is registered for the tenant's provider."""
    pass


# ============================================================================
# Storage Exceptions
# ============================================================================

class StorageError(MailWardenError):
    """Error reading or writing persisted records."""
    pass


class RecordNotFoundError(StorageError):
    """Requested record does not exist."""
    pass


# ============================================================================
# Detection Exceptions
# ============================================================================

class DetectionError(MailWardenError):
    """Detection engine was assembled incorrectly."""
    pass
