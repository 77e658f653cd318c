"""
MailWarden Utilities Package
============================

Common constants, exceptions and helper functions used throughout the application.
"""

from mailwarden.utils.constants import (
    APP_NAME,
    APP_VERSION,
    FREEMAIL_DOMAINS,
    RISK_THRESHOLDS,
    SIGNAL_WEIGHTS,
)

from mailwarden.utils.exceptions import (
    MailWardenError,
    ConfigurationError,
    IngestionError,
    ProviderNotConfiguredError,
    StorageError,
    RecordNotFoundError,
    DetectionError,
)

from mailwarden.utils.helpers import (
    contains_any,
    count_keywords,
    extract_domain,
    get_risk_level,
    is_internal_domain,
    levenshtein_distance,
    similarity_percent,
    utc_now,
)

__all__ = [
    # Constants
    'APP_NAME',
    'APP_VERSION',
    'FREEMAIL_DOMAINS',
    'RISK_THRESHOLDS',
    'SIGNAL_WEIGHTS',

    # Exceptions
    'MailWardenError',
    'ConfigurationError',
    'IngestionError',
    'ProviderNotConfiguredError',
    'StorageError',
    'RecordNotFoundError',
    'DetectionError',

    # Helpers
    'contains_any',
    'count_keywords',
    'extract_domain',
    'get_risk_level',
    'is_internal_domain',
    'levenshtein_distance',
    'similarity_percent',
    'utc_now',
]
