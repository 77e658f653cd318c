"""
MailWarden Helper Functions

Utility functions shared by the detection strategies and the I/O layers.
"""

import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional

from .constants import RISK_THRESHOLDS


# ============================================================================
# ID and Timestamp Generation
# ============================================================================

def generate_id() -> uuid.UUID:
    """Generate a unique record ID."""
    return uuid.uuid4()


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


# ============================================================================
# Address Handling
# ============================================================================

def extract_domain(address: Optional[str]) -> str:
    """
    Extract the lower-cased domain part of an email address.

    Malformed addresses (no '@', several '@', empty local part or domain)
    yield an empty string, which matches no domain list downstream.

    Args:
        address: Email address such as "alice@company.com"

    Returns:
        Domain string or "" when the address is malformed
    """
    if not address:
        return ""
    parts = address.strip().split("@")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return ""
    return parts[1].lower()


def is_internal_domain(domain: str, internal_domains: Iterable[str]) -> bool:
    """Check if a domain belongs to the organization."""
    if not domain:
        return False
    return domain.lower() in internal_domains


# ============================================================================
# Keyword Matching
# ============================================================================

def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Check if text contains any of the keywords."""
    return any(keyword in text for keyword in keywords)


def count_keywords(text: str, keywords: Iterable[str]) -> int:
    """Count how many distinct keywords appear in text (presence, not frequency)."""
    return sum(1 for keyword in keywords if keyword in text)


# ============================================================================
# String Similarity
# ============================================================================

def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Calculate Levenshtein edit distance between two strings.

    Builds the full (len(s1)+1) x (len(s2)+1) table iteratively, where
    table[i][j] is the distance between s1[:i] and s2[:j].
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    rows, cols = len(s1) + 1, len(s2) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,         # deletion
                table[i][j - 1] + 1,         # insertion
                table[i - 1][j - 1] + cost,  # substitution
            )

    return table[-1][-1]


def similarity_percent(s1: str, s2: str) -> float:
    """Edit-distance similarity in percent, normalised by the longer string."""
    longest = max(len(s1), len(s2))
    if longest == 0:
        return 100.0
    return (1.0 - levenshtein_distance(s1, s2) / longest) * 100


# ============================================================================
# Risk Levels
# ============================================================================

def get_risk_level(score: float) -> str:
    """
    Map a risk score in [0, 1] to its categorical level.

    Args:
        score: Aggregate risk score

    Returns:
        One of "critical", "high", "medium", "low", "none"
    """
    for level, lower_bound in RISK_THRESHOLDS:
        if score >= lower_bound:
            return level
    return "none"


def truncate_string(s: str, max_length: int, suffix: str = "...") -> str:
    """Truncate string to max length with suffix."""
    if not s or len(s) <= max_length:
        return s
    return s[:max_length - len(suffix)] + suffix
