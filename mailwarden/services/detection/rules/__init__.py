"""
MailWarden Detection Strategies

The strategy set is closed: every strategy is listed here, in the order the
engine invokes them.
"""

from typing import List

from .base import DetectionContext, DetectionStrategy
from .impersonation import DisplayNameStrategy
from .lookalike import TyposquattingStrategy
from .authentication import AuthFailuresStrategy, ReplyToStrategy
from .social_engineering import UrgencyFinancialStrategy
from .attachments import AttachmentStrategy
from .bec import BECRoleStrategy


def get_default_strategies() -> List[DetectionStrategy]:
    """Create the fixed, ordered strategy set."""
    return [
        DisplayNameStrategy(),
        TyposquattingStrategy(),
        AuthFailuresStrategy(),
        UrgencyFinancialStrategy(),
        ReplyToStrategy(),
        AttachmentStrategy(),
        BECRoleStrategy(),
    ]


__all__ = [
    'DetectionContext',
    'DetectionStrategy',
    'DisplayNameStrategy',
    'TyposquattingStrategy',
    'AuthFailuresStrategy',
    'ReplyToStrategy',
    'UrgencyFinancialStrategy',
    'AttachmentStrategy',
    'BECRoleStrategy',
    'get_default_strategies',
]
