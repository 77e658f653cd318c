"""
MailWarden Data Models Package

Pydantic models for data validation and serialization.
"""

from .email import Message, Provider, Recipient, Tenant
from .detection import DetectionSignal, FraudVerdict, RiskLevel, SignalType

__all__ = [
    'Message',
    'Provider',
    'Recipient',
    'Tenant',
    'DetectionSignal',
    'FraudVerdict',
    'RiskLevel',
    'SignalType',
]
