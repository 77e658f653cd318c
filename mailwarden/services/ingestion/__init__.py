"""
MailWarden Ingestion Module

Email source port and provider adapters.
"""

from .base import EmailSource
from .sample_source import SampleEmailSource, parse_address

__all__ = ['EmailSource', 'SampleEmailSource', 'parse_address']
