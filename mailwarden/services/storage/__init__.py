"""
MailWarden Storage Module

Provides persistent storage for tenants, messages and analyses.
"""

from .base import Store
from .sqlite_store import SQLiteStore, get_sqlite_store

__all__ = ['Store', 'SQLiteStore', 'get_sqlite_store']
