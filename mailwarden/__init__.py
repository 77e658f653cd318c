"""
MailWarden - financial fraud detection for business email.
"""

from mailwarden.utils.constants import APP_VERSION

__version__ = APP_VERSION
