"""
MailWarden API Package
"""
