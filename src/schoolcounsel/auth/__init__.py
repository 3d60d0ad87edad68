"""
Auth Module

Registration, login and bearer token issuance.
"""

from .credentials import CredentialService, authenticate, issue_token

__all__ = ["CredentialService", "authenticate", "issue_token"]
