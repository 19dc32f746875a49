"""
Error Taxonomy Module

Every failure the core reports is a FinCoreError subclass. Services raise
these directly; the facade passes them through untouched so callers can
catch by kind.
"""

from typing import Optional


class FinCoreError(Exception):
    """Base class for all FinCore errors"""

    def __init__(self, message: str, identity_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.identity_id = identity_id


class Unauthorized(FinCoreError):
    """No session, unauthenticated session, or session for another identity"""


class IdentityNotFound(FinCoreError):
    """Username or id lookup miss"""


class CredentialMismatch(FinCoreError):
    """Supplied secret does not match the stored credential"""


class DuplicateIdentity(FinCoreError):
    """Username already taken (case-insensitive)"""


class MissingIdentifier(FinCoreError):
    """A credential without an id was handed to the session layer"""


class DataIntegrityError(FinCoreError):
    """
    Repository inconsistency, e.g. an identity without its paired credential.

    Unlike the other errors this never comes from bad input and should be
    treated as fatal by callers.
    """


class InsufficientFunds(FinCoreError):
    """Withdrawal would take the balance below the configured floor"""


class InvalidAmount(FinCoreError):
    """Amount rejected by the configured amount policy"""
