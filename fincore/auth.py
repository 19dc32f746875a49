"""
Session Authentication Module

AuthSession owns the process-wide session table: one token per identity id,
created by a successful login (or directly at sign-up) and consulted by the
authorization gate. Tokens never expire; the authenticated flag is the only
guard.
"""

import threading
from dataclasses import dataclass
from typing import Dict, Optional

from .exceptions import CredentialMismatch, IdentityNotFound, MissingIdentifier
from .identities import Credential, Identity
from .logging_config import get_logger, log_action
from .repository import IdentityRepository


@dataclass(frozen=True)
class SessionToken:
    """Proof of a successful login for one identity"""
    subject_id: str
    authenticated: bool = True


class AuthSession:
    """
    Issues and validates session tokens.

    Constructed once per process and handed to the services that need it.
    """

    def __init__(self, repository: IdentityRepository, invalidate_on_logout: bool = False):
        self.repository = repository
        self.invalidate_on_logout = invalidate_on_logout
        self._sessions: Dict[str, SessionToken] = {}
        self._lock = threading.RLock()
        self.logger = get_logger("fincore.auth")

    def login(self, username: str, secret: str) -> Identity:
        """
        Authenticate by username and secret and open a session.

        Raises:
            IdentityNotFound: unknown username, or the identity has no credential
            CredentialMismatch: wrong secret; existing sessions are left as they are
        """
        identity = self.repository.find_by_username(username)
        if identity is None:
            log_action(self.logger, "info", "Login failed: unknown username",
                       action="login_failed", details={'reason': 'identity_not_found'})
            raise IdentityNotFound("User does not exist.")

        credential = self.repository.get_credential(identity.id)
        if credential is None:
            log_action(self.logger, "error", "Login failed: identity has no credential record",
                       user_id=identity.id, action="login_failed",
                       details={'reason': 'credential_missing'})
            raise IdentityNotFound("User exists but has no credential record.", identity.id)

        if not credential.matches(secret):
            log_action(self.logger, "info", "Login failed: credential mismatch",
                       user_id=identity.id, action="login_failed",
                       details={'reason': 'credential_mismatch'})
            raise CredentialMismatch("Username or password is incorrect.", identity.id)

        self._store(SessionToken(subject_id=identity.id, authenticated=True))
        log_action(self.logger, "info", "Login succeeded", user_id=identity.id, action="login")
        return identity

    def create_session(self, credential: Credential) -> None:
        """Open a session for a credential without checking its secret (sign-up auto-login)"""
        if credential is None or not getattr(credential, 'id', None):
            raise MissingIdentifier("Credential carries no identity id.")
        self._store(SessionToken(subject_id=credential.id, authenticated=True))
        log_action(self.logger, "info", "Session created", user_id=credential.id,
                   action="create_session")

    def logout(self, subject_id: str) -> None:
        """
        End a session.

        A no-op unless invalidate_on_logout is set: sessions otherwise stay
        live for the life of the process.
        """
        if not self.invalidate_on_logout:
            return
        with self._lock:
            removed = self._sessions.pop(subject_id, None)
        if removed is not None:
            log_action(self.logger, "info", "Session invalidated", user_id=subject_id,
                       action="logout")

    def authorize_action(self, subject_id: str, token: Optional[SessionToken]) -> bool:
        """True iff the token is authenticated and belongs to subject_id"""
        if token is None or not token.authenticated:
            return False
        return token.subject_id == subject_id

    def get_session_token(self, subject_id: str) -> Optional[SessionToken]:
        with self._lock:
            return self._sessions.get(subject_id)

    def active_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _store(self, token: SessionToken) -> None:
        with self._lock:
            self._sessions[token.subject_id] = token
