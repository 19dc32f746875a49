"""
Account Service Module

Balance reads and mutations plus identity sign-up and deletion. Every
balance or deletion call re-checks its session token against AuthSession
before touching the repository.
"""

import threading
from decimal import Decimal
from typing import Dict, Optional

from .accounts import Amount, subtract, to_decimal
from .auth import AuthSession, SessionToken
from .exceptions import (
    DuplicateIdentity, IdentityNotFound, InsufficientFunds, InvalidAmount, Unauthorized
)
from .identities import Credential, Identity
from .logging_config import get_logger, log_action
from .repository import IdentityRepository


class AccountService:
    """
    Authorization-gated account operations.

    Deposits and withdrawals are serialized per identity id, so concurrent
    callers on the same account cannot lose updates.

    Policy knobs default to the ledger's historical behavior: overdrafts are
    allowed and negative amounts pass through unchecked.
    """

    def __init__(
        self,
        repository: IdentityRepository,
        auth: AuthSession,
        allow_overdraft: bool = True,
        minimum_balance: Amount = Decimal("0.00"),
        reject_negative_amounts: bool = False
    ):
        self.repository = repository
        self.auth = auth
        self.allow_overdraft = allow_overdraft
        self.minimum_balance = to_decimal(minimum_balance)
        self.reject_negative_amounts = reject_negative_amounts
        self.logger = get_logger("fincore.service")
        self._account_locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._registration_lock = threading.Lock()

    # Balance operations

    def get_balance(self, identity_id: str, token: Optional[SessionToken]) -> Decimal:
        """Current balance; raises Unauthorized unless token belongs to identity_id"""
        self._require_authorized(identity_id, token, "get_balance")
        return self.repository.get_balance(identity_id)

    def deposit(self, identity: Identity, amount: Amount, token: Optional[SessionToken]) -> None:
        """Add amount to the identity's account and persist it"""
        self._require_authorized(identity.id, token, "deposit")
        value = self._checked_amount(amount)

        with self._lock_for(identity.id):
            stored = self._load(identity.id)
            new_balance = stored.account.deposit(value)
            self.repository.save_identity(stored)
            identity.account.balance = new_balance

        log_action(self.logger, "info", "Deposit applied", user_id=identity.id,
                   action="deposit", resource="account", details={'amount': str(value)})

    def withdraw(self, identity: Identity, amount: Amount, token: Optional[SessionToken]) -> None:
        """
        Subtract amount from the identity's account and persist it.

        With overdrafts allowed (the default) the balance may go negative.
        Otherwise a withdrawal that would leave less than minimum_balance
        raises InsufficientFunds and changes nothing.
        """
        self._require_authorized(identity.id, token, "withdraw")
        value = self._checked_amount(amount)

        with self._lock_for(identity.id):
            stored = self._load(identity.id)
            if not self.allow_overdraft and subtract(stored.account.balance, value) < self.minimum_balance:
                log_action(self.logger, "info", "Withdrawal refused: insufficient funds",
                           user_id=identity.id, action="withdraw", resource="account",
                           details={'amount': str(value)})
                raise InsufficientFunds(
                    f"Withdrawal of {value} would take the balance below {self.minimum_balance}",
                    identity.id
                )
            new_balance = stored.account.withdraw(value)
            self.repository.save_identity(stored)
            identity.account.balance = new_balance

        log_action(self.logger, "info", "Withdrawal applied", user_id=identity.id,
                   action="withdraw", resource="account", details={'amount': str(value)})

    # Identity lifecycle

    def create_individual(self, username: str, secret: str,
                          first_name: str, last_name: str) -> Identity:
        """Register an individual, open its session and return the stored identity"""
        identity = Identity.individual(username, first_name, last_name)
        return self._register(identity, secret)

    def create_organization(self, name: str, secret: str) -> Identity:
        """Register an organization, open its session and return the stored identity"""
        identity = Identity.organization(name)
        return self._register(identity, secret)

    def delete_identity(self, identity: Identity, token: Optional[SessionToken]) -> None:
        """Remove the identity and its credential; DataIntegrityError if the credential is gone"""
        self._require_authorized(identity.id, token, "delete_identity")
        with self._lock_for(identity.id):
            self.repository.delete_identity(identity)
        with self._locks_guard:
            self._account_locks.pop(identity.id, None)
        log_action(self.logger, "info", "Identity deleted", user_id=identity.id,
                   action="delete_identity", resource="identity")

    def get_identity(self, identity_id: str) -> Identity:
        return self._load(identity_id)

    # Private helper methods

    def _require_authorized(self, identity_id: str, token: Optional[SessionToken],
                            action: str) -> None:
        if not self.auth.authorize_action(identity_id, token):
            log_action(self.logger, "warning", "Authorization refused", user_id=identity_id,
                       action=action)
            raise Unauthorized("Not authorised to perform this action", identity_id)

    def _require_unique(self, username: str) -> None:
        if self.repository.find_by_username(username) is not None:
            raise DuplicateIdentity(f"User {username} already exists")

    def _register(self, identity: Identity, secret: str) -> Identity:
        credential = Credential.for_identity(identity, secret)
        # uniqueness check and insert must not interleave with another sign-up
        with self._registration_lock:
            self._require_unique(identity.username)
            self.repository.save_new_identity(credential, identity)
        stored = self._load(identity.id)
        self.auth.create_session(credential)
        log_action(self.logger, "info", "Identity created", user_id=identity.id,
                   action="create_identity", resource="identity",
                   details={'kind': identity.kind.value})
        return stored

    def _load(self, identity_id: str) -> Identity:
        identity = self.repository.get_identity(identity_id)
        if identity is None:
            raise IdentityNotFound(f"No identity with id {identity_id}", identity_id)
        return identity

    def _checked_amount(self, amount: Amount) -> Decimal:
        value = to_decimal(amount)
        if self.reject_negative_amounts and value < 0:
            raise InvalidAmount(f"Amount must not be negative: {value}")
        return value

    def _lock_for(self, identity_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._account_locks.get(identity_id)
            if lock is None:
                lock = self._account_locks[identity_id] = threading.Lock()
            return lock
