"""
Bank Facade Module

The single entry point a front end talks to. Each gated call looks up the
live session for the acting identity right before delegating, and the
service checks that same token again. Errors are passed through as raised.
"""

from decimal import Decimal

from .accounts import Amount
from .auth import AuthSession, SessionToken
from .exceptions import Unauthorized
from .identities import Identity
from .service import AccountService


class BankFacade:
    """Login, sign-up, balance and deletion operations for one process"""

    def __init__(self, auth: AuthSession, accounts: AccountService):
        self.auth = auth
        self.accounts = accounts

    def login(self, username: str, secret: str) -> Identity:
        return self.auth.login(username, secret)

    def logout(self, identity: Identity) -> None:
        self.auth.logout(identity.id)

    def create_individual(self, username: str, secret: str,
                          first_name: str, last_name: str) -> Identity:
        return self.accounts.create_individual(username, secret, first_name, last_name)

    def create_organization(self, name: str, secret: str) -> Identity:
        return self.accounts.create_organization(name, secret)

    def get_balance(self, identity_id: str) -> Decimal:
        token = self._live_token(identity_id)
        return self.accounts.get_balance(identity_id, token)

    def deposit(self, identity: Identity, amount: Amount) -> None:
        token = self._live_token(identity.id)
        self.accounts.deposit(identity, amount, token)

    def withdraw(self, identity: Identity, amount: Amount) -> None:
        token = self._live_token(identity.id)
        self.accounts.withdraw(identity, amount, token)

    def delete_identity(self, identity: Identity) -> None:
        token = self._live_token(identity.id)
        self.accounts.delete_identity(identity, token)

    def get_identity(self, identity_id: str) -> Identity:
        return self.accounts.get_identity(identity_id)

    def _live_token(self, identity_id: str) -> SessionToken:
        token = self.auth.get_session_token(identity_id)
        if token is None or not token.authenticated:
            raise Unauthorized("Not authorised to perform this action!", identity_id)
        return token
