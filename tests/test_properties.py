"""
Property-based tests for balance arithmetic and the authorization gate

Amounts are generated as integer coefficients with an exponent, so they
range from sub-cent fractions to values far wider than the default
28-digit decimal context.
"""

from decimal import Decimal
from fractions import Fraction

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from fincore.accounts import Account
from fincore.auth import AuthSession, SessionToken
from fincore.repository import StorageIdentityRepository
from fincore.service import AccountService
from fincore.storage import InMemoryStorage, SQLiteStorage


amounts = st.builds(
    lambda coefficient, exponent: Decimal(f"{coefficient}E{exponent}"),
    st.integers(min_value=-10 ** 40, max_value=10 ** 40),
    st.integers(min_value=-30, max_value=10),
)

subjects = st.sampled_from(["a", "b", "e29b41d4-e89b-12d3-a456-426614174000"])


def _ledger(storage):
    repository = StorageIdentityRepository(storage)
    auth = AuthSession(repository)
    return AccountService(repository, auth), auth


class TestAccountProperties:
    """Test Account arithmetic over generated amounts"""

    @given(start=amounts, amount=amounts)
    def test_deposit_then_withdraw_restores_balance(self, start, amount):
        account = Account(balance=start)
        account.deposit(amount)
        account.withdraw(amount)
        assert account.balance == start

    @given(deposits=st.lists(amounts, max_size=20))
    def test_balance_equals_exact_sum(self, deposits):
        """Test the balance matches a rational-number sum of every deposit"""
        account = Account()
        for amount in deposits:
            account.deposit(amount)
        assert Fraction(account.balance) == sum((Fraction(a) for a in deposits), Fraction(0))


class TestServiceProperties:
    """Test persisted balances over generated amounts"""

    @pytest.mark.parametrize("backend", ["memory", "sqlite"])
    @settings(max_examples=50, deadline=None)
    @given(start=amounts, amount=amounts)
    def test_net_zero_flow_through_storage(self, backend, start, amount):
        storage = InMemoryStorage() if backend == "memory" else SQLiteStorage()
        try:
            service, auth = _ledger(storage)
            alice = service.create_individual("alice", "Secret#12word", "Alice", "Smith")
            token = auth.get_session_token(alice.id)

            service.deposit(alice, start, token)
            service.deposit(alice, amount, token)
            service.withdraw(alice, amount, token)
            assert service.get_balance(alice.id, token) == start
        finally:
            storage.close()


class TestGateProperties:
    """Test the authorization gate truth table"""

    @given(subject=subjects, token_subject=subjects, authenticated=st.booleans())
    def test_gate_requires_authenticated_matching_token(self, subject, token_subject, authenticated):
        auth = AuthSession(StorageIdentityRepository(InMemoryStorage()))
        token = SessionToken(token_subject, authenticated)
        expected = authenticated and subject == token_subject
        assert auth.authorize_action(subject, token) is expected

    @given(subject=subjects)
    def test_gate_refuses_missing_token(self, subject):
        auth = AuthSession(StorageIdentityRepository(InMemoryStorage()))
        assert auth.authorize_action(subject, None) is False

    @given(names=st.lists(st.text(alphabet="abcdefgh", min_size=1, max_size=8),
                          min_size=1, max_size=10))
    def test_issued_token_is_keyed_by_its_subject(self, names):
        repository = StorageIdentityRepository(InMemoryStorage())
        auth = AuthSession(repository)
        service = AccountService(repository, auth)
        created = {}
        for name in set(names):
            created[name] = service.create_organization(name, "Pa55word!!123$3")
        for identity in created.values():
            token = auth.get_session_token(identity.id)
            assert token.subject_id == identity.id
            assert auth.authorize_action(identity.id, token)
