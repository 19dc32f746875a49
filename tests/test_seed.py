"""
Test suite for demo seed data and system bootstrap
"""

from decimal import Decimal

import pytest

from fincore.config import FinCoreConfig
from fincore.identities import IdentityKind
from fincore.seed import DEMO_IDENTITIES, seed_demo_data
from fincore.system import BankingSystem, create_storage
from fincore.storage import InMemoryStorage, SQLiteStorage


class TestSeedData:
    """Test demo identities"""

    def test_seed_adds_three_identities(self, repository, auth):
        assert seed_demo_data(repository) == 3

        custa = repository.get_identity("e29b41d4-e89b-12d3-a456-426614174000")
        assert custa.username == "TestCustA"
        assert custa.display_name == "John Test"

        business = repository.find_by_username("testbusiness")
        assert business.kind is IdentityKind.ORGANIZATION
        assert auth.active_sessions() == 0

    def test_seed_is_idempotent(self, repository):
        seed_demo_data(repository)
        assert seed_demo_data(repository) == 0
        assert len(repository.list_identities()) == len(DEMO_IDENTITIES)

    def test_demo_users_can_log_in(self, repository, auth):
        seed_demo_data(repository)
        for demo in DEMO_IDENTITIES:
            assert auth.login(demo.username, demo.secret).id == demo.identity_id


class TestBankingSystem:
    """Test wiring from configuration"""

    def test_memory_system_with_seed(self):
        system = BankingSystem(FinCoreConfig(storage_backend="memory", seed_demo_data=True))
        assert isinstance(system.storage, InMemoryStorage)
        user = system.api.login("TestCustB", "Pa55word!!123$2")
        system.api.deposit(user, "5")
        assert system.api.get_balance(user.id) == Decimal("5")
        system.close()

    def test_sqlite_system_persists(self, tmp_path):
        cfg = FinCoreConfig(storage_backend="sqlite",
                            database_path=str(tmp_path / "ledger.db"),
                            seed_demo_data=False)
        system = BankingSystem(cfg)
        assert isinstance(system.storage, SQLiteStorage)
        alice = system.api.create_individual("alice", "Secret#12word", "Alice", "Smith")
        system.api.deposit(alice, "12.50")
        system.close()

        reopened = BankingSystem(cfg)
        try:
            again = reopened.api.login("alice", "Secret#12word")
            assert reopened.api.get_balance(again.id) == Decimal("12.50")
        finally:
            reopened.close()

    def test_policies_come_from_config(self):
        system = BankingSystem(FinCoreConfig(seed_demo_data=False, allow_overdraft=False,
                                             invalidate_session_on_logout=True))
        assert system.accounts.allow_overdraft is False
        assert system.auth.invalidate_on_logout is True

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_storage(FinCoreConfig(storage_backend="postgres"))


class TestConfig:
    """Test environment-driven configuration"""

    def test_defaults_keep_baseline_behavior(self, monkeypatch):
        for key in ("FINCORE_ALLOW_OVERDRAFT", "FINCORE_REJECT_NEGATIVE_AMOUNTS",
                    "FINCORE_INVALIDATE_SESSION_ON_LOGOUT"):
            monkeypatch.delenv(key, raising=False)
        cfg = FinCoreConfig(_env_file=None)
        assert cfg.allow_overdraft is True
        assert cfg.reject_negative_amounts is False
        assert cfg.invalidate_session_on_logout is False

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("FINCORE_ALLOW_OVERDRAFT", "false")
        monkeypatch.setenv("FINCORE_MINIMUM_BALANCE", "25.00")
        cfg = FinCoreConfig(_env_file=None)
        assert cfg.allow_overdraft is False
        assert cfg.minimum_balance == Decimal("25.00")
