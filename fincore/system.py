"""
System Bootstrap Module

Wires storage, repository, session layer, account service and facade from
configuration. One BankingSystem is one ledger process.
"""

from typing import Optional

from .api import BankFacade
from .auth import AuthSession
from .config import FinCoreConfig, get_config
from .logging_config import get_logger
from .repository import StorageIdentityRepository
from .seed import seed_demo_data
from .service import AccountService
from .storage import InMemoryStorage, SQLiteStorage, StorageInterface


def create_storage(config: FinCoreConfig) -> StorageInterface:
    """Storage backend selected by config.storage_backend"""
    backend = config.storage_backend.lower()
    if backend == "memory":
        return InMemoryStorage()
    if backend == "sqlite":
        return SQLiteStorage(config.database_path)
    raise ValueError(f"Unknown storage backend: {config.storage_backend}")


class BankingSystem:
    """Ledger components initialized from one configuration"""

    def __init__(self, config: Optional[FinCoreConfig] = None,
                 storage: Optional[StorageInterface] = None):
        self.config = config or get_config()
        self.logger = get_logger("fincore.system")

        self.storage = storage or create_storage(self.config)
        self.repository = StorageIdentityRepository(self.storage)
        self.auth = AuthSession(
            self.repository,
            invalidate_on_logout=self.config.invalidate_session_on_logout
        )
        self.accounts = AccountService(
            self.repository,
            self.auth,
            allow_overdraft=self.config.allow_overdraft,
            minimum_balance=self.config.minimum_balance,
            reject_negative_amounts=self.config.reject_negative_amounts
        )
        self.api = BankFacade(self.auth, self.accounts)

        if self.config.seed_demo_data:
            seed_demo_data(self.repository)

    def close(self) -> None:
        self.storage.close()
