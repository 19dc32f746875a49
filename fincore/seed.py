"""
Demo Seed Data

The three identities the ledger ships with for demos and manual testing.
Seeding never opens sessions; demo users log in like anyone else.

Run with: python -m fincore.seed  (seeds the configured SQLite database)
"""

from dataclasses import dataclass
from typing import List, Optional

from .identities import Credential, Identity
from .logging_config import get_logger, log_action
from .repository import IdentityRepository


@dataclass(frozen=True)
class DemoIdentity:
    identity_id: str
    username: str
    secret: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def build(self) -> Identity:
        if self.first_name is None:
            return Identity.organization(self.username, identity_id=self.identity_id)
        return Identity.individual(self.username, self.first_name, self.last_name,
                                   identity_id=self.identity_id)


DEMO_IDENTITIES: List[DemoIdentity] = [
    DemoIdentity("e29b41d4-e89b-12d3-a456-426614174000", "TestCustA", "Pa55word!!123$1",
                 first_name="John", last_name="Test"),
    DemoIdentity("e29b41d4-e89b-12d3-a456-426614174001", "TestCustB", "Pa55word!!123$2",
                 first_name="Mary", last_name="Testing"),
    DemoIdentity("e29b41d4-e89b-12d3-a456-426614174002", "TestBusiness", "Pa55word!!123$3"),
]


def seed_demo_data(repository: IdentityRepository) -> int:
    """Insert any demo identity not already present; returns how many were added"""
    logger = get_logger("fincore.seed")
    added = 0
    for demo in DEMO_IDENTITIES:
        if repository.get_identity(demo.identity_id) is not None:
            continue
        if repository.find_by_username(demo.username) is not None:
            log_action(logger, "warning", "Demo username taken by another identity, skipped",
                       action="seed", details={'username': demo.username})
            continue
        identity = demo.build()
        repository.save_new_identity(Credential.for_identity(identity, demo.secret), identity)
        added += 1
    log_action(logger, "info", "Demo data seeded", action="seed", details={'added': added})
    return added


if __name__ == "__main__":
    from .system import BankingSystem
    from .config import get_config

    cfg = get_config().model_copy(update={'storage_backend': 'sqlite', 'seed_demo_data': False})
    system = BankingSystem(cfg)
    try:
        print(f"Seeded {seed_demo_data(system.repository)} demo identities into {cfg.database_path}")
    finally:
        system.close()
