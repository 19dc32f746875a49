"""Shared fixtures for the ledger test suite"""

import pytest

from fincore.api import BankFacade
from fincore.auth import AuthSession
from fincore.identities import Credential, Identity
from fincore.repository import StorageIdentityRepository
from fincore.service import AccountService
from fincore.storage import InMemoryStorage


@pytest.fixture
def storage():
    """Create in-memory storage for tests"""
    return InMemoryStorage()


@pytest.fixture
def repository(storage):
    return StorageIdentityRepository(storage)


@pytest.fixture
def auth(repository):
    return AuthSession(repository)


@pytest.fixture
def service(repository, auth):
    return AccountService(repository, auth)


@pytest.fixture
def api(auth, service):
    return BankFacade(auth, service)


@pytest.fixture
def stored_alice(repository):
    """Alice persisted directly, without any session"""
    identity = Identity.individual("alice", "Alice", "Smith")
    repository.save_new_identity(Credential.for_identity(identity, "Secret#12word"), identity)
    return identity
