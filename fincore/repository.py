"""
Identity Repository Module

The persistence boundary for identities and their credentials. The
IdentityRepository contract is what the session and account services depend
on; StorageIdentityRepository implements it on top of any StorageInterface.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from .exceptions import DataIntegrityError, IdentityNotFound
from .identities import Credential, Identity, normalize_username
from .logging_config import get_logger, log_action
from .storage import StorageInterface


class IdentityRepository(ABC):
    """Lookup and persistence of identities and credentials"""

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[Identity]:
        """Case-insensitive username lookup"""
        pass

    @abstractmethod
    def get_identity(self, identity_id: str) -> Optional[Identity]:
        pass

    @abstractmethod
    def get_credential(self, identity_id: str) -> Optional[Credential]:
        pass

    @abstractmethod
    def save_new_identity(self, credential: Credential, identity: Identity) -> None:
        """Persist a freshly created identity together with its credential"""
        pass

    @abstractmethod
    def save_identity(self, identity: Identity) -> None:
        """Replace the stored copy of an existing identity"""
        pass

    @abstractmethod
    def delete_identity(self, identity: Identity) -> None:
        """
        Remove an identity and its credential.

        Raises DataIntegrityError if the credential cannot be found.
        """
        pass

    @abstractmethod
    def list_identities(self) -> List[Identity]:
        pass

    @abstractmethod
    def list_credentials(self) -> List[Credential]:
        pass

    def get_balance(self, identity_id: str) -> Decimal:
        """Current stored balance for an identity"""
        identity = self.get_identity(identity_id)
        if identity is None:
            raise IdentityNotFound(f"No identity with id {identity_id}", identity_id)
        return identity.account.balance


class StorageIdentityRepository(IdentityRepository):
    """
    IdentityRepository over a StorageInterface.

    Identities and credentials live in two tables keyed by identity id.
    Updates replace the stored record instead of appending a second copy.
    """

    def __init__(self, storage: StorageInterface):
        self.storage = storage
        self.identities_table = "identities"
        self.credentials_table = "credentials"
        self.logger = get_logger("fincore.repository")

    def find_by_username(self, username: str) -> Optional[Identity]:
        matches = self.storage.find(
            self.identities_table, {'username_key': normalize_username(username)}
        )
        if not matches:
            return None
        return Identity.from_dict(matches[0])

    def get_identity(self, identity_id: str) -> Optional[Identity]:
        data = self.storage.load(self.identities_table, identity_id)
        if data is None:
            return None
        return Identity.from_dict(data)

    def get_credential(self, identity_id: str) -> Optional[Credential]:
        data = self.storage.load(self.credentials_table, identity_id)
        if data is None:
            return None
        return Credential.from_dict(data)

    def save_new_identity(self, credential: Credential, identity: Identity) -> None:
        if credential.id != identity.id:
            raise DataIntegrityError(
                f"Credential {credential.id} does not belong to identity {identity.id}",
                identity.id
            )
        with self.storage.atomic():
            self.storage.save(self.credentials_table, credential.id, credential.to_dict())
            self.storage.save(self.identities_table, identity.id, identity.to_dict())

    def save_identity(self, identity: Identity) -> None:
        if not self.storage.exists(self.identities_table, identity.id):
            raise IdentityNotFound(f"No identity with id {identity.id}", identity.id)
        identity.updated_at = datetime.now(timezone.utc)
        self.storage.save(self.identities_table, identity.id, identity.to_dict())

    def delete_identity(self, identity: Identity) -> None:
        with self.storage.atomic():
            if not self.storage.exists(self.credentials_table, identity.id):
                log_action(
                    self.logger, "error", "Identity has no credential record",
                    user_id=identity.id, action="delete_identity", resource="credential"
                )
                raise DataIntegrityError(
                    f"No credential stored for identity {identity.id}", identity.id
                )
            self.storage.delete(self.identities_table, identity.id)
            self.storage.delete(self.credentials_table, identity.id)

    def list_identities(self) -> List[Identity]:
        return [Identity.from_dict(data) for data in self.storage.load_all(self.identities_table)]

    def list_credentials(self) -> List[Credential]:
        return [Credential.from_dict(data) for data in self.storage.load_all(self.credentials_table)]
