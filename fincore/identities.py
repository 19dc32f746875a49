"""
Identity Module

Identities are the people and businesses that hold an account. The two
variants differ only in how their display name is built, so they are a
single Identity record carrying a tagged profile rather than a class
hierarchy. Credentials hold the secret bound to an identity.
"""

import hmac
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from .accounts import Account
from .storage import StorageRecord


class IdentityKind(Enum):
    """Identity variants"""
    INDIVIDUAL = "individual"
    ORGANIZATION = "organization"


@dataclass(frozen=True)
class IndividualProfile:
    first_name: str
    last_name: str

    kind = IdentityKind.INDIVIDUAL

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class OrganizationProfile:
    name: str

    kind = IdentityKind.ORGANIZATION

    @property
    def display_name(self) -> str:
        return self.name


Profile = Union[IndividualProfile, OrganizationProfile]


def normalize_username(username: str) -> str:
    """Key used for case-insensitive username comparison"""
    return username.casefold()


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Identity(StorageRecord):
    """
    Account holder.

    Everything except the owned Account is fixed at creation time; the
    service mutates `account` in place and persists the whole record.
    """
    username: str
    profile: Profile
    account: Account = field(default_factory=Account)

    @classmethod
    def individual(cls, username: str, first_name: str, last_name: str,
                   identity_id: Optional[str] = None) -> 'Identity':
        """Create an individual (first + last name) identity with a zero balance"""
        now = datetime.now(timezone.utc)
        return cls(
            id=identity_id or _new_id(),
            created_at=now,
            updated_at=now,
            username=username,
            profile=IndividualProfile(first_name=first_name, last_name=last_name)
        )

    @classmethod
    def organization(cls, name: str, identity_id: Optional[str] = None) -> 'Identity':
        """Create an organization identity; its name doubles as the username"""
        now = datetime.now(timezone.utc)
        return cls(
            id=identity_id or _new_id(),
            created_at=now,
            updated_at=now,
            username=name,
            profile=OrganizationProfile(name=name)
        )

    @property
    def kind(self) -> IdentityKind:
        return self.profile.kind

    @property
    def display_name(self) -> str:
        return self.profile.display_name

    @property
    def username_key(self) -> str:
        return normalize_username(self.username)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        if self.kind is IdentityKind.INDIVIDUAL:
            profile = {'first_name': self.profile.first_name, 'last_name': self.profile.last_name}
        else:
            profile = {'name': self.profile.name}
        return {
            'id': self.id,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
            'username': self.username,
            'username_key': self.username_key,
            'kind': self.kind.value,
            'profile': profile,
            'account': self.account.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Identity':
        """Create instance from a stored dictionary"""
        data = cls.parse_timestamps(data)
        kind = IdentityKind(data['kind'])
        if kind is IdentityKind.INDIVIDUAL:
            profile = IndividualProfile(**data['profile'])
        else:
            profile = OrganizationProfile(**data['profile'])
        return cls(
            id=data['id'],
            created_at=data['created_at'],
            updated_at=data['updated_at'],
            username=data['username'],
            profile=profile,
            account=Account.from_dict(data.get('account', {}))
        )


@dataclass
class Credential(StorageRecord):
    """
    Secret bound to an identity, sharing the identity's id.

    The secret is stored and compared as plaintext. This is the known weak
    baseline of the ledger, kept so stored data stays compatible; swapping
    in a salted hash changes the stored format.
    """
    secret: str

    @classmethod
    def for_identity(cls, identity: Identity, secret: str) -> 'Credential':
        now = datetime.now(timezone.utc)
        return cls(id=identity.id, created_at=now, updated_at=now, secret=secret)

    def matches(self, secret: str) -> bool:
        """Plain equality check against the stored secret"""
        if not isinstance(secret, str):
            return False
        return hmac.compare_digest(self.secret.encode("utf-8"), secret.encode("utf-8"))

    def __repr__(self) -> str:
        return f"Credential(id={self.id!r}, secret='***')"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Credential':
        data = cls.parse_timestamps(data)
        return cls(
            id=data['id'],
            created_at=data['created_at'],
            updated_at=data['updated_at'],
            secret=data['secret']
        )
