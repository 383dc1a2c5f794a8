"""Identity of the caller asking for an account change."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from examiner_identity.domain.account import Role

if TYPE_CHECKING:
    from examiner_identity.domain.account import Account


@dataclass(frozen=True)
class RequesterContext:
    """Immutable context for the authenticated requester."""

    account_id: UUID
    email: str
    role: Role = Role.STUDENT

    @classmethod
    def create(cls, account: Account) -> RequesterContext:
        return cls(account_id=account.id, email=account.email, role=account.role)

    def owns(self, account: Account) -> bool:
        return self.account_id == account.id

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMINISTRATOR

    def __str__(self) -> str:
        return f"RequesterContext({self.email})"


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Identity handed to the token issuer once credentials check out."""

    account_id: UUID
    email: str
    role: Role

    @classmethod
    def create(cls, account: Account) -> AuthenticatedIdentity:
        return cls(account_id=account.id, email=account.email, role=account.role)
