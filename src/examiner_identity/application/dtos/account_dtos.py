"""DTOs carried as payloads of lifecycle results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from examiner_identity.domain.account import Account, VerificationCode


@dataclass(frozen=True)
class AccountSummary:
    """Public view of an account; never carries the hash or the code."""

    id: UUID
    email: str
    role: str
    is_active: bool
    is_verified: bool
    last_modified: datetime

    @classmethod
    def from_account(cls, account: Account) -> AccountSummary:
        return cls(
            id=account.id,
            email=account.email,
            role=account.role.value,
            is_active=account.is_active,
            is_verified=account.is_verified,
            last_modified=account.last_modified,
        )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "email": self.email,
            "role": self.role,
            "is_active": self.is_active,
            "is_verified": self.is_verified,
            "last_modified": self.last_modified.isoformat(),
        }


@dataclass(frozen=True)
class AuthenticationToken:
    """Token handed out after a successful authentication."""

    email: str
    access_token: str
    expires_in: int
    token_type: str = "bearer"

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "access_token": self.access_token,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
        }


@dataclass(frozen=True)
class VerificationDispatch:
    """Outcome of issuing a verification code (the code itself stays private)."""

    email: str
    is_sent: bool
    expires_at: datetime

    @classmethod
    def from_code(cls, email: str, code: VerificationCode) -> VerificationDispatch:
        return cls(email=email, is_sent=code.is_sent, expires_at=code.expires_at)

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "is_sent": self.is_sent,
            "expires_at": self.expires_at.isoformat(),
        }
