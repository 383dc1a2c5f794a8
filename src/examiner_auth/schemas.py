"""Value objects handed between the auth services and their callers."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass(frozen=True)
class TokenPayload:
    """Claims recovered from a verified access token.

    Attributes
    ----------
    account_id
        ``sub`` claim
    email
        Login email at issue time
    role
        Role name at issue time
    exp
        Expiry, timezone-aware UTC
    """

    account_id: UUID
    email: str
    role: str
    exp: datetime

    def is_expired(self) -> bool:
        return self.exp < datetime.now(tz=self.exp.tzinfo)


@dataclass(frozen=True)
class CodeGenerationResult:
    """Outcome of a verification code request."""

    success: bool
    code: Optional[str] = None
    message: str = ""

    @classmethod
    def generated(cls, code: str) -> "CodeGenerationResult":
        return cls(success=True, code=code, message="Code generation was successful")

    @classmethod
    def failed(cls, message: str) -> "CodeGenerationResult":
        return cls(success=False, code=None, message=message)
