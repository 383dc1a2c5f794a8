"""Uniform result envelope returned by every lifecycle operation.

Expected business outcomes are reported as a failed envelope carrying
a ``ResultKind`` and a human-readable message; exceptions are reserved
for unexpected infrastructure faults.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ResultKind(str, Enum):
    """Stable failure kinds for callers of the lifecycle service."""

    INVALID_PASSWORD = "INVALID_PASSWORD"
    PASSWORD_MISMATCH = "PASSWORD_MISMATCH"
    INVALID_ROLE = "INVALID_ROLE"
    INVALID_EMAIL = "INVALID_EMAIL"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
    ACCOUNT_ALREADY_VERIFIED = "ACCOUNT_ALREADY_VERIFIED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    UNAUTHORIZED = "UNAUTHORIZED"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    TOKEN_ISSUANCE_FAILED = "TOKEN_ISSUANCE_FAILED"
    CODE_GENERATION_FAILED = "CODE_GENERATION_FAILED"
    VERIFICATION_SEND_FAILED = "VERIFICATION_SEND_FAILED"
    CODE_EXPIRED = "CODE_EXPIRED"
    INVALID_CODE = "INVALID_CODE"
    INVALID_EXPIRY = "INVALID_EXPIRY"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Success flag, message and optional payload of an operation.

    ``kind`` is ``None`` on success and names the failure otherwise.
    """

    success: bool
    message: str
    payload: Optional[T] = None
    kind: Optional[ResultKind] = None

    def __post_init__(self) -> None:
        if self.success and self.kind is not None:
            msg = "A successful result cannot carry a failure kind"
            raise ValueError(msg)
        if not self.success and self.kind is None:
            msg = "A failed result must carry a failure kind"
            raise ValueError(msg)

    @classmethod
    def ok(cls, message: str, payload: Optional[T] = None) -> "OperationResult[T]":
        return cls(success=True, message=message, payload=payload)

    @classmethod
    def fail(cls, kind: ResultKind, message: str) -> "OperationResult[T]":
        return cls(success=False, message=message, kind=kind)

    def to_dict(self) -> dict:
        payload = self.payload
        if payload is not None and hasattr(payload, "to_dict"):
            payload = payload.to_dict()
        return {
            "success": self.success,
            "message": self.message,
            "kind": self.kind.value if self.kind else None,
            "payload": payload,
        }
