"""Application DTOs."""

from examiner_identity.application.dtos.account_dtos import (
    AccountSummary,
    AuthenticationToken,
    VerificationDispatch,
)

__all__ = [
    "AccountSummary",
    "AuthenticationToken",
    "VerificationDispatch",
]
