# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy models for the credential store."""

from examiner_identity.infrastructure.persistence.sqlalchemy.models.account_model import (
    AccountModel,
)
from examiner_identity.infrastructure.persistence.sqlalchemy.models.verification_code_model import (
    VerificationCodeModel,
)

__all__ = [
    "AccountModel",
    "VerificationCodeModel",
]
