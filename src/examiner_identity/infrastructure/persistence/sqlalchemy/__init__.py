"""SQLAlchemy persistence for the credential store."""

from examiner_identity.infrastructure.persistence.sqlalchemy.base import Base
from examiner_identity.infrastructure.persistence.sqlalchemy.database import (
    create_engine_from_settings,
    create_session_maker,
    create_tables,
)
from examiner_identity.infrastructure.persistence.sqlalchemy.models import (
    AccountModel,
    VerificationCodeModel,
)
from examiner_identity.infrastructure.persistence.sqlalchemy.repositories import (
    CredentialStoreGatewaySQLAlchemy,
)

__all__ = [
    "AccountModel",
    "Base",
    "CredentialStoreGatewaySQLAlchemy",
    "VerificationCodeModel",
    "create_engine_from_settings",
    "create_session_maker",
    "create_tables",
]
