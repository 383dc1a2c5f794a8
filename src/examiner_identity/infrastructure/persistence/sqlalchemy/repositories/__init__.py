# ruff: noqa: E501 - Long import paths in __init__.py re-exports
"""SQLAlchemy repository implementations."""

from examiner_identity.infrastructure.persistence.sqlalchemy.repositories.credential_store_gateway_sqlalchemy import (
    CredentialStoreGatewaySQLAlchemy,
)

__all__ = ["CredentialStoreGatewaySQLAlchemy"]
