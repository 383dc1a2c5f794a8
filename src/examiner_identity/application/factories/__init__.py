"""Factories wiring the lifecycle service to its adapters."""

from examiner_identity.application.factories.lifecycle_factory import (
    build_credential_lifecycle_service,
)

__all__ = ["build_credential_lifecycle_service"]
