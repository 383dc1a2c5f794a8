"""Application services for the credential lifecycle."""

from examiner_identity.application.services.credential_lifecycle_service import (
    CredentialLifecycleService,
)

__all__ = ["CredentialLifecycleService"]
