"""Ports the lifecycle service depends on."""

from examiner_identity.application.ports.code_service import CodeService
from examiner_identity.application.ports.notification_sender import (
    NotificationSender,
)
from examiner_identity.application.ports.policies import (
    AccountVerifiedEmailPolicy,
    AdministratorAuthorizationPolicy,
    AuthorizationPolicy,
    VerifiedEmailPolicy,
)
from examiner_identity.application.ports.token_issuer import TokenIssuer

__all__ = [
    "AccountVerifiedEmailPolicy",
    "AdministratorAuthorizationPolicy",
    "AuthorizationPolicy",
    "CodeService",
    "NotificationSender",
    "TokenIssuer",
    "VerifiedEmailPolicy",
]
