"""Assembles a CredentialLifecycleService for one unit of work."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from examiner_auth import JWTService, PasswordHashingService, VerificationCodeGenerator
from examiner_config.settings import Settings, get_settings
from examiner_identity.application.ports import (
    AuthorizationPolicy,
    NotificationSender,
    VerifiedEmailPolicy,
)
from examiner_identity.application.services import CredentialLifecycleService
from examiner_identity.infrastructure.codes import LocalCodeService
from examiner_identity.infrastructure.email import SmtpNotificationSender
from examiner_identity.infrastructure.persistence.sqlalchemy import (
    CredentialStoreGatewaySQLAlchemy,
)
from examiner_identity.infrastructure.tokens import JwtTokenIssuer


def build_credential_lifecycle_service(
    session: AsyncSession,
    settings: Optional[Settings] = None,
    notification_sender: Optional[NotificationSender] = None,
    authorization_policy: Optional[AuthorizationPolicy] = None,
    verified_email_policy: Optional[VerifiedEmailPolicy] = None,
) -> CredentialLifecycleService:
    """
    Build a lifecycle service bound to ``session``.

    Parameters
    ----------
    session
        Session backing the credential store gateway (one unit of work)
    settings
        Application settings; defaults to ``get_settings()``
    notification_sender
        Overrides the SMTP sender (used by the CLI when SMTP is disabled)
    authorization_policy
        Gate for password changes requested by someone other than the owner
    verified_email_policy
        Gate requiring a verified email before a password change

    Returns
    -------
    CredentialLifecycleService with the SQLAlchemy gateway and the
    bcrypt, JWT and local code adapters wired in
    """
    settings = settings or get_settings()

    jwt_service = JWTService(
        secret_key=settings.jwt_secret_key.get_secret_value(),
        access_token_expire_minutes=settings.jwt_access_token_expire_minutes,
    )
    generator = VerificationCodeGenerator(
        max_attempts=settings.verification_code_generation_max_attempts,
    )

    return CredentialLifecycleService(
        gateway=CredentialStoreGatewaySQLAlchemy(session),
        password_service=PasswordHashingService(rounds=settings.bcrypt_rounds),
        token_issuer=JwtTokenIssuer(jwt_service),
        notification_sender=notification_sender or SmtpNotificationSender(settings),
        code_service=LocalCodeService(generator),
        verification_code_ttl_seconds=settings.verification_code_ttl_seconds,
        max_verification_attempts=settings.verification_code_max_attempts,
        authorization_policy=authorization_policy,
        verified_email_policy=verified_email_policy,
    )
