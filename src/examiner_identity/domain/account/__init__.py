"""Account domain manages credentials and email verification.

This domain handles:
- Account aggregate (email, password hash, role, active/verified flags)
- Verification codes owned by an account
- The storage gateway the application layer depends on
"""

from examiner_identity.domain.account.aggregates import Account
from examiner_identity.domain.account.entities import VerificationCode
from examiner_identity.domain.account.exceptions import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    InvalidRoleError,
    StorageError,
    VerificationCodeStateError,
)
from examiner_identity.domain.account.repositories import CredentialStoreGateway
from examiner_identity.domain.account.value_objects import (
    Email,
    Role,
    VerificationCodeStatus,
    normalize_email,
)

__all__ = [
    "Account",
    "CredentialStoreGateway",
    "Email",
    "EmailAlreadyExistsError",
    "InvalidEmailError",
    "InvalidRoleError",
    "Role",
    "StorageError",
    "VerificationCode",
    "VerificationCodeStateError",
    "VerificationCodeStatus",
    "normalize_email",
]
