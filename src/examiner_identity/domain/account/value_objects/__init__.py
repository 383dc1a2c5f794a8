"""Value objects for the account domain."""

from examiner_identity.domain.account.value_objects.email import (
    Email,
    normalize_email,
)
from examiner_identity.domain.account.value_objects.role import Role
from examiner_identity.domain.account.value_objects.verification_status import (
    VerificationCodeStatus,
)

__all__ = [
    "Email",
    "Role",
    "VerificationCodeStatus",
    "normalize_email",
]
