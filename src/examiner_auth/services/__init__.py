"""Authentication services.

Provides the password policy, password hashing, JWT token management
and verification code generation.
"""

from examiner_auth.services.code_generator import (
    VerificationCodeGenerator,
    is_degenerate,
)
from examiner_auth.services.jwt_service import JWTService
from examiner_auth.services.password_policy import is_valid_password
from examiner_auth.services.password_service import PasswordHashingService

__all__ = [
    "JWTService",
    "PasswordHashingService",
    "VerificationCodeGenerator",
    "is_degenerate",
    "is_valid_password",
]
