"""Examiner Auth - Generic authentication infrastructure.

This package provides authentication building blocks that are
independent of how accounts are stored. It handles:
- Password policy and hashing (bcrypt)
- JWT token creation and verification
- Verification code generation

Architecture:
    examiner_auth/
    ├── services/           # Pure logic (policy, hashing, JWT, codes)
    ├── schemas.py          # Data classes
    └── exceptions.py       # Auth exceptions

Usage:
    from examiner_auth import PasswordHashingService, JWTService
"""

from examiner_auth.exceptions import (
    AuthError,
    CodeGenerationError,
    InvalidTokenError,
    WeakPasswordError,
)
from examiner_auth.schemas import CodeGenerationResult, TokenPayload
from examiner_auth.services import (
    JWTService,
    PasswordHashingService,
    VerificationCodeGenerator,
    is_degenerate,
    is_valid_password,
)

__all__ = [
    # Services
    "JWTService",
    "PasswordHashingService",
    "VerificationCodeGenerator",
    "is_degenerate",
    "is_valid_password",
    # Schemas
    "CodeGenerationResult",
    "TokenPayload",
    # Exceptions
    "AuthError",
    "CodeGenerationError",
    "InvalidTokenError",
    "WeakPasswordError",
]
