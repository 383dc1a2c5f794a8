"""Verification code adapters."""

from examiner_identity.infrastructure.codes.local_code_service import LocalCodeService

__all__ = ["LocalCodeService"]
