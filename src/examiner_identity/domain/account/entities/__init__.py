from examiner_identity.domain.account.entities.verification_code import (
    VerificationCode,
)

__all__ = ["VerificationCode"]
