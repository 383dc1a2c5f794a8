from enum import Enum


class VerificationCodeStatus(str, Enum):
    """Lifecycle states of a verification code.

    CREATED -> SENT -> {CONSUMED | EXPIRED}; the last two are terminal.
    """

    CREATED = "created"
    SENT = "sent"
    CONSUMED = "consumed"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in (VerificationCodeStatus.CONSUMED, VerificationCodeStatus.EXPIRED)
