"""Verification code entity owned by an Account."""

import hmac
from datetime import datetime, timedelta
from uuid import UUID, uuid4

from examiner_identity.domain.account.exceptions import VerificationCodeStateError
from examiner_identity.domain.account.value_objects import VerificationCodeStatus
from examiner_identity.domain.shared.time import ensure_tz_aware, utc_now


class VerificationCode:
    """
    One-time numeric code used to confirm an account's email address.

    A code is unusable once it is flagged expired, once
    ``expires_in_seconds`` have elapsed since ``created_at``, or once
    it has been consumed. Consumed and expired are terminal.
    """

    def __init__(  # noqa: PLR0913
        self,
        account_id: UUID,
        code: str,
        expires_in_seconds: int,
        id: UUID | None = None,
        is_sent: bool = False,
        attempts: int = 0,
        created_at: datetime | None = None,
        expired: bool = False,
        consumed_at: datetime | None = None,
    ):
        if expires_in_seconds < 0:
            msg = "expires_in_seconds cannot be negative"
            raise ValueError(msg)

        self._id = id or uuid4()
        self._account_id = account_id
        self._code = code
        self._expires_in_seconds = expires_in_seconds
        self._is_sent = is_sent
        self._attempts = attempts
        self._created_at = ensure_tz_aware(created_at) if created_at else utc_now()
        self._expired = expired
        self._consumed_at = ensure_tz_aware(consumed_at) if consumed_at else None

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def account_id(self) -> UUID:
        return self._account_id

    @property
    def code(self) -> str:
        return self._code

    @property
    def is_sent(self) -> bool:
        return self._is_sent

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def expires_in_seconds(self) -> int:
        return self._expires_in_seconds

    @property
    def expires_at(self) -> datetime:
        return self._created_at + timedelta(seconds=self._expires_in_seconds)

    @property
    def expired(self) -> bool:
        """The stored expiry flag (see ``is_expired`` for the full check)."""
        return self._expired

    @property
    def consumed_at(self) -> datetime | None:
        return self._consumed_at

    @property
    def is_consumed(self) -> bool:
        return self._consumed_at is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True if flagged expired or the window has elapsed."""
        if self._expired:
            return True
        now = ensure_tz_aware(now) if now else utc_now()
        return now >= self.expires_at

    def status(self, now: datetime | None = None) -> VerificationCodeStatus:
        if self.is_consumed:
            return VerificationCodeStatus.CONSUMED
        if self.is_expired(now):
            return VerificationCodeStatus.EXPIRED
        if self._is_sent:
            return VerificationCodeStatus.SENT
        return VerificationCodeStatus.CREATED

    def is_terminal(self, now: datetime | None = None) -> bool:
        return self.status(now).is_terminal

    def matches(self, candidate: str) -> bool:
        """Compare a submitted code in constant time."""
        if not candidate:
            return False
        return hmac.compare_digest(self._code.encode(), candidate.strip().encode())

    def mark_sent(self) -> None:
        """Record delivery; an expired code stays expired."""
        if self.is_consumed:
            msg = "A consumed verification code cannot be sent"
            raise VerificationCodeStateError(msg)
        self._is_sent = True

    def register_failed_attempt(self, now: datetime | None = None) -> int:
        self._ensure_not_terminal("attempted", now)
        self._attempts += 1
        return self._attempts

    def consume(self, now: datetime | None = None) -> None:
        self._ensure_not_terminal("consumed", now)
        self._consumed_at = ensure_tz_aware(now) if now else utc_now()

    def mark_expired(self) -> None:
        if self.is_consumed:
            msg = "A consumed verification code cannot expire"
            raise VerificationCodeStateError(msg)
        self._expired = True

    def _ensure_not_terminal(self, action: str, now: datetime | None) -> None:
        status = self.status(now)
        if status.is_terminal:
            msg = f"Verification code is {status.value} and cannot be {action}"
            raise VerificationCodeStateError(msg)

    @classmethod
    def issue(
        cls,
        account_id: UUID,
        code: str,
        expires_in_seconds: int,
    ) -> "VerificationCode":
        return cls(
            account_id=account_id,
            code=code,
            expires_in_seconds=expires_in_seconds,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        account_id: UUID,
        code: str,
        is_sent: bool,
        attempts: int,
        created_at: datetime,
        expires_in_seconds: int,
        expired: bool,
        consumed_at: datetime | None,
    ) -> "VerificationCode":
        return cls(
            id=id,
            account_id=account_id,
            code=code,
            is_sent=is_sent,
            attempts=attempts,
            created_at=created_at,
            expires_in_seconds=expires_in_seconds,
            expired=expired,
            consumed_at=consumed_at,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VerificationCode):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"VerificationCode(id={self._id}, account_id={self._account_id}, "
            f"status={self.status().value})"
        )
