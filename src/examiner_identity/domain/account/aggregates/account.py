"""Account aggregate holding credentials, role and verification state."""

from datetime import datetime
from typing import Optional, Union
from uuid import UUID, uuid4

from examiner_identity.domain.account.entities import VerificationCode
from examiner_identity.domain.account.value_objects import Email, Role
from examiner_identity.domain.shared.time import ensure_tz_aware, utc_now


class Account:
    """
    Account aggregate root.

    Owns the password hash (never the plaintext), the active and
    verified flags, and the account's current verification code.
    """

    def __init__(  # noqa: PLR0913
        self,
        email: Union[str, Email],
        password_hash: str,
        role: Union[str, Role] = Role.STUDENT,
        id: UUID | None = None,
        is_active: bool = True,
        is_verified: bool = False,
        created_at: datetime | None = None,
        last_modified: datetime | None = None,
        verification_code: Optional[VerificationCode] = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._id = id or uuid4()
        self._password_hash = password_hash
        self._role = Role.parse(role)
        self._is_active = is_active
        self._is_verified = is_verified
        self._created_at = ensure_tz_aware(created_at) if created_at else utc_now()
        self._last_modified = (
            ensure_tz_aware(last_modified) if last_modified else self._created_at
        )
        self._verification_code = verification_code

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def email_obj(self) -> Email:
        return self._email

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def role(self) -> Role:
        return self._role

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def is_verified(self) -> bool:
        return self._is_verified

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def last_modified(self) -> datetime:
        return self._last_modified

    @property
    def verification_code(self) -> Optional[VerificationCode]:
        return self._verification_code

    def change_password_hash(self, password_hash: str) -> None:
        self._password_hash = password_hash
        self._touch()

    def activate(self) -> None:
        self._is_active = True
        self._touch()

    def deactivate(self) -> None:
        self._is_active = False
        self._touch()

    def mark_verified(self) -> None:
        self._is_verified = True
        self._is_active = True
        self._touch()

    def attach_verification_code(self, code: VerificationCode) -> None:
        if code.account_id != self._id:
            msg = "Verification code belongs to a different account"
            raise ValueError(msg)
        self._verification_code = code

    def _touch(self) -> None:
        self._last_modified = utc_now()

    @classmethod
    def register(
        cls,
        email: Union[str, Email],
        password_hash: str,
        role: Role,
    ) -> "Account":
        return cls(
            email=email,
            password_hash=password_hash,
            role=role,
            is_active=True,
            is_verified=False,
        )

    @classmethod
    def reconstitute(  # noqa: PLR0913
        cls,
        id: UUID,
        email: Union[str, Email],
        password_hash: str,
        role: Union[str, Role],
        is_active: bool,
        is_verified: bool,
        created_at: datetime,
        last_modified: datetime,
        verification_code: Optional[VerificationCode] = None,
    ) -> "Account":
        return cls(
            id=id,
            email=email,
            password_hash=password_hash,
            role=role,
            is_active=is_active,
            is_verified=is_verified,
            created_at=created_at,
            last_modified=last_modified,
            verification_code=verification_code,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Account(id={self._id}, email={self._email.value}, "
            f"role={self._role.value})"
        )
