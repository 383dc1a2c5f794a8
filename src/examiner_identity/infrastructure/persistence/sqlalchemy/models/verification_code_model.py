"""SQLAlchemy model for verification codes."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from examiner_identity.domain.shared.time import utc_now
from examiner_identity.infrastructure.persistence.sqlalchemy.base import Base


class VerificationCodeModel(Base):
    """SQLAlchemy model for an account's verification codes.

    Superseded codes are kept (flagged expired); the current code of an
    account is the most recently created one.
    """

    __tablename__ = "verification_codes"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    account_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    code: Mapped[str] = mapped_column(String(16), nullable=False)
    is_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    attempts: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    expires_in_seconds: Mapped[int] = mapped_column(Integer, nullable=False)
    expired: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    consumed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<VerificationCodeModel(id={self.id}, account_id={self.account_id}, "
            f"expired={self.expired})>"
        )
