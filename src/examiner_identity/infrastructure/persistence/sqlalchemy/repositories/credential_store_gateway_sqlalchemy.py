"""SQLAlchemy implementation of CredentialStoreGateway."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from examiner_identity.domain.account import (
    Account,
    CredentialStoreGateway,
    EmailAlreadyExistsError,
    StorageError,
    VerificationCode,
    normalize_email,
)
from examiner_identity.infrastructure.persistence.sqlalchemy.models import (
    AccountModel,
    VerificationCodeModel,
)

logger = logging.getLogger(__name__)

_EMAIL_UNIQUE_MARKERS = ("accounts.email", "ix_accounts_email")


def _is_duplicate_email(error: IntegrityError) -> bool:
    """True when ``error`` comes from the unique index on ``accounts.email``.

    SQLite names the column ("UNIQUE constraint failed: accounts.email");
    PostgreSQL names the index (``ix_accounts_email``).
    """
    detail = str(error.orig)
    return any(marker in detail for marker in _EMAIL_UNIQUE_MARKERS)


class CredentialStoreGatewaySQLAlchemy(CredentialStoreGateway):
    """SQLAlchemy implementation of the CredentialStoreGateway interface.

    Scoped to one ``AsyncSession``; staged writes become durable on
    ``commit``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._pending_emails: list[str] = []

    async def find_accounts_by_email(self, email: str) -> list[Account]:
        stmt = select(AccountModel).where(
            AccountModel.email == normalize_email(email),
        )
        try:
            result = await self._session.execute(stmt)
            models = result.scalars().all()
            accounts = []
            for model in models:
                code_model = await self._find_current_code_model(model.id)
                accounts.append(self._map_to_domain(model, code_model))
        except SQLAlchemyError as e:
            msg = "Failed to load accounts"
            raise StorageError(msg) from e
        return accounts

    async def add_account(self, account: Account) -> None:
        self._session.add(self._map_to_model(account))
        self._pending_emails.append(account.email)
        logger.debug("Staged new account: %s", account.id)

    async def update_account(self, account: Account) -> None:
        model = await self._get(AccountModel, account.id)
        model.email = account.email
        model.password_hash = account.password_hash
        model.role = account.role.value
        model.is_active = account.is_active
        model.is_verified = account.is_verified
        model.last_modified = account.last_modified

    async def add_verification_code(self, code: VerificationCode) -> None:
        self._session.add(self._map_code_to_model(code))
        logger.debug("Staged verification code for account: %s", code.account_id)

    async def update_verification_code(self, code: VerificationCode) -> None:
        model = await self._get(VerificationCodeModel, code.id)
        model.is_sent = code.is_sent
        model.attempts = code.attempts
        model.expired = code.expired
        model.consumed_at = code.consumed_at

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            emails, self._pending_emails = self._pending_emails, []
            if _is_duplicate_email(e):
                raise EmailAlreadyExistsError(emails[0] if emails else "") from e
            msg = "Credential store rejected the write"
            raise StorageError(msg) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._pending_emails = []
            msg = "Failed to commit credential store changes"
            raise StorageError(msg) from e
        self._pending_emails = []

    async def _get(self, model_cls, model_id: UUID):
        try:
            model = await self._session.get(model_cls, model_id)
        except SQLAlchemyError as e:
            msg = f"Failed to load {model_cls.__tablename__} row"
            raise StorageError(msg) from e
        if model is None:
            msg = f"No {model_cls.__tablename__} row with id {model_id}"
            raise StorageError(msg)
        return model

    async def _find_current_code_model(
        self,
        account_id: UUID,
    ) -> Optional[VerificationCodeModel]:
        stmt = (
            select(VerificationCodeModel)
            .where(VerificationCodeModel.account_id == account_id)
            .order_by(VerificationCodeModel.created_at.desc())
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _map_to_domain(
        self,
        model: AccountModel,
        code_model: Optional[VerificationCodeModel],
    ) -> Account:
        return Account.reconstitute(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            role=model.role,
            is_active=model.is_active,
            is_verified=model.is_verified,
            created_at=model.created_at,
            last_modified=model.last_modified,
            verification_code=(
                self._map_code_to_domain(code_model) if code_model else None
            ),
        )

    def _map_code_to_domain(self, model: VerificationCodeModel) -> VerificationCode:
        return VerificationCode.reconstitute(
            id=model.id,
            account_id=model.account_id,
            code=model.code,
            is_sent=model.is_sent,
            attempts=model.attempts,
            created_at=model.created_at,
            expires_in_seconds=model.expires_in_seconds,
            expired=model.expired,
            consumed_at=model.consumed_at,
        )

    def _map_to_model(self, account: Account) -> AccountModel:
        return AccountModel(
            id=account.id,
            email=account.email,
            password_hash=account.password_hash,
            role=account.role.value,
            is_active=account.is_active,
            is_verified=account.is_verified,
            created_at=account.created_at,
            last_modified=account.last_modified,
        )

    def _map_code_to_model(self, code: VerificationCode) -> VerificationCodeModel:
        return VerificationCodeModel(
            id=code.id,
            account_id=code.account_id,
            code=code.code,
            is_sent=code.is_sent,
            attempts=code.attempts,
            created_at=code.created_at,
            expires_in_seconds=code.expires_in_seconds,
            expired=code.expired,
            consumed_at=code.consumed_at,
        )
