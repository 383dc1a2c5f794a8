"""Credential store gateway interface."""

from abc import ABC, abstractmethod

from examiner_identity.domain.account.aggregates import Account
from examiner_identity.domain.account.entities import VerificationCode


class CredentialStoreGateway(ABC):
    """
    Storage boundary for accounts and their verification codes.

    One gateway instance represents one unit of work: writes are
    pending until ``commit``. Implementations must enforce email
    uniqueness at the storage level and report a violation as
    ``EmailAlreadyExistsError``; every other storage fault is reported
    as ``StorageError``.
    """

    @abstractmethod
    async def find_accounts_by_email(self, email: str) -> list[Account]:
        """Return accounts whose email matches ``email`` case-insensitively.

        ``email`` is reduced to its match key (see ``normalize_email``)
        before comparison.

        Each account comes with its current verification code attached.
        """

    @abstractmethod
    async def add_account(self, account: Account) -> None:
        """Stage a new account for insertion."""

    @abstractmethod
    async def update_account(self, account: Account) -> None:
        """Stage changes to an existing account."""

    @abstractmethod
    async def add_verification_code(self, code: VerificationCode) -> None:
        """Stage a new verification code for its owning account."""

    @abstractmethod
    async def update_verification_code(self, code: VerificationCode) -> None:
        """Stage state changes to an existing verification code."""

    @abstractmethod
    async def commit(self) -> None:
        """Flush all pending writes."""
