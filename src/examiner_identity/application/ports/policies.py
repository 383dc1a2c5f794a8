"""Optional policy gates consulted by the lifecycle service.

Neither gate has a default implementation; when one is not configured
the corresponding check is skipped.
"""

from abc import ABC, abstractmethod

from examiner_identity.application.context import RequesterContext
from examiner_identity.domain.account import Account


class AuthorizationPolicy(ABC):
    """Decides whether a requester may change another account's password."""

    @abstractmethod
    async def can_change_password(
        self,
        requester: RequesterContext,
        account: Account,
    ) -> bool:
        """Return True if the non-owner requester is allowed to proceed."""


class VerifiedEmailPolicy(ABC):
    """Decides whether an account's email is confirmed enough for a change."""

    @abstractmethod
    async def is_email_verified(self, account: Account) -> bool:
        """Return True if the account's email address counts as verified."""


class AdministratorAuthorizationPolicy(AuthorizationPolicy):
    """Lets administrators change any account's password."""

    async def can_change_password(
        self,
        requester: RequesterContext,
        account: Account,
    ) -> bool:
        return requester.owns(account) or requester.is_admin


class AccountVerifiedEmailPolicy(VerifiedEmailPolicy):
    """Trusts the account's own verified flag."""

    async def is_email_verified(self, account: Account) -> bool:
        return account.is_verified
