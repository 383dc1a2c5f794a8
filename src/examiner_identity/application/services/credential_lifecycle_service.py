"""Credential and verification lifecycle service."""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, TypeVar

from examiner_auth import CodeGenerationResult, WeakPasswordError, is_valid_password
from examiner_identity.application.context import (
    AuthenticatedIdentity,
    RequesterContext,
)
from examiner_identity.application.dtos import (
    AccountSummary,
    AuthenticationToken,
    VerificationDispatch,
)
from examiner_identity.application.results import OperationResult, ResultKind
from examiner_identity.domain.account import (
    Account,
    Email,
    EmailAlreadyExistsError,
    InvalidEmailError,
    InvalidRoleError,
    Role,
    StorageError,
    VerificationCode,
)
from examiner_identity.domain.shared.time import utc_now

if TYPE_CHECKING:
    from examiner_auth import PasswordHashingService
    from examiner_identity.application.ports import (
        AuthorizationPolicy,
        CodeService,
        NotificationSender,
        TokenIssuer,
        VerifiedEmailPolicy,
    )
    from examiner_identity.domain.account import CredentialStoreGateway

logger = logging.getLogger(__name__)

R = TypeVar("R")

VERIFICATION_TEMPLATE = "verification_code"
VERIFICATION_SUBJECT = "Your Examiner verification code"
VERIFICATION_BODY = """Hello,

Your Examiner verification code is {code}.

The code is valid for {validity}. If you didn't create an Examiner account,
you can safely ignore this email.

-- Examiner
"""

CODE_GENERATION_FAILED = "verification code generation failed"
CODE_SENDING_FAILED = "verification code sending failed"


def _result_boundary(
    action: str,
) -> Callable[[Callable[..., Awaitable[OperationResult[R]]]], Callable[..., Any]]:
    """Convert unexpected faults raised by an operation into failed results.

    The full traceback is logged; the caller only sees a generic message.
    """

    def decorator(
        func: Callable[..., Awaitable[OperationResult[R]]],
    ) -> Callable[..., Awaitable[OperationResult[R]]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> OperationResult[R]:
            try:
                return await func(*args, **kwargs)
            except StorageError:
                logger.exception("%s failed: credential store error", action)
                return OperationResult.fail(
                    ResultKind.STORAGE_FAILURE,
                    f"{action} failed: the credential store is unavailable",
                )
            except Exception:  # noqa: BLE001
                logger.exception("%s failed unexpectedly", action)
                return OperationResult.fail(
                    ResultKind.INTERNAL_ERROR,
                    f"{action} failed: an unexpected error occurred",
                )

        return wrapper

    return decorator


def _describe_validity(seconds: int) -> str:
    if seconds >= 3600 and seconds % 3600 == 0:
        hours = seconds // 3600
        return "1 hour" if hours == 1 else f"{hours} hours"
    if seconds >= 60:
        return f"{seconds // 60} minutes"
    return f"{seconds} seconds"


class CredentialLifecycleService:
    """
    Application service for the credential and verification lifecycle.

    Orchestrates the password policy, bcrypt hashing, token issuance,
    code generation and notification delivery on top of a credential
    store gateway to provide:
    - Registration (with verification code dispatch)
    - Authentication
    - Password change
    - Verification code issuance and validation
    - Account activation toggling

    Every public method returns an ``OperationResult``. Business rule
    violations are ordinary failed results; only unexpected faults are
    logged with a traceback and reported with a generic message.

    The service keeps no state between calls and holds no locks; the
    gateway's unique email constraint is the authority on conflicting
    registrations.
    """

    DEFAULT_CODE_TTL_SECONDS = 3600
    DEFAULT_MAX_VERIFICATION_ATTEMPTS = 5

    def __init__(  # noqa: PLR0913
        self,
        gateway: CredentialStoreGateway,
        password_service: PasswordHashingService,
        token_issuer: TokenIssuer,
        notification_sender: NotificationSender,
        code_service: CodeService,
        verification_code_ttl_seconds: int = DEFAULT_CODE_TTL_SECONDS,
        max_verification_attempts: int = DEFAULT_MAX_VERIFICATION_ATTEMPTS,
        authorization_policy: Optional[AuthorizationPolicy] = None,
        verified_email_policy: Optional[VerifiedEmailPolicy] = None,
    ):
        if verification_code_ttl_seconds < 0:
            msg = "verification_code_ttl_seconds cannot be negative"
            raise ValueError(msg)

        self._gateway = gateway
        self._password_service = password_service
        self._token_issuer = token_issuer
        self._notification_sender = notification_sender
        self._code_service = code_service
        self._code_ttl = verification_code_ttl_seconds
        self._max_attempts = max_verification_attempts
        self._authorization_policy = authorization_policy
        self._verified_email_policy = verified_email_policy

    @_result_boundary("Authentication")
    async def authenticate(
        self,
        email: str,
        password: str,
    ) -> OperationResult[AuthenticationToken]:
        account = await self._find_account(email)
        if account is None:
            logger.info("Authentication attempt for unknown email: %s", email)
            return OperationResult.fail(
                ResultKind.USER_NOT_FOUND,
                "Authentication failed: User not found!",
            )

        if not account.is_active:
            logger.warning("Authentication attempt for disabled account: %s", email)
            return OperationResult.fail(
                ResultKind.ACCOUNT_DISABLED,
                "Authentication failed: User is disabled!",
            )

        if not self._password_service.verify(password, account.password_hash):
            logger.warning("Authentication failed for %s: invalid password", email)
            return OperationResult.fail(
                ResultKind.INVALID_CREDENTIALS,
                "Authentication failed: Invalid Email or password!",
            )

        token = await self._issue_token(account)
        if token is None:
            return OperationResult.fail(
                ResultKind.TOKEN_ISSUANCE_FAILED,
                "Authentication failed: Unable to authenticate!",
            )

        logger.info("Account authenticated: %s", account.email)
        return OperationResult.ok("Authentication was successful", token)

    @_result_boundary("Registration")
    async def register(
        self,
        email: str,
        password: str,
        confirm_password: Optional[str] = None,
        role: str | Role = Role.STUDENT,
    ) -> OperationResult[AccountSummary]:
        # Request checks run before any storage access
        if not is_valid_password(password):
            return OperationResult.fail(
                ResultKind.INVALID_PASSWORD,
                "Registration failed: Invalid password provided",
            )

        if confirm_password is not None and confirm_password != password:
            return OperationResult.fail(
                ResultKind.PASSWORD_MISMATCH,
                "Registration failed: Passwords do not match",
            )

        try:
            parsed_role = Role.parse(role)
        except InvalidRoleError:
            return OperationResult.fail(
                ResultKind.INVALID_ROLE,
                "Registering user failed: Invalid user role provided",
            )

        email_obj = self._parse_email(email)
        if email_obj is None:
            return OperationResult.fail(
                ResultKind.INVALID_EMAIL,
                "Registration failed: Invalid email address provided",
            )

        existing = await self._gateway.find_accounts_by_email(email_obj.value)
        if existing:
            return OperationResult.fail(
                ResultKind.EMAIL_ALREADY_EXISTS,
                "Registration failed: The Email already exists",
            )

        try:
            password_hash = self._password_service.hash(password)
        except WeakPasswordError as e:
            return OperationResult.fail(
                ResultKind.INVALID_PASSWORD,
                f"Registration failed: {e.message}",
            )

        account = Account.register(email_obj, password_hash, parsed_role)
        try:
            await self._gateway.add_account(account)
            await self._gateway.commit()
        except EmailAlreadyExistsError:
            logger.warning("Concurrent registration rejected by store: %s", email_obj)
            return OperationResult.fail(
                ResultKind.EMAIL_ALREADY_EXISTS,
                "Registration failed: The Email already exists",
            )

        logger.info(
            "Account registered: %s (role: %s)",
            account.email,
            account.role.value,
        )

        # The account stays registered even if the code cannot be issued or
        # sent; issue_verification_code resolves it later.
        dispatch = await self._issue_code(account, self._code_ttl)
        if not dispatch.success:
            return OperationResult.fail(
                dispatch.kind or ResultKind.VERIFICATION_SEND_FAILED,
                f"Registering user was successful, but {dispatch.message}",
            )

        return OperationResult.ok(
            "Registering user was successful, and verification code sent successfully",
            AccountSummary.from_account(account),
        )

    @_result_boundary("Change password request")
    async def change_password(  # noqa: PLR0911
        self,
        email: str,
        old_password: str,
        new_password: str,
        confirm_password: Optional[str] = None,
        requester: Optional[RequesterContext] = None,
    ) -> OperationResult[AccountSummary]:
        if not is_valid_password(new_password):
            return OperationResult.fail(
                ResultKind.INVALID_PASSWORD,
                "Change password request failed: Invalid new password provided",
            )

        if confirm_password is not None and confirm_password != new_password:
            return OperationResult.fail(
                ResultKind.PASSWORD_MISMATCH,
                "Change password request failed: Passwords do not match",
            )

        account = await self._find_account(email)
        if account is None:
            return OperationResult.fail(
                ResultKind.USER_NOT_FOUND,
                "Change password request failed: User not found!",
            )

        if not self._password_service.verify(old_password, account.password_hash):
            logger.warning("Password change rejected for %s: invalid password", email)
            return OperationResult.fail(
                ResultKind.INVALID_CREDENTIALS,
                "Change password request failed: Invalid Email or password!",
            )

        if (
            requester is not None
            and not requester.owns(account)
            and self._authorization_policy is not None
            and not await self._authorization_policy.can_change_password(
                requester,
                account,
            )
        ):
            logger.warning(
                "Password change for %s refused for requester %s",
                account.email,
                requester.email,
            )
            return OperationResult.fail(
                ResultKind.UNAUTHORIZED,
                "Change password request failed: Invalid authorizer!",
            )

        if (
            self._verified_email_policy is not None
            and not await self._verified_email_policy.is_email_verified(account)
        ):
            return OperationResult.fail(
                ResultKind.EMAIL_NOT_VERIFIED,
                "Change password request failed: Email address is not verified",
            )

        try:
            new_hash = self._password_service.hash(new_password)
        except WeakPasswordError as e:
            return OperationResult.fail(
                ResultKind.INVALID_PASSWORD,
                f"Change password request failed: {e.message}",
            )

        account.change_password_hash(new_hash)
        await self._gateway.update_account(account)
        await self._gateway.commit()

        logger.info("Password changed for account: %s", account.email)
        return OperationResult.ok(
            "Change password request was successful",
            AccountSummary.from_account(account),
        )

    @_result_boundary("Verification code request")
    async def issue_verification_code(
        self,
        email: str,
        expires_in_seconds: Optional[int] = None,
    ) -> OperationResult[VerificationDispatch]:
        """Issue (or re-issue) a verification code and try to deliver it.

        Any live code of the account is superseded by the new one.
        """
        ttl = self._code_ttl if expires_in_seconds is None else expires_in_seconds
        if ttl < 0:
            return OperationResult.fail(
                ResultKind.INVALID_EXPIRY,
                "Verification code request failed: Expiry cannot be negative",
            )

        account = await self._find_account(email)
        if account is None:
            return OperationResult.fail(
                ResultKind.USER_NOT_FOUND,
                "Verification code request failed: User not found!",
            )

        if not account.is_active:
            logger.warning("Code requested for disabled account: %s", email)
            return OperationResult.fail(
                ResultKind.ACCOUNT_DISABLED,
                "Verification code request failed: User is disabled!",
            )

        if account.is_verified:
            return OperationResult.fail(
                ResultKind.ACCOUNT_ALREADY_VERIFIED,
                "Verification code request failed: Account is already verified",
            )

        dispatch = await self._issue_code(account, ttl)
        if not dispatch.success:
            return OperationResult.fail(
                dispatch.kind or ResultKind.VERIFICATION_SEND_FAILED,
                f"Verification code request failed: {dispatch.message}",
            )

        return OperationResult.ok(
            "Verification code sent successfully",
            dispatch.payload,
        )

    @_result_boundary("Verification")
    async def validate_verification_code(
        self,
        email: str,
        submitted_code: str,
    ) -> OperationResult[AccountSummary]:
        account = await self._find_account(email)
        if account is None:
            return OperationResult.fail(
                ResultKind.USER_NOT_FOUND,
                "Verification failed: User not found!",
            )

        # mark_verified also activates, so a disabled account must stop here
        if not account.is_active:
            logger.warning("Verification attempt for disabled account: %s", email)
            return OperationResult.fail(
                ResultKind.ACCOUNT_DISABLED,
                "Verification failed: User is disabled!",
            )

        code = account.verification_code
        if code is None:
            return OperationResult.fail(
                ResultKind.INVALID_CODE,
                "Verification failed: No verification code has been issued",
            )

        if code.is_consumed:
            return OperationResult.fail(
                ResultKind.INVALID_CODE,
                "Verification failed: Code has already been used",
            )

        now = utc_now()
        if code.is_expired(now):
            if not code.expired:
                code.mark_expired()
                await self._gateway.update_verification_code(code)
                await self._gateway.commit()
            return OperationResult.fail(
                ResultKind.CODE_EXPIRED,
                "Verification failed: Code has expired, request a new code",
            )

        if not code.matches(submitted_code):
            attempts = code.register_failed_attempt(now)
            if 0 < self._max_attempts <= attempts:
                code.mark_expired()
                logger.warning(
                    "Verification code for %s expired after %d failed attempts",
                    account.email,
                    attempts,
                )
            await self._gateway.update_verification_code(code)
            await self._gateway.commit()
            return OperationResult.fail(
                ResultKind.INVALID_CODE,
                "Verification failed: Invalid code provided",
            )

        code.consume(now)
        account.mark_verified()
        await self._gateway.update_verification_code(code)
        await self._gateway.update_account(account)
        await self._gateway.commit()

        logger.info("Account verified: %s", account.email)
        return OperationResult.ok(
            "Verification was successful",
            AccountSummary.from_account(account),
        )

    @_result_boundary("Account status change")
    async def set_account_active(
        self,
        email: str,
        is_active: bool,
    ) -> OperationResult[AccountSummary]:
        account = await self._find_account(email)
        if account is None:
            return OperationResult.fail(
                ResultKind.USER_NOT_FOUND,
                "Account status change failed: User not found!",
            )

        if is_active:
            account.activate()
        else:
            account.deactivate()
        await self._gateway.update_account(account)
        await self._gateway.commit()

        state = "activated" if is_active else "deactivated"
        logger.info("Account %s: %s", state, account.email)
        return OperationResult.ok(
            f"Account {state} successfully",
            AccountSummary.from_account(account),
        )

    @_result_boundary("Requester lookup")
    async def find_requester(self, email: str) -> OperationResult[RequesterContext]:
        """Resolve the account acting on behalf of a password change."""
        account = await self._find_account(email)
        if account is None:
            return OperationResult.fail(
                ResultKind.USER_NOT_FOUND,
                "Requester lookup failed: User not found!",
            )
        if not account.is_active:
            return OperationResult.fail(
                ResultKind.ACCOUNT_DISABLED,
                "Requester lookup failed: User is disabled!",
            )
        return OperationResult.ok(
            "Requester found",
            RequesterContext.create(account),
        )

    async def _find_account(self, email: str) -> Optional[Account]:
        email_obj = self._parse_email(email)
        if email_obj is None:
            return None

        accounts = await self._gateway.find_accounts_by_email(email_obj.value)
        if len(accounts) > 1:
            logger.error("Found %d accounts for %s", len(accounts), email_obj)
        return accounts[0] if accounts else None

    @staticmethod
    def _parse_email(email: str) -> Optional[Email]:
        if not isinstance(email, str):
            return None
        try:
            return Email(email)
        except InvalidEmailError:
            return None

    async def _issue_token(self, account: Account) -> Optional[AuthenticationToken]:
        try:
            return await self._token_issuer.issue_token(
                AuthenticatedIdentity.create(account),
            )
        except Exception:  # noqa: BLE001
            logger.exception("Token issuer failed for %s", account.email)
            return None

    async def _request_code(self) -> CodeGenerationResult:
        try:
            return await self._code_service.get_code()
        except Exception:  # noqa: BLE001
            logger.exception("Code service failed")
            return CodeGenerationResult.failed("Code service unavailable")

    async def _issue_code(
        self,
        account: Account,
        ttl: int,
    ) -> OperationResult[VerificationDispatch]:
        generation = await self._request_code()
        if not generation.success or not generation.code:
            logger.error(
                "No verification code for %s: %s",
                account.email,
                generation.message,
            )
            return OperationResult.fail(
                ResultKind.CODE_GENERATION_FAILED,
                CODE_GENERATION_FAILED,
            )

        previous = account.verification_code
        if previous is not None and not previous.is_consumed and not previous.expired:
            previous.mark_expired()
            await self._gateway.update_verification_code(previous)

        code = VerificationCode.issue(account.id, generation.code, ttl)
        account.attach_verification_code(code)
        await self._gateway.add_verification_code(code)
        await self._gateway.commit()

        if not await self._deliver_code(account, code):
            return OperationResult.fail(
                ResultKind.VERIFICATION_SEND_FAILED,
                CODE_SENDING_FAILED,
            )

        code.mark_sent()
        await self._gateway.update_verification_code(code)
        await self._gateway.commit()

        logger.info("Verification code sent to %s", account.email)
        return OperationResult.ok(
            "Verification code sent",
            VerificationDispatch.from_code(account.email, code),
        )

    async def _deliver_code(self, account: Account, code: VerificationCode) -> bool:
        body = VERIFICATION_BODY.format(
            code=code.code,
            validity=_describe_validity(code.expires_in_seconds),
        )
        try:
            result = await self._notification_sender.send_message(
                VERIFICATION_TEMPLATE,
                account.email,
                VERIFICATION_SUBJECT,
                body,
            )
        except Exception:  # noqa: BLE001
            logger.exception("Notification sender failed for %s", account.email)
            return False

        if not result.success:
            logger.warning(
                "Verification code not delivered to %s: %s",
                account.email,
                result.message,
            )
            return False
        return True
