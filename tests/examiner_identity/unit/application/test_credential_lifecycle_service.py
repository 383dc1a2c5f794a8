"""Unit tests for CredentialLifecycleService with mocked collaborators."""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from examiner_auth import CodeGenerationResult, PasswordHashingService, WeakPasswordError
from examiner_identity.application.context import RequesterContext
from examiner_identity.application.dtos import AuthenticationToken
from examiner_identity.application.ports import (
    AuthorizationPolicy,
    CodeService,
    NotificationSender,
    TokenIssuer,
    VerifiedEmailPolicy,
)
from examiner_identity.application.results import OperationResult, ResultKind
from examiner_identity.application.services import CredentialLifecycleService
from examiner_identity.domain.account import (
    Account,
    CredentialStoreGateway,
    EmailAlreadyExistsError,
    Role,
    StorageError,
    VerificationCode,
)
from examiner_identity.domain.shared.time import utc_now

TEST_EMAIL = "student@example.com"
TEST_PASSWORD = "strin(1)G"
NEW_PASSWORD = "n3w(Secret)"
TEST_CODE = "123456"


class LifecycleServiceTestBase:
    def setup_method(self):
        """Set up test fixtures."""
        self.gateway = AsyncMock(spec=CredentialStoreGateway)
        self.gateway.find_accounts_by_email.return_value = []
        self.password_service = Mock(spec=PasswordHashingService)
        self.password_service.hash.return_value = "hashed"
        self.password_service.verify.return_value = True
        self.token_issuer = AsyncMock(spec=TokenIssuer)
        self.token_issuer.issue_token.return_value = AuthenticationToken(
            email=TEST_EMAIL,
            access_token="signed.jwt.token",
            expires_in=3600,
        )
        self.notification_sender = AsyncMock(spec=NotificationSender)
        self.notification_sender.send_message.return_value = OperationResult.ok("sent")
        self.code_service = AsyncMock(spec=CodeService)
        self.code_service.get_code.return_value = CodeGenerationResult.generated(
            TEST_CODE,
        )

        self.service = self._build()

    def _build(self, **kwargs) -> CredentialLifecycleService:
        return CredentialLifecycleService(
            gateway=self.gateway,
            password_service=self.password_service,
            token_issuer=self.token_issuer,
            notification_sender=self.notification_sender,
            code_service=self.code_service,
            **kwargs,
        )

    def _existing_account(self, **kwargs) -> Account:
        account = Account.register(TEST_EMAIL, "stored-hash", Role.STUDENT)
        for key, value in kwargs.items():
            setattr(account, f"_{key}", value)
        self.gateway.find_accounts_by_email.return_value = [account]
        return account

    def _attach_code(self, account: Account, **kwargs) -> VerificationCode:
        code = VerificationCode(
            account_id=account.id,
            code=TEST_CODE,
            expires_in_seconds=kwargs.pop("expires_in_seconds", 3600),
            is_sent=True,
            **kwargs,
        )
        account.attach_verification_code(code)
        return code


class TestAuthenticate(LifecycleServiceTestBase):
    @pytest.mark.asyncio
    async def test_success_returns_token(self):
        account = self._existing_account()

        result = await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)

        assert result.success
        assert result.payload.access_token == "signed.jwt.token"
        self.password_service.verify.assert_called_once_with(TEST_PASSWORD, "stored-hash")
        identity = self.token_issuer.issue_token.await_args.args[0]
        assert identity.account_id == account.id
        assert identity.role is Role.STUDENT

    @pytest.mark.asyncio
    async def test_email_lookup_is_normalized(self):
        self._existing_account()

        await self.service.authenticate("  Student@Example.com ", TEST_PASSWORD)

        self.gateway.find_accounts_by_email.assert_awaited_once_with(TEST_EMAIL)

    @pytest.mark.asyncio
    async def test_unknown_email(self):
        result = await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.USER_NOT_FOUND
        assert result.message == "Authentication failed: User not found!"

    @pytest.mark.asyncio
    async def test_malformed_email_is_user_not_found(self):
        result = await self.service.authenticate("not-an-email", TEST_PASSWORD)

        assert result.kind is ResultKind.USER_NOT_FOUND
        self.gateway.find_accounts_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_account_checked_before_password(self):
        self._existing_account(is_active=False)

        result = await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.ACCOUNT_DISABLED
        self.password_service.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        self._existing_account()
        self.password_service.verify.return_value = False

        result = await self.service.authenticate(TEST_EMAIL, "wrong")

        assert result.kind is ResultKind.INVALID_CREDENTIALS
        self.token_issuer.issue_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_token_issuer_returning_none(self):
        self._existing_account()
        self.token_issuer.issue_token.return_value = None

        result = await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.TOKEN_ISSUANCE_FAILED

    @pytest.mark.asyncio
    async def test_token_issuer_raising(self):
        self._existing_account()
        self.token_issuer.issue_token.side_effect = TimeoutError()

        result = await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.TOKEN_ISSUANCE_FAILED

    @pytest.mark.asyncio
    async def test_unverified_account_may_authenticate(self):
        self._existing_account(is_verified=False)

        result = await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)

        assert result.success

    @pytest.mark.asyncio
    async def test_storage_failure(self):
        self.gateway.find_accounts_by_email.side_effect = StorageError("db down")

        result = await self.service.authenticate(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.STORAGE_FAILURE
        assert "db down" not in result.message


class TestRegister(LifecycleServiceTestBase):
    @pytest.mark.asyncio
    async def test_success_persists_account_and_sends_code(self):
        result = await self.service.register(
            TEST_EMAIL,
            TEST_PASSWORD,
            TEST_PASSWORD,
            "Tutor",
        )

        assert result.success
        assert result.message == (
            "Registering user was successful, and verification code sent successfully"
        )
        assert result.payload.role == "Tutor"
        assert not result.payload.is_verified

        account = self.gateway.add_account.await_args.args[0]
        assert account.email == TEST_EMAIL
        assert account.password_hash == "hashed"
        assert account.role is Role.TUTOR

        code = self.gateway.add_verification_code.await_args.args[0]
        assert code.account_id == account.id
        assert code.code == TEST_CODE
        assert code.expires_in_seconds == 3600
        assert code.is_sent

        template, recipient, _, body = self.notification_sender.send_message.await_args.args
        assert template == "verification_code"
        assert recipient == TEST_EMAIL
        assert TEST_CODE in body

    @pytest.mark.asyncio
    async def test_default_role_is_student(self):
        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.payload.role == "Student"

    @pytest.mark.asyncio
    async def test_invalid_password_checked_first(self):
        result = await self.service.register("not-an-email", "string", "x", "Nope")

        assert result.kind is ResultKind.INVALID_PASSWORD
        assert result.message == "Registration failed: Invalid password provided"
        self.gateway.find_accounts_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_password_mismatch(self):
        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD, "strin(2)G")

        assert result.kind is ResultKind.PASSWORD_MISMATCH
        self.gateway.find_accounts_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["Teacher", "1", ""])
    async def test_invalid_role(self, role):
        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD, role=role)

        assert result.kind is ResultKind.INVALID_ROLE
        self.gateway.find_accounts_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_email(self):
        result = await self.service.register("nobody", TEST_PASSWORD)

        assert result.kind is ResultKind.INVALID_EMAIL
        self.gateway.find_accounts_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_existing_email(self):
        self._existing_account()

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.EMAIL_ALREADY_EXISTS
        assert "already exists" in result.message
        self.password_service.hash.assert_not_called()
        self.gateway.add_account.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_unique_violation_reported_as_existing_email(self):
        self.gateway.commit.side_effect = EmailAlreadyExistsError(TEST_EMAIL)

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.EMAIL_ALREADY_EXISTS
        self.code_service.get_code.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_hasher_rejection_is_invalid_password(self):
        self.password_service.hash.side_effect = WeakPasswordError(
            "Password cannot exceed 72 bytes",
        )

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.INVALID_PASSWORD
        assert "72 bytes" in result.message
        self.gateway.add_account.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_code_generation_failure_keeps_account(self):
        self.code_service.get_code.return_value = CodeGenerationResult.failed(
            "Code generation failed",
        )

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.CODE_GENERATION_FAILED
        self.gateway.add_account.assert_awaited_once()
        self.gateway.add_verification_code.assert_not_awaited()
        self.notification_sender.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_code_service_exception_is_generation_failure(self):
        self.code_service.get_code.side_effect = ConnectionError("unreachable")

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.CODE_GENERATION_FAILED

    @pytest.mark.asyncio
    async def test_send_failure_keeps_unsent_code(self):
        self.notification_sender.send_message.return_value = OperationResult.fail(
            ResultKind.VERIFICATION_SEND_FAILED,
            "SMTP down",
        )

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.VERIFICATION_SEND_FAILED
        code = self.gateway.add_verification_code.await_args.args[0]
        assert not code.is_sent
        self.gateway.update_verification_code.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sender_exception_is_send_failure(self):
        self.notification_sender.send_message.side_effect = TimeoutError()

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.VERIFICATION_SEND_FAILED

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal_error(self):
        self.gateway.add_account.side_effect = RuntimeError("boom")

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.kind is ResultKind.INTERNAL_ERROR
        assert "boom" not in result.message


class TestChangePassword(LifecycleServiceTestBase):
    @pytest.mark.asyncio
    async def test_success(self):
        account = self._existing_account()
        self.password_service.hash.return_value = "new-hash"

        result = await self.service.change_password(
            TEST_EMAIL,
            TEST_PASSWORD,
            NEW_PASSWORD,
            NEW_PASSWORD,
        )

        assert result.success
        assert result.message == "Change password request was successful"
        assert account.password_hash == "new-hash"
        self.gateway.update_account.assert_awaited_once_with(account)
        self.gateway.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_invalid_new_password_before_lookup(self):
        result = await self.service.change_password(TEST_EMAIL, TEST_PASSWORD, "weak")

        assert result.kind is ResultKind.INVALID_PASSWORD
        self.gateway.find_accounts_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_confirmation_mismatch(self):
        result = await self.service.change_password(
            TEST_EMAIL,
            TEST_PASSWORD,
            NEW_PASSWORD,
            "n3w(Other)",
        )

        assert result.kind is ResultKind.PASSWORD_MISMATCH

    @pytest.mark.asyncio
    async def test_unknown_account(self):
        result = await self.service.change_password(TEST_EMAIL, TEST_PASSWORD, NEW_PASSWORD)

        assert result.kind is ResultKind.USER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_wrong_old_password(self):
        self._existing_account()
        self.password_service.verify.return_value = False

        result = await self.service.change_password(TEST_EMAIL, "wrong", NEW_PASSWORD)

        assert result.kind is ResultKind.INVALID_CREDENTIALS
        self.password_service.hash.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_owner_refused_by_policy(self):
        self._existing_account()
        policy = AsyncMock(spec=AuthorizationPolicy)
        policy.can_change_password.return_value = False
        service = self._build(authorization_policy=policy)
        other = Account.register("tutor@example.com", "hash", Role.TUTOR)

        result = await service.change_password(
            TEST_EMAIL,
            TEST_PASSWORD,
            NEW_PASSWORD,
            requester=RequesterContext.create(other),
        )

        assert result.kind is ResultKind.UNAUTHORIZED
        self.gateway.update_account.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_owner_skips_authorization_policy(self):
        account = self._existing_account()
        policy = AsyncMock(spec=AuthorizationPolicy)
        service = self._build(authorization_policy=policy)

        result = await service.change_password(
            TEST_EMAIL,
            TEST_PASSWORD,
            NEW_PASSWORD,
            requester=RequesterContext.create(account),
        )

        assert result.success
        policy.can_change_password.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_owner_without_policy_proceeds(self):
        self._existing_account()
        other = Account.register("tutor@example.com", "hash", Role.TUTOR)

        result = await self.service.change_password(
            TEST_EMAIL,
            TEST_PASSWORD,
            NEW_PASSWORD,
            requester=RequesterContext.create(other),
        )

        assert result.success

    @pytest.mark.asyncio
    async def test_unverified_email_refused_by_policy(self):
        self._existing_account()
        policy = AsyncMock(spec=VerifiedEmailPolicy)
        policy.is_email_verified.return_value = False
        service = self._build(verified_email_policy=policy)

        result = await service.change_password(TEST_EMAIL, TEST_PASSWORD, NEW_PASSWORD)

        assert result.kind is ResultKind.EMAIL_NOT_VERIFIED

    @pytest.mark.asyncio
    async def test_commit_failure_is_storage_failure(self):
        self._existing_account()
        self.gateway.commit.side_effect = StorageError()

        result = await self.service.change_password(TEST_EMAIL, TEST_PASSWORD, NEW_PASSWORD)

        assert result.kind is ResultKind.STORAGE_FAILURE


class TestIssueVerificationCode(LifecycleServiceTestBase):
    @pytest.mark.asyncio
    async def test_supersedes_live_code(self):
        account = self._existing_account()
        previous = self._attach_code(account)
        self.code_service.get_code.return_value = CodeGenerationResult.generated("654321")

        result = await self.service.issue_verification_code(TEST_EMAIL)

        assert result.success
        assert result.payload.is_sent
        assert previous.expired
        self.gateway.update_verification_code.assert_any_await(previous)
        new_code = self.gateway.add_verification_code.await_args.args[0]
        assert new_code.code == "654321"
        assert account.verification_code is new_code

    @pytest.mark.asyncio
    async def test_consumed_code_is_not_touched(self):
        account = self._existing_account()
        previous = self._attach_code(account)
        previous.consume()

        result = await self.service.issue_verification_code(TEST_EMAIL)

        assert result.success
        assert not previous.expired

    @pytest.mark.asyncio
    async def test_generation_failure_leaves_current_code_alone(self):
        account = self._existing_account()
        previous = self._attach_code(account)
        self.code_service.get_code.return_value = CodeGenerationResult.failed("x")

        result = await self.service.issue_verification_code(TEST_EMAIL)

        assert result.kind is ResultKind.CODE_GENERATION_FAILED
        assert not previous.expired
        self.gateway.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_validity(self):
        self._existing_account()

        result = await self.service.issue_verification_code(TEST_EMAIL, 60)

        code = self.gateway.add_verification_code.await_args.args[0]
        assert code.expires_in_seconds == 60
        assert result.payload.expires_at == code.created_at + timedelta(seconds=60)

    @pytest.mark.asyncio
    async def test_unknown_account(self):
        result = await self.service.issue_verification_code(TEST_EMAIL)

        assert result.kind is ResultKind.USER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_verified_account(self):
        self._existing_account(is_verified=True)

        result = await self.service.issue_verification_code(TEST_EMAIL)

        assert result.kind is ResultKind.ACCOUNT_ALREADY_VERIFIED
        self.code_service.get_code.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_account(self):
        self._existing_account(is_active=False)

        result = await self.service.issue_verification_code(TEST_EMAIL)

        assert result.kind is ResultKind.ACCOUNT_DISABLED
        self.code_service.get_code.assert_not_awaited()
        self.gateway.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_negative_validity_is_invalid_expiry(self):
        self._existing_account()

        result = await self.service.issue_verification_code(TEST_EMAIL, -5)

        assert result.kind is ResultKind.INVALID_EXPIRY
        self.gateway.find_accounts_by_email.assert_not_awaited()
        self.code_service.get_code.assert_not_awaited()


class TestValidateVerificationCode(LifecycleServiceTestBase):
    @pytest.mark.asyncio
    async def test_matching_code_verifies_account(self):
        account = self._existing_account()
        code = self._attach_code(account)

        result = await self.service.validate_verification_code(TEST_EMAIL, TEST_CODE)

        assert result.success
        assert result.payload.is_verified
        assert code.is_consumed
        self.gateway.update_verification_code.assert_awaited_once_with(code)
        self.gateway.update_account.assert_awaited_once_with(account)
        self.gateway.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_disabled_account_stays_disabled(self):
        account = self._existing_account(is_active=False)
        code = self._attach_code(account)

        result = await self.service.validate_verification_code(TEST_EMAIL, TEST_CODE)

        assert result.kind is ResultKind.ACCOUNT_DISABLED
        assert not account.is_active
        assert not account.is_verified
        assert not code.is_consumed
        self.gateway.update_account.assert_not_awaited()
        self.gateway.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_code_issued(self):
        self._existing_account()

        result = await self.service.validate_verification_code(TEST_EMAIL, TEST_CODE)

        assert result.kind is ResultKind.INVALID_CODE

    @pytest.mark.asyncio
    async def test_consumed_code_cannot_be_replayed(self):
        account = self._existing_account()
        code = self._attach_code(account)
        code.consume()

        result = await self.service.validate_verification_code(TEST_EMAIL, TEST_CODE)

        assert result.kind is ResultKind.INVALID_CODE
        self.gateway.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_elapsed_window_persists_expired_flag(self):
        account = self._existing_account()
        code = self._attach_code(
            account,
            created_at=utc_now() - timedelta(hours=2),
        )

        result = await self.service.validate_verification_code(TEST_EMAIL, TEST_CODE)

        assert result.kind is ResultKind.CODE_EXPIRED
        assert code.expired
        self.gateway.update_verification_code.assert_awaited_once_with(code)
        self.gateway.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_flagged_code_is_expired_without_write(self):
        account = self._existing_account()
        self._attach_code(account, expired=True)

        result = await self.service.validate_verification_code(TEST_EMAIL, TEST_CODE)

        assert result.kind is ResultKind.CODE_EXPIRED
        self.gateway.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mismatch_counts_attempt(self):
        account = self._existing_account()
        code = self._attach_code(account)

        result = await self.service.validate_verification_code(TEST_EMAIL, "000001")

        assert result.kind is ResultKind.INVALID_CODE
        assert code.attempts == 1
        assert not code.expired
        self.gateway.update_verification_code.assert_awaited_once_with(code)
        self.gateway.update_account.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_attempt_limit_expires_code(self):
        account = self._existing_account()
        code = self._attach_code(account, attempts=4)

        result = await self.service.validate_verification_code(TEST_EMAIL, "000001")

        assert result.kind is ResultKind.INVALID_CODE
        assert code.attempts == 5
        assert code.expired

    @pytest.mark.asyncio
    async def test_zero_attempt_limit_disables_lockout(self):
        account = self._existing_account()
        code = self._attach_code(account, attempts=50)
        service = self._build(max_verification_attempts=0)

        await service.validate_verification_code(TEST_EMAIL, "000001")

        assert not code.expired


class TestSetAccountActive(LifecycleServiceTestBase):
    @pytest.mark.asyncio
    async def test_deactivate(self):
        account = self._existing_account()

        result = await self.service.set_account_active(TEST_EMAIL, False)

        assert result.success
        assert not account.is_active
        self.gateway.update_account.assert_awaited_once_with(account)

    @pytest.mark.asyncio
    async def test_activate(self):
        account = self._existing_account(is_active=False)

        result = await self.service.set_account_active(TEST_EMAIL, True)

        assert result.success
        assert account.is_active

    @pytest.mark.asyncio
    async def test_unknown_account(self):
        result = await self.service.set_account_active(TEST_EMAIL, False)

        assert result.kind is ResultKind.USER_NOT_FOUND


class TestFindRequester(LifecycleServiceTestBase):
    @pytest.mark.asyncio
    async def test_returns_requester_context(self):
        account = self._existing_account(role=Role.ADMINISTRATOR)

        result = await self.service.find_requester(TEST_EMAIL)

        assert result.success
        assert result.payload.account_id == account.id
        assert result.payload.is_admin

    @pytest.mark.asyncio
    async def test_unknown_requester(self):
        result = await self.service.find_requester(TEST_EMAIL)

        assert result.kind is ResultKind.USER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_disabled_requester(self):
        self._existing_account(is_active=False)

        result = await self.service.find_requester(TEST_EMAIL)

        assert result.kind is ResultKind.ACCOUNT_DISABLED


class TestConstruction:
    def test_negative_code_validity_rejected(self):
        with pytest.raises(ValueError):
            CredentialLifecycleService(
                gateway=AsyncMock(spec=CredentialStoreGateway),
                password_service=Mock(spec=PasswordHashingService),
                token_issuer=AsyncMock(spec=TokenIssuer),
                notification_sender=AsyncMock(spec=NotificationSender),
                code_service=AsyncMock(spec=CodeService),
                verification_code_ttl_seconds=-1,
            )
