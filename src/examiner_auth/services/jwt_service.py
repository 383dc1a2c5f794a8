"""Signed access tokens (HS256) for authenticated accounts."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import jwt

from examiner_auth.exceptions import InvalidTokenError
from examiner_auth.schemas import TokenPayload


class JWTService:
    """Issues and checks HS256 access tokens.

    Claims: ``sub`` (account id), ``email``, ``role``, ``iat`` and ``exp``.

    Examples
    --------
    >>> tokens = JWTService(secret_key="change-me")
    >>> token = tokens.create_access_token(account_id, "e@x.com", "Tutor")
    >>> tokens.verify_token(token).role
    'Tutor'
    """

    ALGORITHM = "HS256"
    DEFAULT_ACCESS_EXPIRE_MINUTES = 60

    def __init__(
        self,
        secret_key: str,
        access_token_expire_minutes: int = DEFAULT_ACCESS_EXPIRE_MINUTES,
    ):
        """
        Parameters
        ----------
        secret_key
            HMAC key shared by issuer and verifier
        access_token_expire_minutes
            Lifetime of tokens created without an explicit ``expires_delta``
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._key = secret_key
        self._lifetime = timedelta(minutes=access_token_expire_minutes)

    @property
    def access_token_lifetime(self) -> timedelta:
        return self._lifetime

    def create_access_token(
        self,
        account_id: UUID,
        email: str,
        role: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """Sign a token for the given account.

        A negative ``expires_delta`` yields an already expired token.
        """
        issued_at = datetime.now(tz=timezone.utc)
        claims: dict[str, Any] = {
            "sub": str(account_id),
            "email": email,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + (expires_delta or self._lifetime),
        }
        return jwt.encode(claims, self._key, algorithm=self.ALGORITHM)

    def verify_token(self, token: str) -> TokenPayload:
        """Check the signature and expiry of ``token`` and return its claims.

        Raises
        ------
        InvalidTokenError
            For expired, forged or structurally broken tokens
        """
        try:
            claims = jwt.decode(token, self._key, algorithms=[self.ALGORITHM])
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Access token expired") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Access token rejected: {e}") from e

        try:
            return TokenPayload(
                account_id=UUID(claims["sub"]),
                email=claims["email"],
                role=claims.get("role", ""),
                exp=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError(f"Malformed token claims: {e}") from e
