"""TokenIssuer backed by JWTService."""

import logging
from typing import Optional

import jwt

from examiner_auth import JWTService
from examiner_identity.application.context import AuthenticatedIdentity
from examiner_identity.application.dtos import AuthenticationToken
from examiner_identity.application.ports import TokenIssuer

logger = logging.getLogger(__name__)


class JwtTokenIssuer(TokenIssuer):
    """Issues HS256 access tokens for authenticated accounts."""

    def __init__(self, jwt_service: JWTService):
        self._jwt_service = jwt_service

    async def issue_token(
        self,
        identity: AuthenticatedIdentity,
    ) -> Optional[AuthenticationToken]:
        try:
            access_token = self._jwt_service.create_access_token(
                account_id=identity.account_id,
                email=identity.email,
                role=identity.role.value,
            )
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            logger.error("Could not sign access token for %s: %s", identity.email, e)
            return None

        return AuthenticationToken(
            email=identity.email,
            access_token=access_token,
            expires_in=int(self._jwt_service.access_token_lifetime.total_seconds()),
        )
