"""Token issuing adapters."""

from examiner_identity.infrastructure.tokens.jwt_token_issuer import JwtTokenIssuer

__all__ = ["JwtTokenIssuer"]
