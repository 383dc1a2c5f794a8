"""Port for turning an authenticated identity into a session token."""

from abc import ABC, abstractmethod
from typing import Optional

from examiner_identity.application.context import AuthenticatedIdentity
from examiner_identity.application.dtos import AuthenticationToken


class TokenIssuer(ABC):
    """Issues signed session tokens.

    Returning ``None`` is the defined way to report that no token could
    be issued; it is not an exception.
    """

    @abstractmethod
    async def issue_token(
        self,
        identity: AuthenticatedIdentity,
    ) -> Optional[AuthenticationToken]:
        """Issue a token for a verified identity."""
