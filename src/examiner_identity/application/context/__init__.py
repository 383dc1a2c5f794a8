from examiner_identity.application.context.requester_context import (
    AuthenticatedIdentity,
    RequesterContext,
)

__all__ = ["AuthenticatedIdentity", "RequesterContext"]
