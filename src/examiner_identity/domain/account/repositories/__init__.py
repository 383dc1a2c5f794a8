from examiner_identity.domain.account.repositories.credential_store_gateway import (
    CredentialStoreGateway,
)

__all__ = ["CredentialStoreGateway"]
