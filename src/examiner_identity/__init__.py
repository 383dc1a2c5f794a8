"""Examiner Identity - credential and verification lifecycle.

Architecture:
    examiner_identity/
    ├── domain/            # Account aggregate, verification codes, gateway ABC
    ├── application/       # Lifecycle service, ports, results, DTOs
    ├── infrastructure/    # SQLAlchemy gateway, SMTP, JWT and code adapters
    └── presentation/cli/  # Typer CLI

Usage:
    from examiner_identity import CredentialLifecycleService, OperationResult
"""

from examiner_identity.application.results import OperationResult, ResultKind
from examiner_identity.application.services import CredentialLifecycleService

__all__ = [
    "CredentialLifecycleService",
    "OperationResult",
    "ResultKind",
]
