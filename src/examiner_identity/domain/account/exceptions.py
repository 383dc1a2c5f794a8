"""Account domain exceptions.

Custom exceptions for the account domain, used for validation,
business rule violations and storage faults.
"""


class InvalidEmailError(ValueError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidRoleError(ValueError):
    """Raised when a role name does not match exactly one role."""

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Invalid role: {role!r}")


class EmailAlreadyExistsError(Exception):
    """Email already registered."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email already registered: {email}")


class VerificationCodeStateError(Exception):
    """Raised when a verification code is asked to leave a terminal state."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class StorageError(Exception):
    """Raised by gateway implementations when the store fails."""

    def __init__(self, message: str = "Credential store failure") -> None:
        self.message = message
        super().__init__(message)
