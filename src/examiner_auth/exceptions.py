"""Errors raised by examiner_auth.

The lifecycle service turns these into failed result envelopes; they
never reach CLI users as tracebacks.
"""


class AuthError(Exception):
    """Root of the examiner_auth error hierarchy."""

    default_message = "Authentication error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidTokenError(AuthError):
    """Access token failed signature, expiry or claim checks."""

    default_message = "Invalid or expired token"


class WeakPasswordError(AuthError):
    """Password rejected by the policy or the bcrypt length limit."""

    default_message = "Password does not meet requirements"


class CodeGenerationError(AuthError):
    """No acceptable verification code within the attempt budget."""

    default_message = "Unable to generate a verification code"
