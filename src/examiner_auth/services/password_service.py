"""bcrypt-backed password hashing that enforces the password policy."""

import bcrypt

from examiner_auth.exceptions import WeakPasswordError
from examiner_auth.services.password_policy import is_valid_password

# bcrypt silently ignores input past this many bytes
BCRYPT_MAX_BYTES = 72


class PasswordHashingService:
    """Hashes and checks account passwords.

    Hashing refuses passwords that fail the policy or exceed bcrypt's
    input limit, so a stored hash always covers the whole password.

    Examples
    --------
    >>> hasher = PasswordHashingService(rounds=4)
    >>> stored = hasher.hash("strin(1)G")
    >>> hasher.verify("strin(1)G", stored), hasher.verify("string", stored)
    (True, False)
    """

    MAX_BYTES = BCRYPT_MAX_BYTES

    def __init__(self, rounds: int = 12):
        """
        Parameters
        ----------
        rounds
            bcrypt cost factor; each step doubles the hashing time.
            Tests use 4 (the bcrypt minimum).
        """
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        """Return a salted bcrypt hash of ``password``.

        Raises
        ------
        WeakPasswordError
            Empty, longer than 72 bytes, or missing a character class
        """
        self.validate_strength(password)
        digest = bcrypt.hashpw(
            password.encode("utf-8"),
            bcrypt.gensalt(rounds=self._rounds),
        )
        return digest.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Whether ``password`` matches ``password_hash``.

        Never raises: empty input or an unreadable hash simply does not match.
        """
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except (TypeError, ValueError):
            return False

    def validate_strength(self, password: str) -> None:
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            msg = f"Password cannot exceed {BCRYPT_MAX_BYTES} bytes"
            raise WeakPasswordError(msg)
        if not is_valid_password(password):
            msg = (
                "Password must contain an upper-case letter, a lower-case letter, "
                "a digit and a symbol"
            )
            raise WeakPasswordError(msg)
