"""Login email of an account.

The stripped, lower-cased address is the account's match key; every
lookup and every stored row uses that form.
"""

import re
from dataclasses import dataclass

from examiner_identity.domain.account.exceptions import InvalidEmailError

# RFC 5321 path limit; the accounts.email column is wider
MAX_EMAIL_LENGTH = 254

_LOCAL_PART = r"[a-z0-9._%+-]+"
_DOMAIN = r"[a-z0-9-]+(?:\.[a-z0-9-]+)*\.[a-z]{2,}"
_ADDRESS = re.compile(rf"{_LOCAL_PART}@{_DOMAIN}")


def normalize_email(raw: str) -> str:
    """Match key for ``raw``: surrounding whitespace removed, lower case."""
    return raw.strip().lower()


@dataclass(frozen=True)
class Email:
    """Validated account email, stored in match-key form.

    Two ``Email`` objects are equal when they refer to the same account,
    regardless of the case or padding they were typed with.
    """

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            msg = "Email must be a string"
            raise InvalidEmailError(msg)

        key = normalize_email(self.value)
        if not key:
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)
        if len(key) > MAX_EMAIL_LENGTH:
            msg = f"Email cannot exceed {MAX_EMAIL_LENGTH} characters"
            raise InvalidEmailError(msg)
        if _ADDRESS.fullmatch(key) is None:
            msg = f"Invalid email format: {self.value!r}"
            raise InvalidEmailError(msg)

        object.__setattr__(self, "value", key)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email({self.value!r})"
