"""Password policy predicate."""

from typing import Optional


def is_valid_password(password: Optional[str]) -> bool:
    """Return True if the password mixes all four character classes.

    A valid password contains at least one upper-case letter, one
    lower-case letter, one digit and one character that is neither a
    letter nor a digit. Length is left to request validation upstream.

    Examples
    --------
    >>> is_valid_password("strin(1)G")
    True
    >>> is_valid_password("string")
    False
    """
    if not password:
        return False

    return (
        any(ch.isupper() for ch in password)
        and any(ch.islower() for ch in password)
        and any(ch.isdigit() for ch in password)
        and any(not ch.isalnum() for ch in password)
    )
