from enum import Enum

from examiner_identity.domain.account.exceptions import InvalidRoleError


class Role(str, Enum):
    """Account roles."""

    ADMINISTRATOR = "Administrator"
    TUTOR = "Tutor"
    STUDENT = "Student"

    @classmethod
    def parse(cls, value: "str | Role") -> "Role":
        """Parse a role name into exactly one member.

        Matching is case-insensitive against member values and names;
        anything else (including numeric strings) is rejected.
        """
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            raise InvalidRoleError(str(value))

        candidate = value.strip().lower()
        for role in cls:
            if candidate in (role.value.lower(), role.name.lower()):
                return role

        raise InvalidRoleError(value)
