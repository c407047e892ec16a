# angra/core/roles.py
from enum import Enum
from typing import Any, Optional


class Role(str, Enum):
    ADMIN = "admin"
    OPERATOR = "operator"
    CLIENT = "client"


_PRIVILEGES = {
    Role.ADMIN: (True, True),          # (is_admin, is_admin_or_operator)
    Role.OPERATOR: (False, True),
    Role.CLIENT: (False, False),
}
if set(_PRIVILEGES) != set(Role):
    raise RuntimeError("Every Role needs an entry in _PRIVILEGES")


def parse_role(value: Any) -> Optional[Role]:
    """Strict variant for request payloads: None when the value is not a known role."""
    if isinstance(value, Role):
        return value
    if isinstance(value, str):
        try:
            return Role(value.strip().lower())
        except ValueError:
            return None
    return None


def coerce_role(value: Any) -> Role:
    """
    Stored role value -> Role.
    Unknown, empty or missing values always map to `client`.
    """
    return parse_role(value) or Role.CLIENT


def is_admin(role: Optional[Role]) -> bool:
    if role is None:
        return False
    return _PRIVILEGES[role][0]


def is_admin_or_operator(role: Optional[Role]) -> bool:
    if role is None:
        return False
    return _PRIVILEGES[role][1]
