"""
angra/schemas/session.py
Principal, profile and session snapshot models shared by the resolver and the routers.
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from angra.core import roles
from angra.core.roles import Role


class Principal(BaseModel):
    """Identity issued by Firebase Authentication."""
    model_config = ConfigDict(frozen=True)

    uid: str = Field(..., description="Firebase UID")
    email: Optional[str] = Field(None, description="E-mail (if any)")
    display_name: Optional[str] = Field(None, description="Provider display name (if any)")


class Profile(BaseModel):
    """Row of the `profiles` collection."""
    uid: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    role: Role = Role.CLIENT
    created_at: Optional[datetime] = None


class SessionState(str, Enum):
    UNKNOWN = "unknown"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"
    # principal known, role lookup failed
    UNRESOLVED = "unresolved"


class AuthEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"


class SessionSnapshot(BaseModel):
    """Read-only view of who is logged in and what they can do."""
    model_config = ConfigDict(frozen=True)

    state: SessionState = SessionState.UNKNOWN
    principal: Optional[Principal] = None
    profile: Optional[Profile] = None
    role: Optional[Role] = None
    sequence: int = 0

    @computed_field
    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None and self.state in (
            SessionState.AUTHENTICATED, SessionState.UNRESOLVED
        )

    @computed_field
    @property
    def is_admin(self) -> bool:
        return roles.is_admin(self.role)

    @computed_field
    @property
    def is_admin_or_operator(self) -> bool:
        return roles.is_admin_or_operator(self.role)

    @classmethod
    def anonymous(cls, sequence: int) -> "SessionSnapshot":
        return cls(state=SessionState.ANONYMOUS, sequence=sequence)

    @classmethod
    def resolving(cls, principal: Principal, sequence: int) -> "SessionSnapshot":
        return cls(state=SessionState.RESOLVING, principal=principal, sequence=sequence)

    @classmethod
    def unresolved(cls, principal: Principal, sequence: int) -> "SessionSnapshot":
        return cls(state=SessionState.UNRESOLVED, principal=principal, sequence=sequence)

    @classmethod
    def authenticated(cls, principal: Principal, profile: Optional[Profile], sequence: int) -> "SessionSnapshot":
        # No profile row yet -> client
        role = profile.role if profile is not None else Role.CLIENT
        return cls(
            state=SessionState.AUTHENTICATED,
            principal=principal,
            profile=profile,
            role=role,
            sequence=sequence,
        )


class AuthError(BaseModel):
    """Error descriptor returned by identity operations instead of raising."""
    code: str
    message: str


class ProviderSession(BaseModel):
    """Token bundle issued by the identity provider."""
    id_token: str
    refresh_token: str
    expires_in: int  # seconds
    principal: Principal


class AuthResult(BaseModel):
    error: Optional[AuthError] = None
    session: Optional[ProviderSession] = None
    snapshot: Optional[SessionSnapshot] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, code: str, message: str) -> "AuthResult":
        return cls(error=AuthError(code=code, message=message))
