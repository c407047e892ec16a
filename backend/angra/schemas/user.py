"""
# `angra/schemas/user.py` — Auth & user management schemas

| Model              | Used by                          |
|--------------------|----------------------------------|
| `LoginResponse`    | `POST /auth/login`, `/auth/register` |
| `MessageResponse`  | reset / update password, logout  |
| `ProfileOut`       | `/auth/me`, `/admin/users`       |
| `UsersOverview`    | `GET /admin/users`               |
| `RoleUpdateRequest`| `POST /api/update-role`          |
| `RoleChange`       | `PUT /admin/users/{uid}/role`    |
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from angra.core.roles import Role
from angra.schemas.session import Profile, SessionSnapshot


class LoginResponse(BaseModel):
    """Token bundle returned on successful sign-in / sign-up."""
    id_token:      str
    refresh_token: str
    expires_in:    int         # seconds
    user_id:       str
    session:       SessionSnapshot


class MessageResponse(BaseModel):
    message: str
    session: Optional[SessionSnapshot] = None


class ProfileOut(BaseModel):
    id: str = Field(..., description="Firebase UID")
    display_name: Optional[str] = None
    email: Optional[str] = None
    role: Role
    created_at: Optional[datetime] = None

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileOut":
        return cls(
            id=profile.uid,
            display_name=profile.display_name,
            email=profile.email,
            role=profile.role,
            created_at=profile.created_at,
        )


class UsersOverview(BaseModel):
    users: List[ProfileOut] = Field(default_factory=list)
    counts: Dict[str, int] = Field(default_factory=dict, description="Users per role")


class RoleUpdateRequest(BaseModel):
    """Body of the role-update endpoint; both fields are checked by hand (400, not 422)."""
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    role: Optional[str] = None


class RoleChange(BaseModel):
    role: Role
