"""
# `angra/routers/users.py` — User & role management (admin only)

### `GET /admin/users`
Profiles newest first, each with its role, plus the number of users per role.

### `PUT /admin/users/{uid}/role`
Body: `{"role": "admin" | "operator" | "client"}`. Upserts the profile row.

### `DELETE /admin/users/{uid}`
Deletes the profile row and the Firebase account (refresh tokens are revoked first).
An administrator cannot delete their own account (`400`).
"""
import logging
from collections import Counter

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from google.api_core.exceptions import GoogleAPIError

from angra.core.roles import Role
from angra.core.security import get_identity_provider, get_profile_repository, require_admin
from angra.integrations.identity_provider import IdentityProvider
from angra.repositories.profiles import ProfileRepository
from angra.schemas.session import SessionSnapshot
from angra.schemas.user import ProfileOut, RoleChange, UsersOverview

logger = logging.getLogger(__name__)

admin_router = APIRouter(prefix="/users", tags=["Admin Users"])


@admin_router.get("", response_model=UsersOverview)
async def list_users(
    _: SessionSnapshot = Depends(require_admin),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    rows = await run_in_threadpool(profiles.list)
    counts = Counter(p.role.value for p in rows)
    return UsersOverview(
        users=[ProfileOut.from_profile(p) for p in rows],
        counts={r.value: counts.get(r.value, 0) for r in Role},
    )


@admin_router.put("/{uid}/role", response_model=ProfileOut)
async def change_role(
    uid: str,
    body: RoleChange,
    _: SessionSnapshot = Depends(require_admin),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    try:
        profile = await run_in_threadpool(profiles.update_role, uid, body.role)
    except GoogleAPIError as exc:
        logger.exception("Role update failed for %s", uid)
        raise HTTPException(status_code=500, detail=str(exc))
    return ProfileOut.from_profile(profile)


@admin_router.delete("/{uid}")
async def delete_user(
    uid: str,
    session: SessionSnapshot = Depends(require_admin),
    profiles: ProfileRepository = Depends(get_profile_repository),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    if session.principal.uid == uid:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    existing = await run_in_threadpool(profiles.get, uid)
    if existing is None:
        raise HTTPException(status_code=404, detail="User not found")

    await identity.sign_out(uid)
    await run_in_threadpool(profiles.delete, uid)
    result = await identity.delete_user(uid)
    if not result.ok:
        raise HTTPException(status_code=500, detail=result.error.message)
    return {"detail": "User deleted"}
