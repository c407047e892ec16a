"""
# angra/routers/role_update.py — Administrative role update

### POST /api/update-role
Body (JSON): `{"userId": "<uid>", "role": "admin" | "operator" | "client"}`

| Case                                   | Response                          |
|----------------------------------------|-----------------------------------|
| any other method                       | `405`                             |
| `userId` or `role` missing             | `400`, nothing written            |
| unknown `role` value                   | `400`, nothing written            |
| success                                | `200 {"data": <profile row>}`     |
| Firestore failure                      | `500` with the provider message   |

Only callers whose session resolves to `admin` may use it; the write itself runs with
the service account.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from google.api_core.exceptions import GoogleAPIError

from angra.core.roles import Role, parse_role
from angra.core.security import get_profile_repository, require_admin
from angra.repositories.profiles import ProfileRepository
from angra.schemas.user import ProfileOut, RoleUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Admin Roles"], dependencies=[Depends(require_admin)])


@router.post("/update-role", summary="Update a user's role")
async def update_role(
    payload: Optional[RoleUpdateRequest] = None,
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    if payload is None or not payload.user_id or not payload.role:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="userId and role are required")

    role = parse_role(payload.role)
    if role is None:
        allowed = ", ".join(r.value for r in Role)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"role must be one of: {allowed}")

    try:
        profile = await run_in_threadpool(profiles.update_role, payload.user_id, role)
    except GoogleAPIError as exc:
        logger.exception("Role update failed for %s", payload.user_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))

    logger.info("Role of %s set to %s", payload.user_id, role.value)
    return {"data": ProfileOut.from_profile(profile).model_dump(mode="json")}
