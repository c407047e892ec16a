"""
# angra/routers/auth.py — Authentication

## General
Sign-in, sign-up, password recovery and sign-out. Firebase Authentication holds the
credentials; the `profiles` collection holds display name and role. Every route goes
through the request's `SessionResolver`, so the response always carries the freshly
resolved session snapshot.

---

## Endpoints

### POST /auth/login
Form: `email`, `password`.
1. Firebase REST `signInWithPassword`.
2. Role is looked up fresh from `profiles/{uid}`.
3. Returns id_token, refresh_token, expires_in, user_id and the session.
4. Invalid credentials → 401, session stays anonymous.

### POST /auth/register
Form: `name`, `email`, `password` (min. 6).
1. Firebase user is created with the Admin SDK.
2. `profiles/{uid}` is written with role `client`.
3. Tokens + `client` session are returned (201).
4. Duplicate e-mail / weak password → 400.

### POST /auth/reset-password
Query: `email`. Always returns the same generic message (no user enumeration).
502 only when the identity service cannot be reached.

### POST /auth/update-password
Form: `new_password`, optional `oob_code` (from the recovery e-mail).
Without `oob_code` a Bearer session is required. Expired/invalid token → 400.

### POST /auth/logout
Revokes refresh tokens when a session exists. Always 200 (idempotent).

### GET /auth/session
Current session snapshot (anonymous without a token).

### PATCH /auth/me
Form: `display_name`. Owner updates their own display name.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from google.api_core.exceptions import GoogleAPIError
from pydantic import EmailStr

from angra.core.security import (
    get_profile_repository,
    get_session,
    get_session_resolver,
    require_authenticated,
)
from angra.integrations.identity_provider import GENERIC_RESET_MESSAGE
from angra.repositories.profiles import ProfileRepository
from angra.schemas.session import AuthResult, SessionSnapshot
from angra.schemas.user import LoginResponse, MessageResponse, ProfileOut
from angra.services.session_resolver import SessionResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _login_response(result: AuthResult) -> LoginResponse:
    return LoginResponse(
        id_token=result.session.id_token,
        refresh_token=result.session.refresh_token,
        expires_in=result.session.expires_in,
        user_id=result.session.principal.uid,
        session=result.snapshot,
    )


@router.post("/login", response_model=LoginResponse, summary="E-mail + password sign-in")
async def login(
    email: EmailStr = Form(..., description="E-mail"),
    password: str = Form(..., min_length=1, description="Password"),
    resolver: SessionResolver = Depends(get_session_resolver),
):
    result = await resolver.sign_in(email, password)
    if not result.ok:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail=result.error.message)
    return _login_response(result)


@router.post(
    "/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign-up: creates the Firebase user and a `client` profile",
)
async def register(
    name: str = Form(..., min_length=1, description="Full name"),
    email: EmailStr = Form(..., description="E-mail"),
    password: str = Form(..., min_length=6, description="Password (min 6 characters)"),
    resolver: SessionResolver = Depends(get_session_resolver),
):
    result = await resolver.sign_up(email, password, name)
    if not result.ok:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=result.error.message)
    return _login_response(result)


@router.post("/reset-password", response_model=MessageResponse, summary="Request password reset")
async def request_password_reset(
    email: str = Query(..., min_length=5, max_length=254, description="User email"),
    resolver: SessionResolver = Depends(get_session_resolver),
):
    result = await resolver.reset_password(email)
    if not result.ok:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error.message)
    return MessageResponse(message=GENERIC_RESET_MESSAGE)


@router.post("/update-password", response_model=MessageResponse, summary="Set a new password")
async def update_password(
    new_password: str = Form(..., min_length=6, description="New password (min 6 characters)"),
    oob_code: Optional[str] = Form(None, description="Code from the recovery e-mail"),
    session: SessionSnapshot = Depends(get_session),
    resolver: SessionResolver = Depends(get_session_resolver),
):
    if not oob_code and not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication credentials were not provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    result = await resolver.update_password(new_password, oob_code=oob_code)
    if not result.ok:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=result.error.message)
    return MessageResponse(message="Password updated", session=result.snapshot)


@router.post("/logout", response_model=MessageResponse, summary="Sign out (revokes refresh tokens)")
async def logout(
    session: SessionSnapshot = Depends(get_session),
    resolver: SessionResolver = Depends(get_session_resolver),
):
    """
    Revokes the refresh tokens on every device when the caller is signed in.
    The client should also call signOut() in the Firebase SDK.
    """
    snapshot = await resolver.sign_out()
    return MessageResponse(message="Logged out", session=snapshot)


@router.get("/session", response_model=SessionSnapshot, summary="Current session")
async def current_session(session: SessionSnapshot = Depends(get_session)):
    return session


@router.patch("/me", response_model=ProfileOut, summary="Update own display name")
async def update_me(
    display_name: str = Form(..., min_length=1, max_length=100),
    session: SessionSnapshot = Depends(require_authenticated),
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    try:
        profile = await run_in_threadpool(
            profiles.update_display_name, session.principal.uid, display_name.strip()
        )
    except GoogleAPIError as exc:
        logger.exception("Display name update failed")
        raise HTTPException(status_code=500, detail=str(exc))
    return ProfileOut.from_profile(profile)
