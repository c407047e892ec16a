"""
# `angra/core/security.py` — Authentication & role guards

FastAPI dependencies that resolve the caller's session from the
`Authorization: Bearer <Firebase ID token>` header and gate routes by role.

## Flow
1. `get_session_resolver` builds one `SessionResolver` per request (FastAPI caches it, so
   the auth routes and the guards share the same instance).
2. `get_session` feeds the bearer token into the resolver (`INITIAL_SESSION`) and returns
   the resulting snapshot. No token or an invalid one → anonymous snapshot.
3. Guards:
   - `require_authenticated` → `401` without a signed-in principal.
   - `require_admin_or_operator` → `403 Access denied` for `client` or unresolved roles.
   - `require_admin` → `403` for anyone but `admin`.

> The role checks mirror what the back-office screens show, and every data route
> re-checks them here, on the server, before touching Firestore.
"""
from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from angra.config import get_db, get_firebase_app, get_settings
from angra.integrations.identity_provider import IdentityProvider
from angra.repositories.profiles import ProfileRepository
from angra.schemas.session import SessionSnapshot
from angra.services.session_resolver import SessionResolver

# HTTPBearer with auto_error=False: a missing header is handled by the guards below
oauth2_scheme = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_identity_provider() -> IdentityProvider:
    get_firebase_app()  # Admin SDK calls use the default app
    return IdentityProvider(get_settings())


def get_profile_repository(db=Depends(get_db)) -> ProfileRepository:
    return ProfileRepository(db)


def get_session_resolver(
    identity: IdentityProvider = Depends(get_identity_provider),
    profiles: ProfileRepository = Depends(get_profile_repository),
) -> SessionResolver:
    return SessionResolver(identity, profiles)


async def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
    resolver: SessionResolver = Depends(get_session_resolver),
) -> SessionSnapshot:
    token = credentials.credentials if credentials and credentials.credentials else None
    return await resolver.start(token)


def require_authenticated(session: SessionSnapshot = Depends(get_session)) -> SessionSnapshot:
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication credentials were not provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


def require_admin_or_operator(session: SessionSnapshot = Depends(require_authenticated)) -> SessionSnapshot:
    if not session.is_admin_or_operator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return session


def require_admin(session: SessionSnapshot = Depends(require_authenticated)) -> SessionSnapshot:
    if not session.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privilege required.",
        )
    return session
