"""
# `angra/services/session_resolver.py` — Session/Role Resolver

Keeps one snapshot of "who is logged in and what can they do" and is its only writer.

## States
`unknown` (initial) → `resolving` → `authenticated(role)` | `anonymous` | `unresolved`.
Every auth event (`handle_auth_event`) goes back through `resolving`; the profile row is
read fresh each time, nothing is cached.

## Ordering
Each resolution gets the next sequence number and runs as its own task. Starting a new
resolution cancels the one in flight, and a finished lookup is published only when its
sequence is still the latest, so a slow lookup can never overwrite a newer result.

## Failures
- No profile row → role `client`.
- Store error during lookup → `unresolved` (no role), logged; the session is not signed out.
- Identity operations return `AuthResult` with an `AuthError`; they never raise.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from google.api_core.exceptions import GoogleAPIError

from angra.integrations.identity_provider import IdentityProvider
from angra.repositories.profiles import ProfileRepository
from angra.schemas.session import (
    AuthEvent,
    AuthResult,
    Principal,
    SessionSnapshot,
)

logger = logging.getLogger(__name__)

Listener = Callable[[SessionSnapshot], None]


class SessionResolver:
    def __init__(self, identity: IdentityProvider, profiles: ProfileRepository):
        self._identity = identity
        self._profiles = profiles
        self._snapshot = SessionSnapshot()
        self._sequence = 0
        self._pending: Optional[asyncio.Future] = None
        self._listeners: List[Listener] = []
        self._id_token: Optional[str] = None

    @property
    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    @property
    def id_token(self) -> Optional[str]:
        return self._id_token

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers a reader; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, snapshot: SessionSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)

    # ------------------------------------------------------------------ #
    # Resolution
    # ------------------------------------------------------------------ #
    async def start(self, id_token: Optional[str]) -> SessionSnapshot:
        """Loads the current session from a bearer token (INITIAL_SESSION)."""
        self._id_token = id_token
        principal = await self._identity.verify_session(id_token) if id_token else None
        if principal is None:
            self._id_token = None
        return await self.handle_auth_event(AuthEvent.INITIAL_SESSION, principal)

    async def handle_auth_event(self, event: AuthEvent, principal: Optional[Principal]) -> SessionSnapshot:
        self._sequence += 1
        sequence = self._sequence
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

        if event is AuthEvent.SIGNED_OUT or principal is None:
            self._publish(SessionSnapshot.anonymous(sequence))
            return self._snapshot

        self._publish(SessionSnapshot.resolving(principal, sequence))
        task = asyncio.ensure_future(self._lookup(principal, sequence))
        self._pending = task
        try:
            resolved = await task
        except asyncio.CancelledError:
            if sequence == self._sequence:
                raise
            # superseded by a newer event
            return self._snapshot

        if sequence == self._sequence:
            self._publish(resolved)
        return self._snapshot

    async def _lookup(self, principal: Principal, sequence: int) -> SessionSnapshot:
        try:
            profile = await asyncio.to_thread(self._profiles.get, principal.uid)
        except GoogleAPIError:
            logger.exception("Profile lookup failed for %s", principal.uid)
            return SessionSnapshot.unresolved(principal, sequence)
        return SessionSnapshot.authenticated(principal, profile, sequence)

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #
    def _with_snapshot(self, result: AuthResult) -> AuthResult:
        return result.model_copy(update={"snapshot": self._snapshot})

    async def sign_in(self, email: str, password: str) -> AuthResult:
        if not email or not password:
            return self._with_snapshot(AuthResult.failure("missing_credentials", "E-mail and password are required"))

        result = await self._identity.sign_in_with_password(email, password)
        if not result.ok:
            return self._with_snapshot(result)

        self._id_token = result.session.id_token
        await self.handle_auth_event(AuthEvent.SIGNED_IN, result.session.principal)
        return self._with_snapshot(result)

    async def sign_up(self, email: str, password: str, name: str) -> AuthResult:
        """
        Creates the principal, then its `client` profile row.
        A failed profile insert does not undo the principal: the session still resolves to
        `client` and the reconciliation job writes the missing row later.
        """
        if not email or not password or not (name or "").strip():
            return self._with_snapshot(
                AuthResult.failure("missing_credentials", "Name, e-mail and password are required")
            )

        result = await self._identity.sign_up(email, password, name.strip())
        if not result.ok:
            return self._with_snapshot(result)

        principal = result.session.principal
        try:
            await asyncio.to_thread(self._profiles.create, principal.uid, name.strip(), principal.email)
        except GoogleAPIError:
            logger.exception("Profile insert failed after sign-up of %s; principal kept", principal.uid)

        self._id_token = result.session.id_token
        await self.handle_auth_event(AuthEvent.SIGNED_IN, principal)
        return self._with_snapshot(result)

    async def reset_password(self, email: str) -> AuthResult:
        if not email:
            return self._with_snapshot(AuthResult.failure("missing_email", "E-mail is required"))
        return self._with_snapshot(await self._identity.send_password_reset_email(email))

    async def update_password(self, new_password: str, oob_code: Optional[str] = None) -> AuthResult:
        if not new_password:
            return self._with_snapshot(AuthResult.failure("missing_password", "New password is required"))

        result = await self._identity.update_password(
            new_password, id_token=None if oob_code else self._id_token, oob_code=oob_code
        )
        if not result.ok:
            return self._with_snapshot(result)

        if result.session is not None:
            # Firebase rotates tokens on password change
            self._id_token = result.session.id_token
            principal = self._snapshot.principal or result.session.principal
            await self.handle_auth_event(AuthEvent.USER_UPDATED, principal)
        return self._with_snapshot(result)

    async def sign_out(self) -> SessionSnapshot:
        """Always ends anonymous; calling it again is a no-op."""
        principal = self._snapshot.principal
        if principal is not None:
            await self._identity.sign_out(principal.uid)
        self._id_token = None
        return await self.handle_auth_event(AuthEvent.SIGNED_OUT, None)
