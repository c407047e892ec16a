# angra/integrations/identity_provider.py
"""
Firebase Authentication client.
- Privileged calls (token verification, user creation, revocation) go through the Admin SDK.
- Password flows (sign-in, recovery e-mail, password update) go through the
  Identity Toolkit REST API, the same endpoints the web SDK uses.

Every public coroutine returns an `AuthResult` / value; provider failures come back as
`AuthError` descriptors and are never raised to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from fastapi.concurrency import run_in_threadpool
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from angra.config import Settings
from angra.schemas.session import AuthResult, Principal, ProviderSession

logger = logging.getLogger(__name__)

GENERIC_RESET_MESSAGE = "If this e-mail is registered, a password reset link has been sent."

# Identity Toolkit error code -> message shown to the user
_ERROR_MESSAGES = {
    "EMAIL_NOT_FOUND": "Invalid e-mail or password",
    "INVALID_PASSWORD": "Invalid e-mail or password",
    "INVALID_LOGIN_CREDENTIALS": "Invalid e-mail or password",
    "USER_DISABLED": "This account has been disabled",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts, try again later",
    "EMAIL_EXISTS": "This e-mail is already registered",
    "WEAK_PASSWORD": "Password should be at least 6 characters",
    "INVALID_ID_TOKEN": "Session is no longer valid, sign in again",
    "TOKEN_EXPIRED": "Session expired, sign in again",
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN": "Sign in again before changing the password",
    "EXPIRED_OOB_CODE": "Recovery link expired",
    "INVALID_OOB_CODE": "Recovery link is invalid or was already used",
}


def _error_code(payload: Dict[str, Any]) -> str:
    """'WEAK_PASSWORD : Password should be ...' -> 'WEAK_PASSWORD'."""
    message = (payload.get("error") or {}).get("message") or "UNKNOWN_ERROR"
    return message.split(" : ")[0].strip()


def _json(resp: httpx.Response) -> Dict[str, Any]:
    try:
        return resp.json()
    except ValueError:
        return {}


def _failure(code: str) -> AuthResult:
    return AuthResult.failure(code.lower(), _ERROR_MESSAGES.get(code, code))


class IdentityProvider:
    """Thin wrapper over Firebase Authentication (Admin SDK + Identity Toolkit REST)."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._transport = transport

    def _endpoint(self, method: str) -> str:
        return f"{self._settings.identity_toolkit_url}/accounts:{method}?key={self._settings.firebase_web_api_key}"

    async def _post(self, method: str, payload: Dict[str, Any],
                    headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self._settings.identity_timeout, transport=self._transport) as client:
            return await client.post(self._endpoint(method), json=payload, headers=headers)

    # ------------------------------------------------------------------ #
    # Session
    # ------------------------------------------------------------------ #
    async def verify_session(self, id_token: str) -> Optional[Principal]:
        """
        Verifies a Firebase ID token (check_revoked=True).
        Invalid, expired or revoked tokens -> None.
        """
        try:
            decoded = await run_in_threadpool(firebase_auth.verify_id_token, id_token, check_revoked=True)
        except (firebase_auth.InvalidIdTokenError, firebase_auth.UserDisabledError, ValueError) as exc:
            logger.info("Rejected ID token: %s", exc)
            return None
        except firebase_exceptions.FirebaseError as exc:
            logger.warning("ID token verification failed: %s", exc)
            return None

        uid = decoded.get("uid") or decoded.get("user_id")
        if not uid:
            return None
        return Principal(uid=uid, email=decoded.get("email"), display_name=decoded.get("name"))

    async def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        payload = {"email": email, "password": password, "returnSecureToken": True}
        try:
            resp = await self._post("signInWithPassword", payload)
        except httpx.HTTPError as exc:
            logger.warning("signInWithPassword network error: %s", exc)
            return AuthResult.failure("network_error", f"Identity service unavailable: {exc}")

        data = _json(resp)
        if resp.status_code != 200:
            code = _error_code(data)
            logger.info("Firebase login failed: %s", code)
            return _failure(code)

        return AuthResult(session=ProviderSession(
            id_token=data["idToken"],
            refresh_token=data["refreshToken"],
            expires_in=int(data["expiresIn"]),
            principal=Principal(
                uid=data["localId"],
                email=data.get("email") or email,
                display_name=data.get("displayName") or None,
            ),
        ))

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthResult:
        """Creates the user with the Admin SDK, then signs in to obtain tokens."""
        try:
            await run_in_threadpool(
                firebase_auth.create_user, email=email, password=password, display_name=display_name
            )
        except firebase_auth.EmailAlreadyExistsError:
            return _failure("EMAIL_EXISTS")
        except ValueError as exc:
            # Admin SDK validates password length / e-mail format locally
            return AuthResult.failure("invalid_argument", str(exc))
        except firebase_exceptions.FirebaseError as exc:
            logger.warning("create_user failed: %s", exc)
            return AuthResult.failure("provider_error", str(exc))

        return await self.sign_in_with_password(email, password)

    async def sign_out(self, uid: str) -> None:
        """Revokes every refresh token of the user. Unknown users are ignored."""
        try:
            await run_in_threadpool(firebase_auth.revoke_refresh_tokens, uid)
        except firebase_auth.UserNotFoundError:
            pass
        except firebase_exceptions.FirebaseError as exc:
            logger.warning("revoke_refresh_tokens failed for %s: %s", uid, exc)

    # ------------------------------------------------------------------ #
    # Passwords
    # ------------------------------------------------------------------ #
    async def send_password_reset_email(self, email: str) -> AuthResult:
        """
        Triggers Firebase to SEND the password reset email.
        EMAIL_NOT_FOUND and other provider answers are reported as success (no user enumeration).
        """
        payload: Dict[str, Any] = {"requestType": "PASSWORD_RESET", "email": email}
        if self._settings.password_reset_redirect_url:
            payload["continueUrl"] = self._settings.password_reset_redirect_url
        headers = {"X-Firebase-Locale": self._settings.password_reset_locale}

        try:
            resp = await self._post("sendOobCode", payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.exception("sendOobCode failed")
            return AuthResult.failure("network_error", f"Password reset service error: {exc}")

        if resp.status_code != 200:
            logger.warning("sendOobCode response: %s %s", resp.status_code, resp.text)
        return AuthResult()

    async def update_password(self, new_password: str, id_token: Optional[str] = None,
                              oob_code: Optional[str] = None) -> AuthResult:
        """
        Changes the password either with a live session token (accounts:update)
        or with the code from a recovery e-mail (accounts:resetPassword).
        """
        if oob_code:
            method, payload = "resetPassword", {"oobCode": oob_code, "newPassword": new_password}
        elif id_token:
            method = "update"
            payload = {"idToken": id_token, "password": new_password, "returnSecureToken": True}
        else:
            return AuthResult.failure("not_authenticated", "A session or recovery code is required")

        try:
            resp = await self._post(method, payload)
        except httpx.HTTPError as exc:
            logger.warning("%s network error: %s", method, exc)
            return AuthResult.failure("network_error", f"Identity service unavailable: {exc}")

        data = _json(resp)
        if resp.status_code != 200:
            return _failure(_error_code(data))

        if method == "update" and data.get("idToken"):
            return AuthResult(session=ProviderSession(
                id_token=data["idToken"],
                refresh_token=data.get("refreshToken", ""),
                expires_in=int(data.get("expiresIn", 3600)),
                principal=Principal(uid=data["localId"], email=data.get("email")),
            ))
        return AuthResult()

    # ------------------------------------------------------------------ #
    # Administration
    # ------------------------------------------------------------------ #
    async def delete_user(self, uid: str) -> AuthResult:
        try:
            await run_in_threadpool(firebase_auth.delete_user, uid)
        except firebase_auth.UserNotFoundError:
            pass
        except firebase_exceptions.FirebaseError as exc:
            logger.warning("delete_user failed for %s: %s", uid, exc)
            return AuthResult.failure("provider_error", str(exc))
        return AuthResult()

    def list_principals(self) -> List[Principal]:
        """Every user of the project (blocking; used by the reconciliation job)."""
        return [
            Principal(uid=user.uid, email=user.email, display_name=user.display_name)
            for user in firebase_auth.list_users().iterate_all()
        ]
