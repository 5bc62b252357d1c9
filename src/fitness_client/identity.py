"""
Identity provider — OAuth2 authorization code flow with PKCE.

The rest of the package only depends on the IdentityProvider protocol:
current token and claims, a listener hook, and log in / log out actions.
PkceIdentityProvider is the concrete implementation against a Keycloak-style
token endpoint.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import secrets
from typing import Any, Callable, Optional, Protocol
from urllib.parse import urlencode

import httpx
from jose import JWTError, jwt

from fitness_client.config import AuthConfig, DEFAULT_TIMEOUT_S
from fitness_client.errors import AuthError, NetworkError

logger = logging.getLogger(__name__)

TokenListener = Callable[[Optional[str], Optional[dict[str, Any]]], None]


class IdentityProvider(Protocol):
    @property
    def token(self) -> Optional[str]: ...

    @property
    def token_claims(self) -> Optional[dict[str, Any]]: ...

    def add_listener(self, listener: TokenListener) -> Callable[[], None]: ...

    def log_in(self) -> Any: ...

    async def refresh(self) -> bool: ...

    def log_out(self) -> Any: ...


def generate_code_verifier() -> str:
    """PKCE code verifier, 64 url-safe characters."""
    return base64.urlsafe_b64encode(secrets.token_bytes(48)).decode("utf-8").rstrip("=")


def generate_code_challenge(verifier: str) -> str:
    """S256 code challenge for `verifier`."""
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("utf-8").rstrip("=")


def decode_claims(token: str) -> dict[str, Any]:
    """Read the claims of a JWT access token without verifying it.

    The backend gateway verifies signatures; the client only needs the
    identity for display and routing. Opaque tokens yield no claims.
    """
    try:
        return jwt.get_unverified_claims(token)
    except JWTError:
        logger.warning("Access token is not a JWT; no claims available")
        return {}


class PkceIdentityProvider:
    def __init__(
        self,
        config: Optional[AuthConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT_S,
    ):
        self._config = config or AuthConfig()
        self._transport = transport
        self._timeout = timeout
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._id_token: Optional[str] = None
        self._claims: Optional[dict[str, Any]] = None
        self._pending: Optional[tuple[str, str]] = None  # (state, code_verifier)
        self._login_url: Optional[str] = None
        self._listeners: list[TokenListener] = []

    @property
    def token(self) -> Optional[str]:
        return self._access_token

    @property
    def token_claims(self) -> Optional[dict[str, Any]]:
        return self._claims

    @property
    def pending_login_url(self) -> Optional[str]:
        """Authorization URL of the login started last, until it completes."""
        return self._login_url if self._pending else None

    @property
    def refresh_token(self) -> Optional[str]:
        return self._refresh_token

    def add_listener(self, listener: TokenListener) -> Callable[[], None]:
        """Add a token listener. Returns a cleanup function."""
        self._listeners.append(listener)

        def remove() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass
        return remove

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self._access_token, self._claims)

    def _set_tokens(self, payload: dict[str, Any]) -> None:
        access_token = payload.get("access_token")
        if not access_token:
            raise AuthError("Token response has no access_token")
        self._access_token = access_token
        self._refresh_token = payload.get("refresh_token", self._refresh_token)
        self._id_token = payload.get("id_token", self._id_token)
        self._claims = decode_claims(access_token)
        self._emit()

    def restore(self, access_token: str, refresh_token: Optional[str] = None) -> None:
        """Seed tokens persisted from an earlier login."""
        self._set_tokens({"access_token": access_token, "refresh_token": refresh_token})

    def log_in(self) -> str:
        """Start a login. Returns the authorization URL the user must open."""
        state = secrets.token_urlsafe(32)
        verifier = generate_code_verifier()
        self._pending = (state, verifier)
        params = {
            "response_type": "code",
            "client_id": self._config.client_id,
            "redirect_uri": self._config.redirect_uri,
            "scope": self._config.scope,
            "state": state,
            "code_challenge": generate_code_challenge(verifier),
            "code_challenge_method": "S256",
        }
        logger.info("Authorization flow started")
        self._login_url = f"{self._config.authorization_endpoint}?{urlencode(params)}"
        return self._login_url

    async def complete_login(self, code: str, state: str) -> None:
        """Exchange the authorization code returned to the redirect URI."""
        if self._pending is None:
            raise AuthError("No login in progress", code="login_not_started")
        expected_state, verifier = self._pending
        if not secrets.compare_digest(state, expected_state):
            raise AuthError("State mismatch in authorization response", code="state_mismatch")
        self._pending = None
        payload = await self._token_request({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self._config.redirect_uri,
            "code_verifier": verifier,
        })
        self._set_tokens(payload)

    async def refresh(self) -> bool:
        """Refresh the access token. Returns False when re-authentication was triggered."""
        if not self._refresh_token:
            logger.info("No refresh token; re-authentication required")
            self._config.on_refresh_token_expire(self)
            return False
        try:
            payload = await self._token_request({
                "grant_type": "refresh_token",
                "refresh_token": self._refresh_token,
            })
        except AuthError as e:
            if e.code != "invalid_grant":
                raise
            logger.info("Refresh token expired; re-authentication required")
            self._refresh_token = None
            self._config.on_refresh_token_expire(self)
            return False
        self._set_tokens(payload)
        return True

    def log_out(self) -> Optional[str]:
        """Forget all tokens. Returns the end-session URL when one is configured."""
        id_token = self._id_token
        self._access_token = None
        self._refresh_token = None
        self._id_token = None
        self._claims = None
        self._pending = None
        self._emit()
        if not self._config.logout_endpoint:
            return None
        params = {"client_id": self._config.client_id, "post_logout_redirect_uri": self._config.redirect_uri}
        if id_token:
            params["id_token_hint"] = id_token
        return f"{self._config.logout_endpoint}?{urlencode(params)}"

    async def _token_request(self, form: dict[str, str]) -> dict[str, Any]:
        form = {**form, "client_id": self._config.client_id}
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                resp = await client.post(self._config.token_endpoint, data=form)
            except httpx.TransportError as e:
                raise NetworkError(f"Token endpoint unreachable: {e}") from e
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = {}
            error = body.get("error", "token_error") if isinstance(body, dict) else "token_error"
            raise AuthError(f"Token request failed: HTTP {resp.status_code} ({error})", code=error)
        try:
            payload = resp.json()
        except ValueError as e:
            raise NetworkError("Token endpoint returned a non-JSON body") from e
        if not isinstance(payload, dict):
            raise NetworkError("Token endpoint returned an unexpected body")
        return payload
