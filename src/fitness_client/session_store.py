"""
Session store — the single place the authentication state lives.

Writes go through apply_token() and logout() only. Subscribers are called
synchronously, in registration order, after each effective change.
"""

import logging
from typing import Any, Callable, Optional

from fitness_client.models.session import Session

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session], None]


class SessionStore:
    def __init__(self) -> None:
        self._session = Session()
        self._listeners: list[SessionListener] = []

    @property
    def snapshot(self) -> Session:
        return self._session

    @property
    def token(self) -> Optional[str]:
        return self._session.token

    @property
    def user(self) -> Optional[dict[str, Any]]:
        return self._session.user

    @property
    def auth_ready(self) -> bool:
        return self._session.auth_ready

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Add a listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass
        return unsubscribe

    def apply_token(self, token: str, user: Optional[dict[str, Any]]) -> bool:
        """Store a token and its claims. Returns False when the token is unchanged."""
        if not token:
            raise ValueError("apply_token requires a non-empty token")
        if token == self._session.token:
            logger.debug("Token unchanged; skipping session update")
            return False
        self._replace(Session(token=token, user=dict(user or {}), auth_ready=True))
        logger.info(f"Session updated for {self._session.display_name}")
        return True

    def logout(self) -> None:
        if self._session.token is None and not self._session.auth_ready:
            return
        self._replace(Session())
        logger.info("Session cleared")

    def _replace(self, session: Session) -> None:
        self._session = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception("Session listener failed")
