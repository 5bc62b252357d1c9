"""
Token bridge — forwards identity provider token notifications into the session store.

The provider may re-emit the same token any number of times; deduplication
happens in SessionStore.apply_token, not here.
"""

import logging
from typing import Any, Optional

from fitness_client.identity import IdentityProvider
from fitness_client.session_store import SessionStore

logger = logging.getLogger(__name__)


class TokenBridge:
    def __init__(self, store: SessionStore):
        self._store = store
        self._remove_listener = None

    def on_token(self, token: Optional[str], claims: Optional[dict[str, Any]]) -> None:
        if not token:
            logger.debug("No token in notification; session left as is")
            return
        self._store.apply_token(token, claims)

    def attach(self, provider: IdentityProvider) -> None:
        """Listen to `provider` and sync its current token right away."""
        self.detach()
        self._remove_listener = provider.add_listener(self.on_token)
        self.on_token(provider.token, provider.token_claims)

    def detach(self) -> None:
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
