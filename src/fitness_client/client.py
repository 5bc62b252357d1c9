"""
FitnessApp — composition root of the fitness client.

Everything is constructed explicitly and held by the instance, so several
apps (or test fakes) can coexist in one process.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Union

import httpx

from fitness_client.activities import ActivitiesAPI
from fitness_client.config import ClientConfig
from fitness_client.controllers.activity_detail import ActivityDetailController
from fitness_client.controllers.activity_list import ActivityListController
from fitness_client.identity import IdentityProvider, PkceIdentityProvider
from fitness_client.models.activity import Activity, ActivityDraft
from fitness_client.models.session import Session
from fitness_client.routes import ACTIVITY_DETAIL, ACTIVITY_LIST, REDIRECT, Route, resolve_route
from fitness_client.session_store import SessionStore
from fitness_client.token_bridge import TokenBridge
from fitness_client.transport.http import HttpClient

logger = logging.getLogger(__name__)


class FitnessApp:
    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        identity: Optional[IdentityProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        activities: Optional[ActivitiesAPI] = None,
    ):
        self.config = config or ClientConfig()
        self.store = SessionStore()
        self.identity = identity or PkceIdentityProvider(self.config.auth, timeout=self.config.timeout_s)

        self.http = HttpClient(
            base_url=self.config.base_url,
            token_source=lambda: self.store.token,
            timeout=self.config.timeout_s,
            transport=transport,
        )
        self.activities = activities or ActivitiesAPI(self.http)
        self.activity_list = ActivityListController(self.activities)
        self.activity_detail = ActivityDetailController(self.activities)

        self._user_id: Optional[str] = None
        self._remounts: set[asyncio.Task] = set()
        self._unsubscribe = self.store.subscribe(self._on_session)
        self.bridge = TokenBridge(self.store)
        self.bridge.attach(self.identity)

    @property
    def session(self) -> Session:
        return self.store.snapshot

    def _on_session(self, session: Session) -> None:
        user_id = session.user_id if session.authenticated else None
        if session.authenticated and user_id == self._user_id:
            # Token renewed for the same user; fetched data stays valid
            return
        self._user_id = user_id
        list_mounted = self.activity_list.mounted
        detail_id = self.activity_detail.activity_id
        # A different user (or none) invalidates everything fetched so far
        self.activity_list.deactivate()
        self.activity_detail.deactivate()
        if session.authenticated:
            self._remount(list_mounted, detail_id)

    def _remount(self, list_mounted: bool, detail_id: Optional[str]) -> None:
        """Reload the views that were showing when the user changed."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        pending = []
        if list_mounted:
            pending.append(self.activity_list.activate())
        if detail_id is not None:
            pending.append(self.activity_detail.activate(detail_id))
        for coro in pending:
            task = loop.create_task(coro)
            self._remounts.add(task)
            task.add_done_callback(self._remounts.discard)

    async def navigate(self, path: str) -> Route:
        """Resolve `path` and start the fetch its view needs."""
        route = resolve_route(path, self.session)
        if route.name == REDIRECT:
            return await self.navigate(route.redirect_to)  # type: ignore[arg-type]
        if route.name == ACTIVITY_LIST:
            await self.activity_list.activate()
        elif route.name == ACTIVITY_DETAIL:
            await self.activity_detail.activate(route.activity_id)  # type: ignore[arg-type]
        return route

    async def add_activity(self, draft: Union[ActivityDraft, dict[str, Any]]) -> Activity:
        """Create an activity, then refresh the list so it shows up.

        Creation errors propagate to the caller; the form shows them inline.
        """
        created = await self.activities.create(draft)
        await self.activity_list.refresh()
        return created

    def log_in(self) -> Any:
        return self.identity.log_in()

    async def refresh_session(self) -> bool:
        """Renew the access token with the refresh token.

        Returns False, and logs the session out, when the identity provider
        needs a fresh login instead.
        """
        if await self.identity.refresh():
            return True
        self.store.logout()
        return False

    def log_out(self) -> Any:
        result = self.identity.log_out()
        self.store.logout()
        return result

    async def close(self) -> None:
        for task in list(self._remounts):
            task.cancel()
        self.bridge.detach()
        self._unsubscribe()
        await self.http.close()
