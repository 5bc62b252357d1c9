"""Shared fakes: an in-memory activity backend and a scripted identity provider."""

import asyncio
import itertools
import json
from typing import Any, Callable, Optional

import httpx
import pytest
from jose import jwt

from fitness_client.activities import ActivitiesAPI
from fitness_client.transport.http import HttpClient

VALID_TYPES = {"RUNNING", "CYCLING", "SWIMMING", "YOGA", "WEIGHT_TRAINING", "HIIT"}


def make_jwt(sub: str = "user-1", **claims: Any) -> str:
    return jwt.encode({"sub": sub, **claims}, "test-secret", algorithm="HS256")


class FakeBackend:
    """Enough of the activity service to exercise the client end to end."""

    def __init__(self, token: str = "good-token"):
        self.token = token
        self.activities: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.fail_with: Optional[Exception] = None
        self._ids = itertools.count(1)

    def add(self, **fields: Any) -> dict[str, Any]:
        record = {
            "id": f"a{next(self._ids)}",
            "type": "RUNNING",
            "duration": 30,
            "caloriesBurned": 250,
            "createdAt": "2025-03-01T10:00:00",
            **fields,
        }
        self.activities.append(record)
        return record

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with
        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"error": "unauthorized"})
        path = request.url.path
        if path == "/api/activities" and request.method == "GET":
            return httpx.Response(200, json=self.activities)
        if path == "/api/activities" and request.method == "POST":
            body = json.loads(request.content)
            if body.get("type") not in VALID_TYPES or body.get("duration", -1) < 0:
                return httpx.Response(400, json={"error": "invalid activity"})
            record = self.add(**body)
            return httpx.Response(201, json=record)
        if path.startswith("/api/activities/") and request.method == "GET":
            activity_id = path.rsplit("/", 1)[1]
            for record in self.activities:
                if record["id"] == activity_id:
                    return httpx.Response(200, json=record)
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(405)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class FakeIdentityProvider:
    """Identity provider whose token notifications are driven by the test."""

    def __init__(self, token: Optional[str] = None, claims: Optional[dict[str, Any]] = None,
                 refreshed_token: Optional[str] = None):
        self.token = token
        self.token_claims = claims
        self.refresh_token = "refresh-1" if token else None
        # Token handed out by refresh(); None means the refresh token was rejected
        self.refreshed_token = refreshed_token
        self.logins = 0
        self.logouts = 0
        self.refreshes = 0
        self._listeners: list[Callable] = []

    def add_listener(self, listener):
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def emit(self, token: Optional[str], claims: Optional[dict[str, Any]] = None) -> None:
        self.token = token
        self.token_claims = claims
        for listener in list(self._listeners):
            listener(token, claims)

    def log_in(self) -> str:
        self.logins += 1
        return "https://idp.example/auth"

    async def refresh(self) -> bool:
        self.refreshes += 1
        if self.refreshed_token is None:
            return False
        self.refresh_token = "refresh-2"
        self.emit(self.refreshed_token, self.token_claims)
        return True

    def log_out(self) -> None:
        self.logouts += 1
        self.emit(None, None)


class ScriptedActivities:
    """ActivitiesAPI stand-in whose calls block until the test resolves them."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Optional[str]]] = []
        self._pending: dict[Any, asyncio.Future] = {}

    def _future(self, key: Any) -> asyncio.Future:
        fut = asyncio.get_running_loop().create_future()
        self._pending[key] = fut
        return fut

    async def list(self):
        self.calls.append(("list", None))
        return await self._future(("list", len(self.calls)))

    async def get(self, activity_id: str):
        self.calls.append(("get", activity_id))
        return await self._future(("get", activity_id))

    def resolve(self, key: Any, result: Any = None, error: Optional[Exception] = None) -> None:
        fut = self._pending.pop(key)
        if error is not None:
            fut.set_exception(error)
        else:
            fut.set_result(result)

    def pending_list_keys(self) -> list:
        return [k for k in self._pending if k[0] == "list"]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def token_holder() -> dict[str, Optional[str]]:
    return {"token": "good-token"}


@pytest.fixture
def activities_api(backend, token_holder) -> ActivitiesAPI:
    http = HttpClient(
        base_url="http://test",
        token_source=lambda: token_holder["token"],
        transport=backend.transport(),
    )
    return ActivitiesAPI(http)


async def settle() -> None:
    """Let pending tasks run up to their next suspension point."""
    for _ in range(5):
        await asyncio.sleep(0)
