"""
Integration tests against a running activity backend.

Requires environment variables:
  FITNESS_ACCESS_TOKEN  — valid access token from the identity provider
  FITNESS_BASE_URL      — (optional) defaults to http://localhost:8080

Run: FITNESS_INTEGRATION=1 pytest tests/integration/ -v
"""

import os

import pytest

from fitness_client import FitnessApp, PkceIdentityProvider
from fitness_client.config import ClientConfig
from fitness_client.models.view_state import Loaded

SKIP = not os.environ.get("FITNESS_INTEGRATION")
ACCESS_TOKEN = os.environ.get("FITNESS_ACCESS_TOKEN", "")
BASE_URL = os.environ.get("FITNESS_BASE_URL", "http://localhost:8080")

pytestmark = pytest.mark.skipif(SKIP, reason="FITNESS_INTEGRATION not set")


def make_app() -> FitnessApp:
    identity = PkceIdentityProvider()
    identity.restore(ACCESS_TOKEN)
    return FitnessApp(config=ClientConfig(base_url=BASE_URL), identity=identity)


class TestActivities:

    @pytest.mark.asyncio
    async def test_create_list_get(self):
        app = make_app()
        created = await app.add_activity({"type": "RUNNING", "duration": 30, "calories_burned": 250})
        assert created.id

        state = app.activity_list.state
        assert isinstance(state, Loaded)
        assert created.id in [a.id for a in state.payload]

        await app.navigate(f"/activities/{created.id}")
        assert app.activity_detail.state.payload.id == created.id
        await app.close()

    @pytest.mark.asyncio
    async def test_missing_activity_is_not_found(self):
        app = make_app()
        await app.navigate("/activities/does-not-exist")
        assert app.activity_detail.state.is_not_found
        await app.close()
