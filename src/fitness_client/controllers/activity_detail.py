"""
Activity detail controller — fetch lifecycle for one activity, keyed by route id.
"""

from typing import Optional

from fitness_client.activities import ActivitiesAPI
from fitness_client.controllers.base import FetchController
from fitness_client.models.view_state import Loaded, Loading


class ActivityDetailController(FetchController):
    def __init__(self, activities: ActivitiesAPI):
        super().__init__()
        self._activities = activities
        self._activity_id: Optional[str] = None

    @property
    def activity_id(self) -> Optional[str]:
        return self._activity_id

    async def activate(self, activity_id: str) -> None:
        """Show `activity_id`. A new id supersedes any fetch for the previous one;
        the same id is refetched only after a failure or deactivate()."""
        if activity_id == self._activity_id and isinstance(self.state, (Loading, Loaded)):
            return
        await self._fetch(activity_id)

    async def reload(self) -> None:
        if self._activity_id is None or self.loading:
            return
        await self._fetch(self._activity_id)

    def deactivate(self) -> None:
        self._activity_id = None
        self._invalidate()

    async def _fetch(self, activity_id: str) -> None:
        self._activity_id = activity_id
        await self._run_fetch(f"activity {activity_id}", lambda: self._activities.get(activity_id))
