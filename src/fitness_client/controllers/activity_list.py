"""
Activity list controller — fetch lifecycle for the collection view.
"""

import logging

from fitness_client.activities import ActivitiesAPI
from fitness_client.controllers.base import FetchController

logger = logging.getLogger(__name__)


class ActivityListController(FetchController):
    """Idle -> Loading -> Loaded(list[Activity]) | Failed(error).

    An empty list is a Loaded state, not a failure.
    """

    def __init__(self, activities: ActivitiesAPI):
        super().__init__()
        self._activities = activities
        self._activated = False

    @property
    def mounted(self) -> bool:
        return self._activated

    async def activate(self) -> None:
        """Mount: load once. Later activations do nothing until deactivate()."""
        if self._activated:
            return
        self._activated = True
        await self._run_fetch("activities", self._activities.list)

    async def refresh(self) -> None:
        """Reload the list. Does nothing while a load is already running."""
        if self.loading:
            logger.debug("Refresh skipped; list already loading")
            return
        self._activated = True
        await self._run_fetch("activities", self._activities.list)

    def deactivate(self) -> None:
        self._activated = False
        self._invalidate()
