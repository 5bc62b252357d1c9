"""
Activities REST API — create, list and fetch recorded activities.
"""

from __future__ import annotations

import logging
from typing import Any, Union
from urllib.parse import quote

import pydantic

from fitness_client.errors import NetworkError, ValidationError
from fitness_client.models.activity import Activity, ActivityDraft
from fitness_client.transport.http import HttpClient

logger = logging.getLogger(__name__)


def _parse_activity(raw: Any) -> Activity:
    try:
        return Activity.model_validate(raw)
    except pydantic.ValidationError as e:
        raise NetworkError(f"Malformed activity in response: {e.error_count()} error(s)") from e


class ActivitiesAPI:
    def __init__(self, http: HttpClient):
        self._http = http

    async def create(self, draft: Union[ActivityDraft, dict[str, Any]]) -> Activity:
        """Record a new activity. AI annotations are filled in later by the server."""
        if not isinstance(draft, ActivityDraft):
            try:
                draft = ActivityDraft.model_validate(draft)
            except pydantic.ValidationError as e:
                raise ValidationError("Invalid activity", details={"errors": e.errors(include_url=False)}) from e
        created = _parse_activity(await self._http.post("/activities", draft.to_request()))
        logger.info(f"Created activity {created.id} ({created.type.value})")
        return created

    async def list(self) -> list[Activity]:
        """List the caller's activities in server order."""
        raw = await self._http.get("/activities")
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise NetworkError("Expected a list of activities")
        return [_parse_activity(item) for item in raw]

    async def get(self, activity_id: str) -> Activity:
        """Get a single activity, including any AI annotations."""
        if not activity_id:
            raise ValidationError("activity_id is required")
        return _parse_activity(await self._http.get(f"/activities/{quote(activity_id, safe='')}"))
