"""
Route surface — maps a path and the current session onto the view to show.

Unauthenticated sessions always get the login prompt. Authenticated sessions
get the root redirected to the activity list.
"""

import re
from typing import Optional

from pydantic import BaseModel

from fitness_client.models.session import Session

LOGIN = "login"
REDIRECT = "redirect"
ACTIVITY_LIST = "activity_list"
ACTIVITY_DETAIL = "activity_detail"
NOT_FOUND = "not_found"

LIST_PATH = "/activities"
_DETAIL_RE = re.compile(r"^/activities/(?P<activity_id>[^/]+)$")


class Route(BaseModel):
    name: str
    path: str
    activity_id: Optional[str] = None
    redirect_to: Optional[str] = None


def detail_path(activity_id: str) -> str:
    return f"{LIST_PATH}/{activity_id}"


def resolve_route(path: str, session: Session) -> Route:
    path = "/" + path.strip().strip("/")
    if not session.authenticated:
        return Route(name=LOGIN, path=path)
    if path == "/":
        return Route(name=REDIRECT, path=path, redirect_to=LIST_PATH)
    if path == LIST_PATH:
        return Route(name=ACTIVITY_LIST, path=path)
    match = _DETAIL_RE.match(path)
    if match:
        return Route(name=ACTIVITY_DETAIL, path=path, activity_id=match.group("activity_id"))
    return Route(name=NOT_FOUND, path=path)
