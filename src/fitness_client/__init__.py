"""
fitness-client — Python client for the fitness activity tracker.

Keeps an OAuth2 (PKCE) session in sync with a local store and drives the
fetch lifecycle of the activity list and activity detail views.
"""

from fitness_client.client import FitnessApp
from fitness_client.activities import ActivitiesAPI
from fitness_client.session_store import SessionStore
from fitness_client.token_bridge import TokenBridge
from fitness_client.identity import IdentityProvider, PkceIdentityProvider
from fitness_client.controllers import ActivityDetailController, ActivityListController
from fitness_client.errors import (
    FitnessClientError,
    UnauthorizedError,
    ValidationError,
    NotFoundError,
    NetworkError,
    AuthError,
)
from fitness_client.models.activity import Activity, ActivityDraft, ActivityType

__version__ = "0.1.0"
__all__ = [
    "FitnessApp",
    "ActivitiesAPI",
    "SessionStore",
    "TokenBridge",
    "IdentityProvider",
    "PkceIdentityProvider",
    "ActivityDetailController",
    "ActivityListController",
    "FitnessClientError",
    "UnauthorizedError",
    "ValidationError",
    "NotFoundError",
    "NetworkError",
    "AuthError",
    "Activity",
    "ActivityDraft",
    "ActivityType",
]
