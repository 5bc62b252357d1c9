"""
User-visible messages for controller view states.

status_message() returns None when the payload itself should be shown.
"""

from typing import Optional

from fitness_client.models.view_state import FetchState, Failed, Idle, Loaded, Loading

LOADING_MESSAGE = "Loading..."
EMPTY_LIST_MESSAGE = "No activities recorded yet. Start tracking your fitness journey by adding your first activity!"
NOT_FOUND_MESSAGE = "Activity not found"
LOGIN_MESSAGE = "Please log in to see your activities"
PAGE_NOT_FOUND_MESSAGE = "Page not found"

FAILURE_MESSAGES = {
    "unauthorized": "Your session has expired. Please log in again.",
    "validation_error": "The request was rejected by the server.",
    "network_error": "Could not reach the activity service. Try again.",
    "not_found": NOT_FOUND_MESSAGE,
}
GENERIC_FAILURE_MESSAGE = "Something went wrong. Try again."


def failure_message(state: Failed) -> str:
    return FAILURE_MESSAGES.get(state.kind, GENERIC_FAILURE_MESSAGE)


def status_message(state: FetchState, empty_message: str = EMPTY_LIST_MESSAGE) -> Optional[str]:
    if isinstance(state, (Idle, Loading)):
        return LOADING_MESSAGE
    if isinstance(state, Failed):
        return failure_message(state)
    if isinstance(state, Loaded) and state.is_empty:
        return empty_message
    return None
