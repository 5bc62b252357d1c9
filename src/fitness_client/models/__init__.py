from fitness_client.models.activity import (
    Activity,
    ActivityDraft,
    ActivityType,
    AnnotationSection,
    Annotations,
)
from fitness_client.models.session import Session
from fitness_client.models.view_state import FetchState, Failed, Idle, Loaded, Loading

__all__ = [
    "Activity",
    "ActivityDraft",
    "ActivityType",
    "AnnotationSection",
    "Annotations",
    "Session",
    "FetchState",
    "Failed",
    "Idle",
    "Loaded",
    "Loading",
]
