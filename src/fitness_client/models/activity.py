"""
Activity models — wire format of the backend activity API (camelCase).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

MetricValue = Union[int, float, str]

RECOMMENDATION_FALLBACK = "No AI analysis available yet"
IMPROVEMENTS_FALLBACK = "No improvement suggestions available"
SUGGESTIONS_FALLBACK = "No exercise suggestions available"
SAFETY_FALLBACK = "No specific safety guidelines available"


class ActivityType(str, Enum):
    RUNNING = "RUNNING"
    CYCLING = "CYCLING"
    SWIMMING = "SWIMMING"
    YOGA = "YOGA"
    WEIGHT_TRAINING = "WEIGHT_TRAINING"
    HIIT = "HIIT"

    @property
    def label(self) -> str:
        if self is ActivityType.HIIT:
            return "HIIT"
        return self.value.replace("_", " ").title()


class ActivityDraft(BaseModel):
    """Body of POST /activities."""
    type: ActivityType
    duration: float = Field(ge=0)
    calories_burned: float = Field(ge=0)
    additional_metrics: Optional[dict[str, MetricValue]] = None
    start_time: Optional[datetime] = None

    model_config = {"populate_by_name": True, "alias_generator": to_camel}

    def to_request(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class AnnotationSection(BaseModel):
    """One rendered block of AI feedback. `lines` is never empty."""
    title: str
    lines: list[str]
    is_fallback: bool = False


class Annotations(BaseModel):
    recommendation: AnnotationSection
    improvements: AnnotationSection
    suggestions: AnnotationSection
    safety: AnnotationSection

    def sections(self) -> list[AnnotationSection]:
        return [self.recommendation, self.improvements, self.suggestions, self.safety]


def _section(title: str, items: Optional[list[str]], fallback: str) -> AnnotationSection:
    present = [item for item in (items or []) if item and item.strip()]
    if not present:
        return AnnotationSection(title=title, lines=[fallback], is_fallback=True)
    return AnnotationSection(title=title, lines=present)


class Activity(BaseModel):
    id: str = Field(min_length=1)
    type: ActivityType
    duration: float = Field(ge=0)
    calories_burned: float = Field(ge=0)
    additional_metrics: Optional[dict[str, MetricValue]] = None
    created_at: datetime
    user_id: Optional[str] = None
    start_time: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # AI annotations, populated server-side some time after creation
    recommendation: Optional[str] = None
    improvements: Optional[list[str]] = None
    suggestions: Optional[list[str]] = None
    safety: Optional[list[str]] = None

    model_config = {"populate_by_name": True, "alias_generator": to_camel}

    @property
    def has_annotations(self) -> bool:
        return not all(s.is_fallback for s in self.annotations().sections())

    def annotations(self) -> Annotations:
        """AI feedback with the fallback text applied to every absent field."""
        return Annotations(
            recommendation=_section(
                "AI Analysis",
                [self.recommendation] if self.recommendation else None,
                RECOMMENDATION_FALLBACK,
            ),
            improvements=_section("Suggested Improvements", self.improvements, IMPROVEMENTS_FALLBACK),
            suggestions=_section("Exercise Suggestions", self.suggestions, SUGGESTIONS_FALLBACK),
            safety=_section("Safety Guidelines", self.safety, SAFETY_FALLBACK),
        )
