"""Initiative (project) records and payloads."""

from datetime import datetime
from types import MappingProxyType
from typing import ClassVar, Literal

from pydantic import BaseModel, Field

from .base import FrozenLabels, Record

LifecycleState = Literal["recruiting", "in-progress", "completed"]

LIFECYCLE_ORDER: tuple[str, ...] = ("recruiting", "in-progress", "completed")


class Initiative(Record):
    """A collaborative project recruiting members by skill."""

    kind: ClassVar[str] = "initiatives"

    title: str
    description: str = ""
    owner_id: str
    owner_name: str = ""
    members: frozenset[str] = frozenset()
    pending_applicants: frozenset[str] = frozenset()
    required_skill_tags: frozenset[str] = frozenset()
    discovery_tags: frozenset[str] = frozenset()
    role_assignments: FrozenLabels = Field(default_factory=lambda: MappingProxyType({}))
    lifecycle_state: LifecycleState = "recruiting"
    created_at: datetime


class InitiativeCreate(BaseModel):
    """Request body for creating an initiative."""

    owner_id: str
    title: str = Field(..., min_length=1, max_length=120)
    description: str = Field("", max_length=4000)
    required_skill_tags: set[str] = Field(default_factory=set)
    discovery_tags: set[str] = Field(default_factory=set)


class LifecycleChange(BaseModel):
    """Request body for advancing an initiative's lifecycle."""

    state: LifecycleState
