"""Mission (event proposal) records and payloads."""

import datetime as dt
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, Field

from .base import Record
from .group import ApprovalStatus

MissionKind = Literal["workshop", "competition", "seminar", "hackathon"]


class Mission(Record):
    """An event proposed by a group, gated by approval."""

    kind: ClassVar[str] = "missions"

    group_id: str
    title: str
    description: str = ""
    date: dt.date
    location: str = ""
    mission_kind: MissionKind = "workshop"
    required_skill_tags: frozenset[str] = frozenset()
    approval_status: ApprovalStatus = "pending"
    proposer_id: str
    proposer_name: str = ""
    highlight: str = ""
    media_ref: Optional[str] = None
    created_at: dt.datetime


class MissionCreate(BaseModel):
    """Request body for proposing a mission."""

    group_id: str
    proposer_id: str
    title: str = Field(..., min_length=1, max_length=160)
    description: str = Field("", max_length=4000)
    date: dt.date
    location: str = Field("", max_length=160)
    mission_kind: MissionKind = "workshop"
    required_skill_tags: set[str] = Field(default_factory=set)
    media_ref: Optional[str] = None


class MissionApproval(BaseModel):
    """Request body for approval; without a highlight one is generated."""

    highlight: Optional[str] = Field(None, min_length=1)
