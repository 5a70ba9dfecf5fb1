"""Mentorship request records."""

from datetime import datetime
from typing import ClassVar, Literal

from pydantic import BaseModel, Field

from .base import Record

MentorshipTopic = Literal["placement", "research", "startup", "academic"]
MentorshipStatus = Literal["pending", "active", "completed"]


class Mentorship(Record):
    """A mentee's request for guidance from a mentor."""

    kind: ClassVar[str] = "mentorships"

    mentor_id: str
    mentee_id: str
    topic: MentorshipTopic
    status: MentorshipStatus = "pending"
    message: str = ""
    created_at: datetime


class MentorshipCreate(BaseModel):
    """Request body for asking a mentor for guidance."""

    mentee_id: str
    mentor_id: str
    topic: MentorshipTopic
    message: str = Field("", max_length=1000)
