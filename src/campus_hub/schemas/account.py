"""Account records and profile payloads."""

from datetime import datetime
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import Record

UserRole = Literal["student", "admin", "faculty"]
AchievementKind = Literal["event", "project", "skill", "badge"]


class Achievement(BaseModel):
    """Entry in an account's ordered achievement history."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str = ""
    kind: AchievementKind = "skill"
    awarded_at: datetime


class Account(Record):
    """Campus user participating in the hub."""

    kind: ClassVar[str] = "accounts"

    email: str
    display_name: str
    role: UserRole = "student"
    points: int = Field(default=0, ge=0)
    joined_group_ids: frozenset[str] = frozenset()
    skill_tags: frozenset[str] = frozenset()
    interest_tags: frozenset[str] = frozenset()
    badge_ids: frozenset[str] = frozenset()
    achievements: tuple[Achievement, ...] = ()
    verified: bool = False


class AchievementFeedEntry(BaseModel):
    """Latest achievement of one account, as shown on the activity feed."""

    account_id: str
    display_name: str
    title: str
    awarded_at: datetime


class ProfileUpdate(BaseModel):
    """Editable profile fields."""

    display_name: Optional[str] = Field(None, min_length=1, max_length=80)
    skill_tags: Optional[set[str]] = None
    interest_tags: Optional[set[str]] = None


class PointsAward(BaseModel):
    """Request body for awarding points."""

    amount: int = Field(..., description="Points to add; must be positive.")
    reason: str = Field(..., min_length=1, max_length=200)


class BadgeAward(BaseModel):
    """Request body for awarding a catalog badge."""

    badge_id: str
