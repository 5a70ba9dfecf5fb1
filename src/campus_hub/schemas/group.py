"""Group (club) records and payloads."""

from datetime import datetime
from types import MappingProxyType
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, Field

from .base import FrozenLabels, Record

ApprovalStatus = Literal["pending", "approved", "rejected"]


class Group(Record):
    """A club with an owner, members and pending join requests."""

    kind: ClassVar[str] = "groups"

    name: str
    description: str = ""
    owner_id: str
    members: frozenset[str] = frozenset()
    pending_requests: frozenset[str] = frozenset()
    category: str = "General"
    logo_ref: Optional[str] = None
    role_assignments: FrozenLabels = Field(default_factory=lambda: MappingProxyType({}))
    approval_status: ApprovalStatus = "approved"
    created_at: datetime


class GroupCreate(BaseModel):
    """Request body for creating a group."""

    owner_id: str
    name: str = Field(..., min_length=1, max_length=120)
    description: str = Field("", max_length=2000)
    category: str = Field("General", max_length=60)
    logo_ref: Optional[str] = None
    requires_review: bool = False


class GroupUpdate(BaseModel):
    """Editable group fields."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = Field(None, max_length=2000)
    category: Optional[str] = Field(None, max_length=60)
    logo_ref: Optional[str] = None


class MemberAction(BaseModel):
    """Request body naming the account a membership action applies to."""

    account_id: str


class RoleAssignment(BaseModel):
    """Request body for assigning a free-text member role."""

    account_id: str
    label: str = Field(..., min_length=1, max_length=60)


class GroupReview(BaseModel):
    """Request body for approving or rejecting a pending group."""

    approved: bool
