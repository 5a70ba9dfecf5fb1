"""Broadcast (post) records and payloads."""

from datetime import datetime
from typing import ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import Record

MediaType = Literal["image", "video", "file"]


class MediaAttachment(BaseModel):
    """Reference to media already stored by the upload collaborator."""

    model_config = ConfigDict(frozen=True)

    ref: str
    media_type: MediaType = "image"
    file_name: Optional[str] = None


class Reply(BaseModel):
    """Entry in a broadcast's append-only reply thread."""

    model_config = ConfigDict(frozen=True)

    id: str
    author_id: str
    author_name: str
    body: str
    created_at: datetime


class Broadcast(Record):
    """A post published to a group's feed."""

    kind: ClassVar[str] = "broadcasts"

    group_id: str
    group_name: str = ""
    author_id: str
    author_name: str = ""
    body: str
    media: Optional[MediaAttachment] = None
    tags: frozenset[str] = frozenset()
    created_at: datetime
    liked_by: frozenset[str] = frozenset()
    replies: tuple[Reply, ...] = ()


class BroadcastCreate(BaseModel):
    """Request body for publishing a broadcast."""

    group_id: str
    author_id: str
    body: str = Field(..., min_length=1, max_length=4000)
    media: Optional[MediaAttachment] = None
    tags: set[str] = Field(default_factory=set)


class ReplyCreate(BaseModel):
    """Request body for replying to a broadcast, after moderation."""

    author_id: str
    body: str = Field(..., min_length=1, max_length=1000)


class LikeToggle(BaseModel):
    """Request body for toggling a like."""

    account_id: str
