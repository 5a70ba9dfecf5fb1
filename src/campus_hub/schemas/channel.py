"""Chat channel records."""

from typing import ClassVar

from pydantic import BaseModel, Field

from .base import Record


class Channel(Record):
    """A named chat channel inside a group or initiative."""

    kind: ClassVar[str] = "channels"

    container_id: str
    name: str
    restricted_to_roles: frozenset[str] = frozenset()


class ChannelCreate(BaseModel):
    """Request body for opening a channel."""

    name: str = Field(..., min_length=1, max_length=60)
    restricted_to_roles: set[str] = Field(default_factory=set)
