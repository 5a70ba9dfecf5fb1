"""Chat message records."""

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, Field

from .base import Record


class Message(Record):
    """A chat message; ``sequence`` records insertion order across the store."""

    kind: ClassVar[str] = "messages"

    container_id: str
    channel_id: str
    sender_id: str
    sender_name: str = ""
    body: str
    created_at: datetime
    sequence: int = Field(default=0, ge=0)


class MessageCreate(BaseModel):
    """Request body for posting to a channel."""

    sender_id: str
    body: str = Field(..., min_length=1, max_length=4000)


class DirectMessageCreate(BaseModel):
    """Request body for a one-to-one message."""

    sender_id: str
    recipient_id: str
    body: str = Field(..., min_length=1, max_length=4000)
