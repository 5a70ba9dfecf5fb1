"""Alert (notification) records."""

from datetime import datetime
from typing import ClassVar, Literal

from .base import Record

AlertKind = Literal[
    "request",
    "approval",
    "rejection",
    "role_assigned",
    "post_like",
    "project_invite",
    "mentorship",
]


class Alert(Record):
    """Notification addressed to one account."""

    kind: ClassVar[str] = "alerts"

    recipient_id: str
    title: str
    body: str = ""
    alert_kind: AlertKind
    created_at: datetime
    read: bool = False
