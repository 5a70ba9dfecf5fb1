"""Public schema exports."""

from .account import (
    Account,
    Achievement,
    AchievementFeedEntry,
    BadgeAward,
    PointsAward,
    ProfileUpdate,
)
from .alert import Alert
from .badge import BADGE_CATALOG, Badge, find_badge
from .base import Record
from .broadcast import (
    Broadcast,
    BroadcastCreate,
    LikeToggle,
    MediaAttachment,
    Reply,
    ReplyCreate,
)
from .channel import Channel, ChannelCreate
from .group import (
    Group,
    GroupCreate,
    GroupReview,
    GroupUpdate,
    MemberAction,
    RoleAssignment,
)
from .initiative import Initiative, InitiativeCreate, LifecycleChange
from .mentorship import Mentorship, MentorshipCreate
from .message import DirectMessageCreate, Message, MessageCreate
from .mission import Mission, MissionApproval, MissionCreate

RECORD_TYPES: dict[str, type[Record]] = {
    model.kind: model
    for model in (
        Account,
        Group,
        Initiative,
        Mission,
        Broadcast,
        Channel,
        Message,
        Alert,
        Mentorship,
    )
}

__all__ = [
    "Account",
    "Achievement",
    "AchievementFeedEntry",
    "Alert",
    "BADGE_CATALOG",
    "Badge",
    "BadgeAward",
    "Broadcast",
    "BroadcastCreate",
    "Channel",
    "ChannelCreate",
    "DirectMessageCreate",
    "Group",
    "GroupCreate",
    "GroupReview",
    "GroupUpdate",
    "Initiative",
    "InitiativeCreate",
    "LifecycleChange",
    "LikeToggle",
    "MediaAttachment",
    "MemberAction",
    "Mentorship",
    "MentorshipCreate",
    "Message",
    "MessageCreate",
    "Mission",
    "MissionApproval",
    "MissionCreate",
    "PointsAward",
    "ProfileUpdate",
    "RECORD_TYPES",
    "Record",
    "Reply",
    "ReplyCreate",
    "RoleAssignment",
    "find_badge",
]
