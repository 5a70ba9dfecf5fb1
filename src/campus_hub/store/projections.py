"""Projections answering each view-key family, and change fan-out.

Every projection is a pure function of a :class:`Snapshot`. Nothing here
depends on mutation history, which is what lets an invalidation simply
recompute a view instead of diffing it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence

from ..schemas import (
    Account,
    Alert,
    Broadcast,
    Channel,
    Group,
    Initiative,
    Mentorship,
    Message,
    Mission,
    Record,
)
from ..services import leaderboard_service
from . import keys
from .entity_store import Change, Snapshot
from .keys import ViewKey


@dataclass(frozen=True)
class ProjectionOptions:
    mentor_points_threshold: int = leaderboard_service.DEFAULT_MENTOR_THRESHOLD
    recent_achievements_limit: int = leaderboard_service.RECENT_ACHIEVEMENTS_LIMIT
    leaderboard_limit: int = leaderboard_service.DEFAULT_LEADERBOARD_LIMIT


def account_by_id(snapshot: Snapshot, account_id: str) -> Optional[Account]:
    return snapshot.get(Account, account_id)


def group_by_id(snapshot: Snapshot, group_id: str) -> Optional[Group]:
    return snapshot.get(Group, group_id)


def initiative_by_id(snapshot: Snapshot, initiative_id: str) -> Optional[Initiative]:
    return snapshot.get(Initiative, initiative_id)


def all_groups(snapshot: Snapshot) -> list[Group]:
    return sorted(snapshot.get_all(Group), key=lambda group: (group.name.lower(), group.id))


def all_initiatives(snapshot: Snapshot) -> list[Initiative]:
    return sorted(snapshot.get_all(Initiative), key=lambda item: (item.created_at, item.id))


def channels_for_container(snapshot: Snapshot, container_id: str) -> list[Channel]:
    channels = [channel for channel in snapshot.get_all(Channel) if channel.container_id == container_id]
    return sorted(channels, key=lambda channel: (channel.name, channel.id))


def messages_for_channel(snapshot: Snapshot, container_id: str, channel_id: str) -> list[Message]:
    """Oldest first; equal timestamps keep insertion order."""

    matching = [
        message
        for message in snapshot.get_all(Message)
        if message.container_id == container_id and message.channel_id == channel_id
    ]
    return sorted(matching, key=lambda message: (message.created_at, message.sequence))


def broadcasts_for_group(snapshot: Snapshot, group_id: Optional[str] = None) -> list[Broadcast]:
    """Newest first, optionally limited to one group."""

    posts = snapshot.get_all(Broadcast)
    if group_id is not None:
        posts = [post for post in posts if post.group_id == group_id]
    return sorted(posts, key=lambda post: (post.created_at, post.id), reverse=True)


def approved_missions(snapshot: Snapshot) -> list[Mission]:
    approved = [mission for mission in snapshot.get_all(Mission) if mission.approval_status == "approved"]
    return sorted(approved, key=lambda mission: (mission.date, mission.created_at, mission.id))


def pending_missions(snapshot: Snapshot, group_id: str) -> list[Mission]:
    pending = [
        mission
        for mission in snapshot.get_all(Mission)
        if mission.group_id == group_id and mission.approval_status == "pending"
    ]
    return sorted(pending, key=lambda mission: (mission.created_at, mission.id))


def alerts_for_recipient(snapshot: Snapshot, recipient_id: str) -> list[Alert]:
    alerts = [alert for alert in snapshot.get_all(Alert) if alert.recipient_id == recipient_id]
    return sorted(alerts, key=lambda alert: (alert.created_at, alert.id), reverse=True)


def mentorships_for_account(snapshot: Snapshot, account_id: str) -> list[Mentorship]:
    requests = [
        request
        for request in snapshot.get_all(Mentorship)
        if account_id in (request.mentor_id, request.mentee_id)
    ]
    return sorted(requests, key=lambda request: (request.created_at, request.id), reverse=True)


_PROJECTORS: dict[str, Callable[..., Any]] = {
    "account": lambda snapshot, options, account_id: account_by_id(snapshot, account_id),
    "group": lambda snapshot, options, group_id: group_by_id(snapshot, group_id),
    "groups": lambda snapshot, options: all_groups(snapshot),
    "initiative": lambda snapshot, options, initiative_id: initiative_by_id(snapshot, initiative_id),
    "initiatives": lambda snapshot, options: all_initiatives(snapshot),
    "channels": lambda snapshot, options, container_id: channels_for_container(snapshot, container_id),
    "messages": lambda snapshot, options, container_id, channel_id: messages_for_channel(
        snapshot, container_id, channel_id
    ),
    "broadcasts": lambda snapshot, options, group_id: broadcasts_for_group(snapshot, group_id),
    "approved_missions": lambda snapshot, options: approved_missions(snapshot),
    "pending_missions": lambda snapshot, options, group_id: pending_missions(snapshot, group_id),
    "leaderboard": lambda snapshot, options, limit: list(
        leaderboard_service.top_accounts(snapshot, limit=int(limit))
    ),
    "partners": lambda snapshot, options, account_id: list(
        leaderboard_service.conversation_partners(snapshot, account_id)
    ),
    "mentors": lambda snapshot, options: list(
        leaderboard_service.mentors(snapshot, points_threshold=options.mentor_points_threshold)
    ),
    "alerts": lambda snapshot, options, recipient_id: alerts_for_recipient(snapshot, recipient_id),
    "mentorships": lambda snapshot, options, account_id: mentorships_for_account(snapshot, account_id),
    "recent_achievements": lambda snapshot, options: list(
        leaderboard_service.recent_achievements(snapshot, limit=options.recent_achievements_limit)
    ),
}


def project(snapshot: Snapshot, key: ViewKey, options: Optional[ProjectionOptions] = None) -> Any:
    """Compute the current value of ``key`` against ``snapshot``."""

    keys.validate(key)
    return _PROJECTORS[key.kind](snapshot, options or ProjectionOptions(), *key.params)


@dataclass
class Invalidation:
    """View keys, and whole families, whose projection may have changed."""

    keys: set[ViewKey] = field(default_factory=set)
    families: set[str] = field(default_factory=set)

    def __bool__(self) -> bool:
        return bool(self.keys or self.families)


def _account_views(record: Account, out: Invalidation) -> None:
    out.keys.update({keys.account(record.id), keys.mentors(), keys.recent_achievements()})
    out.families.update({"leaderboard", "partners"})


def _group_views(record: Group, out: Invalidation) -> None:
    out.keys.update({keys.group(record.id), keys.groups()})


def _initiative_views(record: Initiative, out: Invalidation) -> None:
    out.keys.update({keys.initiative(record.id), keys.initiatives()})


def _mission_views(record: Mission, out: Invalidation) -> None:
    out.keys.update({keys.approved_missions(), keys.pending_missions(record.group_id)})


def _broadcast_views(record: Broadcast, out: Invalidation) -> None:
    out.keys.update({keys.broadcasts(record.group_id), keys.broadcasts()})


def _channel_views(record: Channel, out: Invalidation) -> None:
    out.keys.add(keys.channels(record.container_id))


def _message_views(record: Message, out: Invalidation) -> None:
    out.keys.add(keys.messages(record.container_id, record.channel_id))
    if record.container_id == keys.DIRECT_CONTAINER:
        participants = keys.thread_participants(record.channel_id)
        if participants is not None:
            out.keys.update(keys.partners(account_id) for account_id in participants)


def _alert_views(record: Alert, out: Invalidation) -> None:
    out.keys.add(keys.alerts(record.recipient_id))


def _mentorship_views(record: Mentorship, out: Invalidation) -> None:
    out.keys.update({keys.mentorships(record.mentor_id), keys.mentorships(record.mentee_id)})


_AFFECTS: dict[str, Callable[[Any, Invalidation], None]] = {
    Account.kind: _account_views,
    Group.kind: _group_views,
    Initiative.kind: _initiative_views,
    Mission.kind: _mission_views,
    Broadcast.kind: _broadcast_views,
    Channel.kind: _channel_views,
    Message.kind: _message_views,
    Alert.kind: _alert_views,
    Mentorship.kind: _mentorship_views,
}


def affected_views(changes: Iterable[Change]) -> Invalidation:
    """Map changed records, old and new versions alike, to the views they feed."""

    out = Invalidation()
    for change in changes:
        records: Sequence[Optional[Record]] = (change.before, change.after)
        for record in records:
            if record is not None:
                _AFFECTS[change.kind](record, out)
    return out
