"""Leaderboard and activity aggregations.

Pure functions over a snapshot; none of them mutate the store.
"""

from __future__ import annotations

from typing import Sequence

from ..schemas import Account, AchievementFeedEntry, Message
from ..store.entity_store import Snapshot
from ..store.keys import DIRECT_CONTAINER, thread_participants

DEFAULT_LEADERBOARD_LIMIT = 50
DEFAULT_MENTOR_THRESHOLD = 300
RECENT_ACHIEVEMENTS_LIMIT = 10


def top_accounts(snapshot: Snapshot, *, limit: int = DEFAULT_LEADERBOARD_LIMIT) -> Sequence[Account]:
    """Return accounts ordered by points, then id for determinism."""

    limit = max(1, limit)
    ranked = sorted(snapshot.get_all(Account), key=lambda account: (-account.points, account.id))
    return ranked[:limit]


def mentors(snapshot: Snapshot, *, points_threshold: int = DEFAULT_MENTOR_THRESHOLD) -> Sequence[Account]:
    """Accounts eligible to mentor: enough points, or an admin."""

    eligible = [
        account
        for account in snapshot.get_all(Account)
        if account.points >= points_threshold or account.role == "admin"
    ]
    return sorted(eligible, key=lambda account: (-account.points, account.id))


def conversation_partners(snapshot: Snapshot, account_id: str) -> Sequence[Account]:
    """Distinct accounts sharing a direct thread with ``account_id``.

    Most recently active thread first. Partners without an account record
    are skipped.
    """

    latest: dict[str, tuple] = {}
    for message in snapshot.get_all(Message):
        if message.container_id != DIRECT_CONTAINER:
            continue
        participants = thread_participants(message.channel_id)
        if participants is None or account_id not in participants:
            continue
        other_id = participants[1] if participants[0] == account_id else participants[0]
        order = (message.created_at, message.sequence)
        if other_id not in latest or latest[other_id] < order:
            latest[other_id] = order

    partners = []
    for other_id, _ in sorted(latest.items(), key=lambda item: item[1], reverse=True):
        account = snapshot.get(Account, other_id)
        if account is not None:
            partners.append(account)
    return partners


def recent_achievements(snapshot: Snapshot, *, limit: int = RECENT_ACHIEVEMENTS_LIMIT) -> Sequence[AchievementFeedEntry]:
    """Latest achievement of each account, newest first."""

    entries = [
        AchievementFeedEntry(
            account_id=account.id,
            display_name=account.display_name,
            title=account.achievements[-1].title,
            awarded_at=account.achievements[-1].awarded_at,
        )
        for account in snapshot.get_all(Account)
        if account.achievements
    ]
    entries.sort(key=lambda entry: (entry.awarded_at, entry.account_id), reverse=True)
    return entries[:limit]
