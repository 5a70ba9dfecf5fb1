"""Canonical view keys and direct-thread identifiers.

A view key names a subscribable projection: a family (``kind``) plus an
ordered tuple of string parameters. Keys are plain named tuples, so two keys
built independently from the same arguments are equal and hash alike.

Canonical string form is ``kind:param1:param2``; a ``None`` parameter (used
for "no filter") renders as ``*``::

    >>> str(messages("g1", "c1"))
    'messages:g1:c1'
    >>> str(broadcasts())
    'broadcasts:*'

Direct threads live in the reserved ``direct`` container. Their channel id is
the two participant ids, sorted, joined with ``_``.
"""

from typing import NamedTuple, Optional

DIRECT_CONTAINER = "direct"
THREAD_SEPARATOR = "_"
WILDCARD = "*"

# family -> number of parameters
FAMILIES: dict[str, int] = {
    "account": 1,
    "group": 1,
    "groups": 0,
    "initiative": 1,
    "initiatives": 0,
    "channels": 1,
    "messages": 2,
    "broadcasts": 1,
    "approved_missions": 0,
    "pending_missions": 1,
    "leaderboard": 1,
    "partners": 1,
    "mentors": 0,
    "alerts": 1,
    "mentorships": 1,
    "recent_achievements": 0,
}


class ViewKey(NamedTuple):
    kind: str
    params: tuple[Optional[str], ...] = ()

    def __str__(self) -> str:
        parts = [self.kind]
        parts.extend(WILDCARD if param is None else param for param in self.params)
        return ":".join(parts)


def validate(key: ViewKey) -> ViewKey:
    """Reject keys that no projection can answer."""

    if not isinstance(key, ViewKey):
        raise ValueError(f"not a view key: {key!r}")
    arity = FAMILIES.get(key.kind)
    if arity is None:
        raise ValueError(f"unknown view family {key.kind!r}")
    if len(key.params) != arity:
        raise ValueError(f"{key.kind} expects {arity} parameter(s), got {len(key.params)}")
    for param in key.params:
        if param is not None and (not isinstance(param, str) or not param):
            raise ValueError(f"invalid parameter {param!r} in {key.kind} key")
    return key


def _key(kind: str, *params: Optional[str]) -> ViewKey:
    return validate(ViewKey(kind, tuple(params)))


def account(account_id: str) -> ViewKey:
    return _key("account", account_id)


def group(group_id: str) -> ViewKey:
    return _key("group", group_id)


def groups() -> ViewKey:
    return _key("groups")


def initiative(initiative_id: str) -> ViewKey:
    return _key("initiative", initiative_id)


def initiatives() -> ViewKey:
    return _key("initiatives")


def channels(container_id: str) -> ViewKey:
    return _key("channels", container_id)


def messages(container_id: str, channel_id: str) -> ViewKey:
    return _key("messages", container_id, channel_id)


def direct_messages(first_id: str, second_id: str) -> ViewKey:
    return messages(DIRECT_CONTAINER, direct_thread_id(first_id, second_id))


def broadcasts(group_id: Optional[str] = None) -> ViewKey:
    return _key("broadcasts", group_id)


def approved_missions() -> ViewKey:
    return _key("approved_missions")


def pending_missions(group_id: str) -> ViewKey:
    return _key("pending_missions", group_id)


def leaderboard(limit: int = 50) -> ViewKey:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"leaderboard limit must be a positive integer, got {limit!r}")
    return _key("leaderboard", str(limit))


def partners(account_id: str) -> ViewKey:
    return _key("partners", account_id)


def mentors() -> ViewKey:
    return _key("mentors")


def alerts(recipient_id: str) -> ViewKey:
    return _key("alerts", recipient_id)


def mentorships(account_id: str) -> ViewKey:
    return _key("mentorships", account_id)


def recent_achievements() -> ViewKey:
    return _key("recent_achievements")


def direct_thread_id(first_id: str, second_id: str) -> str:
    """Return the canonical thread id shared by two accounts."""

    for account_id in (first_id, second_id):
        if not account_id or THREAD_SEPARATOR in account_id:
            raise ValueError(f"account id {account_id!r} cannot take part in a direct thread")
    if first_id == second_id:
        raise ValueError("a direct thread needs two distinct accounts")
    return THREAD_SEPARATOR.join(sorted((first_id, second_id)))


def thread_participants(thread_id: str) -> Optional[tuple[str, str]]:
    """Split a direct thread id; ``None`` when it is not in canonical form."""

    parts = thread_id.split(THREAD_SEPARATOR)
    if len(parts) != 2 or not all(parts) or parts[0] >= parts[1]:
        return None
    return parts[0], parts[1]
