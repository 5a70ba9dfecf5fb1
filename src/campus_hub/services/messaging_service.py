"""Channels, channel messages and direct threads."""

from __future__ import annotations

from typing import Iterable

from ..core.errors import invalid_argument, not_found
from ..schemas import Account, Channel, Group, Initiative, Message
from ..store import keys
from ..store.mutations import UnitOfWork, mutation


def _append(uow: UnitOfWork, *, container_id: str, channel_id: str, sender: Account, body: str) -> Message:
    if not body or not body.strip():
        raise invalid_argument("Message body must not be empty.")
    return uow.put(
        Message(
            id=uow.new_id(),
            container_id=container_id,
            channel_id=channel_id,
            sender_id=sender.id,
            sender_name=sender.display_name,
            body=body,
            created_at=uow.now(),
            sequence=uow.next_sequence(),
        )
    )


def _require_container(uow: UnitOfWork, container_id: str) -> None:
    if uow.get(Group, container_id) is None and uow.get(Initiative, container_id) is None:
        raise not_found("Container", container_id)


@mutation
def send_message(uow: UnitOfWork, *, container_id: str, channel_id: str, sender_id: str, body: str) -> Message:
    """Append a message to a channel of a group or initiative."""

    if container_id == keys.DIRECT_CONTAINER:
        raise invalid_argument("Use send_direct_message for direct threads.")
    channel = uow.require(Channel, channel_id)
    if channel.container_id != container_id:
        raise not_found("Channel", f"{container_id}/{channel_id}")
    sender = uow.require(Account, sender_id)
    return _append(uow, container_id=container_id, channel_id=channel_id, sender=sender, body=body)


@mutation
def send_direct_message(uow: UnitOfWork, *, sender_id: str, recipient_id: str, body: str) -> Message:
    """Append to the one-to-one thread shared by sender and recipient."""

    try:
        thread_id = keys.direct_thread_id(sender_id, recipient_id)
    except ValueError as exc:
        raise invalid_argument(str(exc)) from exc
    sender = uow.require(Account, sender_id)
    uow.require(Account, recipient_id)
    return _append(uow, container_id=keys.DIRECT_CONTAINER, channel_id=thread_id, sender=sender, body=body)


@mutation
def create_channel(
    uow: UnitOfWork,
    *,
    container_id: str,
    name: str,
    restricted_to_roles: Iterable[str] = (),
) -> Channel:
    if not name or not name.strip():
        raise invalid_argument("Channel name must not be empty.")
    _require_container(uow, container_id)
    return uow.put(
        Channel(
            id=uow.new_id(),
            container_id=container_id,
            name=name.strip(),
            restricted_to_roles=frozenset(restricted_to_roles),
        )
    )


@mutation
def remove_channel(uow: UnitOfWork, *, channel_id: str) -> Channel:
    """Hard-delete a channel. Its messages stay in the store."""

    return uow.delete(Channel, channel_id)
