"""Domain logic for broadcasts (posts), likes and replies."""

from __future__ import annotations

from typing import Iterable, Optional

from ..core.errors import invalid_argument
from ..schemas import Account, Broadcast, Group, MediaAttachment, Reply
from ..store.mutations import UnitOfWork, mutation


@mutation
def publish_broadcast(
    uow: UnitOfWork,
    *,
    group_id: str,
    author_id: str,
    body: str,
    media: Optional[MediaAttachment] = None,
    tags: Iterable[str] = (),
) -> Broadcast:
    """Publish a post; ``media`` must already be uploaded."""

    if not body or not body.strip():
        raise invalid_argument("Broadcast body must not be empty.")
    group = uow.require(Group, group_id)
    author = uow.require(Account, author_id)
    return uow.put(
        Broadcast(
            id=uow.new_id(),
            group_id=group_id,
            group_name=group.name,
            author_id=author_id,
            author_name=author.display_name,
            body=body,
            media=media,
            tags=frozenset(tags),
            created_at=uow.now(),
        )
    )


@mutation
def toggle_like(uow: UnitOfWork, *, broadcast_id: str, account_id: str) -> Broadcast:
    """Add ``account_id`` to the likes if absent, remove it if present."""

    return uow.patch(
        Broadcast,
        broadcast_id,
        lambda post: post.model_copy(update={"liked_by": post.liked_by ^ {account_id}}),
    )


@mutation
def add_reply(uow: UnitOfWork, *, broadcast_id: str, author_id: str, body: str) -> Broadcast:
    """Append a reply. Content must have passed moderation before this call."""

    if not body or not body.strip():
        raise invalid_argument("Reply body must not be empty.")
    uow.require(Broadcast, broadcast_id)
    author = uow.require(Account, author_id)
    reply = Reply(
        id=uow.new_id(),
        author_id=author_id,
        author_name=author.display_name,
        body=body,
        created_at=uow.now(),
    )
    return uow.patch(
        Broadcast,
        broadcast_id,
        lambda post: post.model_copy(update={"replies": post.replies + (reply,)}),
    )
