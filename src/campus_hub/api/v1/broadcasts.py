"""Broadcast (post) endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query, status

from ...collaborators import Collaborators, MediaUploader, TextGenerator
from ...schemas import Broadcast, BroadcastCreate, LikeToggle, MediaAttachment, ReplyCreate
from ...services import broadcast_service
from ...store import keys
from ...store.engine import CampusStore
from ..deps import get_collaborators, get_store, require_collaborator, unwrap

router = APIRouter(prefix="/broadcasts", tags=["broadcasts"])


@router.post("", response_model=Broadcast, status_code=status.HTTP_201_CREATED, summary="Publish a broadcast")
def publish_broadcast(payload: BroadcastCreate, store: CampusStore = Depends(get_store)) -> Broadcast:
    return unwrap(
        broadcast_service.publish_broadcast(
            store,
            group_id=payload.group_id,
            author_id=payload.author_id,
            body=payload.body,
            media=payload.media,
            tags=payload.tags,
        )
    )


@router.get("", response_model=List[Broadcast], summary="Campus feed, newest first")
def list_broadcasts(store: CampusStore = Depends(get_store)) -> List[Broadcast]:
    return store.query(keys.broadcasts())


@router.post("/{broadcast_id}/likes", response_model=Broadcast, summary="Toggle a like")
def toggle_like(broadcast_id: str, payload: LikeToggle, store: CampusStore = Depends(get_store)) -> Broadcast:
    return unwrap(broadcast_service.toggle_like(store, broadcast_id=broadcast_id, account_id=payload.account_id))


@router.post(
    "/{broadcast_id}/replies",
    response_model=Broadcast,
    summary="Reply to a broadcast",
    responses={422: {"description": "Reply flagged by moderation"}},
)
def add_reply(
    broadcast_id: str,
    payload: ReplyCreate,
    store: CampusStore = Depends(get_store),
    collaborators: Collaborators = Depends(get_collaborators),
) -> Broadcast:
    """Append a reply once the configured moderator, if any, lets the text through."""

    generator: Optional[TextGenerator] = collaborators.text_generator
    if generator is not None:
        verdict = generator.moderate(payload.body)
        if verdict.flagged:
            raise HTTPException(
                status_code=422,
                detail=verdict.reason or "Reply flagged by moderation",
            )
    return unwrap(
        broadcast_service.add_reply(
            store, broadcast_id=broadcast_id, author_id=payload.author_id, body=payload.body
        )
    )


@router.post(
    "/media",
    response_model=MediaAttachment,
    status_code=status.HTTP_201_CREATED,
    summary="Upload media for a later broadcast",
    responses={503: {"description": "No media uploader configured"}},
)
def upload_media(
    data: bytes = Body(..., media_type="application/octet-stream"),
    file_name: str = Query(..., min_length=1, max_length=255),
    content_type: str = Header("application/octet-stream"),
    collaborators: Collaborators = Depends(get_collaborators),
) -> MediaAttachment:
    """Store the request body and return the attachment to publish with a broadcast."""

    uploader: MediaUploader = require_collaborator(collaborators.media_uploader, "media uploader")
    ref = uploader.upload(data, file_name=file_name, content_type=content_type)
    major = content_type.split("/", 1)[0]
    media_type = major if major in ("image", "video") else "file"
    return MediaAttachment(ref=ref, media_type=media_type, file_name=file_name)
