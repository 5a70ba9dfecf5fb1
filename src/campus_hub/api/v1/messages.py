"""Channel and direct message endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas import Channel, DirectMessageCreate, Message, MessageCreate
from ...services import messaging_service
from ...store import keys
from ...store.engine import CampusStore
from ..deps import get_store, unwrap

router = APIRouter(tags=["messages"])


@router.get(
    "/containers/{container_id}/channels/{channel_id}/messages",
    response_model=List[Message],
    summary="Channel history, oldest first",
)
def list_messages(container_id: str, channel_id: str, store: CampusStore = Depends(get_store)) -> List[Message]:
    return store.query(keys.messages(container_id, channel_id))


@router.post(
    "/containers/{container_id}/channels/{channel_id}/messages",
    response_model=Message,
    status_code=status.HTTP_201_CREATED,
    summary="Post to a channel",
)
def send_message(
    container_id: str,
    channel_id: str,
    payload: MessageCreate,
    store: CampusStore = Depends(get_store),
) -> Message:
    return unwrap(
        messaging_service.send_message(
            store,
            container_id=container_id,
            channel_id=channel_id,
            sender_id=payload.sender_id,
            body=payload.body,
        )
    )


@router.delete("/channels/{channel_id}", response_model=Channel, summary="Remove a channel")
def remove_channel(channel_id: str, store: CampusStore = Depends(get_store)) -> Channel:
    return unwrap(messaging_service.remove_channel(store, channel_id=channel_id))


@router.post(
    "/direct-messages",
    response_model=Message,
    status_code=status.HTTP_201_CREATED,
    summary="Send a direct message",
)
def send_direct_message(payload: DirectMessageCreate, store: CampusStore = Depends(get_store)) -> Message:
    return unwrap(
        messaging_service.send_direct_message(
            store,
            sender_id=payload.sender_id,
            recipient_id=payload.recipient_id,
            body=payload.body,
        )
    )


@router.get(
    "/direct-messages/{first_id}/{second_id}",
    response_model=List[Message],
    summary="Direct thread history, oldest first",
)
def list_direct_messages(first_id: str, second_id: str, store: CampusStore = Depends(get_store)) -> List[Message]:
    try:
        key = keys.direct_messages(first_id, second_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return store.query(key)
