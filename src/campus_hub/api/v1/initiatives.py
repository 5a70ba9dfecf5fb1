"""Initiative (project) endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...schemas import (
    Channel,
    ChannelCreate,
    Initiative,
    InitiativeCreate,
    LifecycleChange,
    MemberAction,
    RoleAssignment,
)
from ...services import initiative_service, messaging_service
from ...store import keys
from ...store.engine import CampusStore
from ..deps import get_store, require_found, unwrap

router = APIRouter(prefix="/initiatives", tags=["initiatives"])


@router.post("", response_model=Initiative, status_code=status.HTTP_201_CREATED, summary="Create an initiative")
def create_initiative(payload: InitiativeCreate, store: CampusStore = Depends(get_store)) -> Initiative:
    """Create an initiative with its default coordination channels."""

    return unwrap(
        initiative_service.create_initiative(
            store,
            owner_id=payload.owner_id,
            title=payload.title,
            description=payload.description,
            required_skill_tags=payload.required_skill_tags,
            discovery_tags=payload.discovery_tags,
        )
    )


@router.get("", response_model=List[Initiative], summary="List initiatives")
def list_initiatives(store: CampusStore = Depends(get_store)) -> List[Initiative]:
    return store.query(keys.initiatives())


@router.get("/{initiative_id}", response_model=Initiative, summary="Fetch one initiative")
def get_initiative(initiative_id: str, store: CampusStore = Depends(get_store)) -> Initiative:
    return require_found(store.query(keys.initiative(initiative_id)), "Initiative", initiative_id)


@router.post("/{initiative_id}/applications", response_model=Initiative, summary="Apply to join")
def apply(initiative_id: str, payload: MemberAction, store: CampusStore = Depends(get_store)) -> Initiative:
    return unwrap(initiative_service.apply(store, initiative_id=initiative_id, account_id=payload.account_id))


@router.post("/{initiative_id}/applications/approve", response_model=Initiative, summary="Approve an applicant")
def approve_applicant(
    initiative_id: str,
    payload: MemberAction,
    store: CampusStore = Depends(get_store),
) -> Initiative:
    return unwrap(
        initiative_service.approve_applicant(store, initiative_id=initiative_id, account_id=payload.account_id)
    )


@router.post("/{initiative_id}/applications/reject", response_model=Initiative, summary="Reject an applicant")
def reject_applicant(
    initiative_id: str,
    payload: MemberAction,
    store: CampusStore = Depends(get_store),
) -> Initiative:
    return unwrap(
        initiative_service.reject_applicant(store, initiative_id=initiative_id, account_id=payload.account_id)
    )


@router.delete("/{initiative_id}/members/{account_id}", response_model=Initiative, summary="Remove a member")
def remove_member(initiative_id: str, account_id: str, store: CampusStore = Depends(get_store)) -> Initiative:
    return unwrap(initiative_service.remove_member(store, initiative_id=initiative_id, account_id=account_id))


@router.put("/{initiative_id}/roles", response_model=Initiative, summary="Assign a member role")
def assign_role(
    initiative_id: str,
    payload: RoleAssignment,
    store: CampusStore = Depends(get_store),
) -> Initiative:
    return unwrap(
        initiative_service.assign_role(
            store, initiative_id=initiative_id, account_id=payload.account_id, label=payload.label
        )
    )


@router.post("/{initiative_id}/lifecycle", response_model=Initiative, summary="Advance the lifecycle")
def advance_lifecycle(
    initiative_id: str,
    payload: LifecycleChange,
    store: CampusStore = Depends(get_store),
) -> Initiative:
    return unwrap(initiative_service.advance_lifecycle(store, initiative_id=initiative_id, state=payload.state))


@router.get("/{initiative_id}/channels", response_model=List[Channel], summary="Channels of an initiative")
def list_channels(initiative_id: str, store: CampusStore = Depends(get_store)) -> List[Channel]:
    return store.query(keys.channels(initiative_id))


@router.post(
    "/{initiative_id}/channels",
    response_model=Channel,
    status_code=status.HTTP_201_CREATED,
    summary="Open a channel",
)
def create_channel(initiative_id: str, payload: ChannelCreate, store: CampusStore = Depends(get_store)) -> Channel:
    return unwrap(
        messaging_service.create_channel(
            store,
            container_id=initiative_id,
            name=payload.name,
            restricted_to_roles=payload.restricted_to_roles,
        )
    )
