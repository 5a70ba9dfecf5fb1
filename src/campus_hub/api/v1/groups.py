"""Group (club) endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from ...schemas import (
    Broadcast,
    Channel,
    ChannelCreate,
    Group,
    GroupCreate,
    GroupReview,
    GroupUpdate,
    MemberAction,
    Mission,
    RoleAssignment,
)
from ...services import group_service, messaging_service
from ...store import keys
from ...store.engine import CampusStore
from ..deps import get_store, require_found, unwrap

router = APIRouter(prefix="/groups", tags=["groups"])

_MEMBERSHIP_ERRORS = {
    403: {"description": "Owner cannot be removed or reassigned"},
    404: {"description": "Group or account not found"},
    409: {"description": "Membership precondition not met"},
}


@router.post(
    "",
    response_model=Group,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
    responses={
        201: {
            "description": "Group created with its owner enrolled",
            "content": {
                "application/json": {
                    "example": {
                        "id": "5f0c2a7e9b1d4c3e8a6f1b2d3c4e5f60",
                        "name": "Tech Wizards",
                        "description": "A community for coding enthusiasts.",
                        "owner_id": "u101",
                        "members": ["u101"],
                        "pending_requests": [],
                        "category": "Technology",
                        "logo_ref": None,
                        "role_assignments": {},
                        "approval_status": "approved",
                        "created_at": "2026-10-17T10:15:30+00:00",
                    }
                }
            },
        },
        404: {"description": "Owner account not found"},
    },
)
def create_group(payload: GroupCreate, store: CampusStore = Depends(get_store)) -> Group:
    """Create a group and its default ``lounge`` channel."""

    return unwrap(
        group_service.create_group(
            store,
            owner_id=payload.owner_id,
            name=payload.name,
            description=payload.description,
            category=payload.category,
            logo_ref=payload.logo_ref,
            requires_review=payload.requires_review,
        )
    )


@router.get("", response_model=List[Group], summary="List groups")
def list_groups(store: CampusStore = Depends(get_store)) -> List[Group]:
    return store.query(keys.groups())


@router.get("/{group_id}", response_model=Group, summary="Fetch one group")
def get_group(group_id: str, store: CampusStore = Depends(get_store)) -> Group:
    return require_found(store.query(keys.group(group_id)), "Group", group_id)


@router.patch("/{group_id}", response_model=Group, summary="Edit group details")
def update_group(group_id: str, payload: GroupUpdate, store: CampusStore = Depends(get_store)) -> Group:
    return unwrap(
        group_service.update_group(
            store,
            group_id=group_id,
            name=payload.name,
            description=payload.description,
            category=payload.category,
            logo_ref=payload.logo_ref,
        )
    )


@router.post("/{group_id}/review", response_model=Group, summary="Approve or reject a pending group")
def review_group(group_id: str, payload: GroupReview, store: CampusStore = Depends(get_store)) -> Group:
    return unwrap(group_service.review_group(store, group_id=group_id, approved=payload.approved))


@router.post("/{group_id}/join-requests", response_model=Group, summary="Request to join", responses=_MEMBERSHIP_ERRORS)
def request_join(group_id: str, payload: MemberAction, store: CampusStore = Depends(get_store)) -> Group:
    return unwrap(group_service.request_join(store, group_id=group_id, account_id=payload.account_id))


@router.post(
    "/{group_id}/join-requests/approve",
    response_model=Group,
    summary="Approve a join request",
    responses=_MEMBERSHIP_ERRORS,
)
def approve_join(group_id: str, payload: MemberAction, store: CampusStore = Depends(get_store)) -> Group:
    return unwrap(group_service.approve_join(store, group_id=group_id, account_id=payload.account_id))


@router.post(
    "/{group_id}/join-requests/reject",
    response_model=Group,
    summary="Reject a join request",
    responses=_MEMBERSHIP_ERRORS,
)
def reject_join(group_id: str, payload: MemberAction, store: CampusStore = Depends(get_store)) -> Group:
    return unwrap(group_service.reject_join(store, group_id=group_id, account_id=payload.account_id))


@router.delete(
    "/{group_id}/members/{account_id}",
    response_model=Group,
    summary="Remove a member",
    responses=_MEMBERSHIP_ERRORS,
)
def remove_member(group_id: str, account_id: str, store: CampusStore = Depends(get_store)) -> Group:
    return unwrap(group_service.remove_member(store, group_id=group_id, account_id=account_id))


@router.put("/{group_id}/roles", response_model=Group, summary="Assign a member role", responses=_MEMBERSHIP_ERRORS)
def assign_role(group_id: str, payload: RoleAssignment, store: CampusStore = Depends(get_store)) -> Group:
    return unwrap(
        group_service.assign_role(store, group_id=group_id, account_id=payload.account_id, label=payload.label)
    )


@router.get("/{group_id}/channels", response_model=List[Channel], summary="Channels of a group")
def list_channels(group_id: str, store: CampusStore = Depends(get_store)) -> List[Channel]:
    return store.query(keys.channels(group_id))


@router.post(
    "/{group_id}/channels",
    response_model=Channel,
    status_code=status.HTTP_201_CREATED,
    summary="Open a channel",
)
def create_channel(group_id: str, payload: ChannelCreate, store: CampusStore = Depends(get_store)) -> Channel:
    return unwrap(
        messaging_service.create_channel(
            store,
            container_id=group_id,
            name=payload.name,
            restricted_to_roles=payload.restricted_to_roles,
        )
    )


@router.get("/{group_id}/broadcasts", response_model=List[Broadcast], summary="Group feed, newest first")
def list_group_broadcasts(group_id: str, store: CampusStore = Depends(get_store)) -> List[Broadcast]:
    return store.query(keys.broadcasts(group_id))


@router.get("/{group_id}/missions/pending", response_model=List[Mission], summary="Proposals awaiting review")
def list_pending_missions(group_id: str, store: CampusStore = Depends(get_store)) -> List[Mission]:
    return store.query(keys.pending_missions(group_id))
