"""Domain logic for group (club) membership workflows."""

from __future__ import annotations

from typing import Optional

from ..core.errors import forbidden, invalid_argument, precondition_failed
from ..schemas import Account, Channel, Group
from ..store.mutations import UnitOfWork, mutation
from .alert_service import emit_alert

DEFAULT_GROUP_CHANNELS = ("lounge",)


def _ensure_member(group: Group, account_id: str) -> None:
    if account_id not in group.members:
        raise precondition_failed(f"Account {account_id} is not a member of {group.name}.")


@mutation
def create_group(
    uow: UnitOfWork,
    *,
    owner_id: str,
    name: str,
    description: str = "",
    category: str = "General",
    logo_ref: Optional[str] = None,
    requires_review: bool = False,
) -> Group:
    """Create a group with its owner enrolled and its default channels."""

    if not name or not name.strip():
        raise invalid_argument("Group name must not be empty.")
    uow.require(Account, owner_id)

    group = uow.put(
        Group(
            id=uow.new_id(),
            name=name.strip(),
            description=description,
            owner_id=owner_id,
            members=frozenset({owner_id}),
            category=category or "General",
            logo_ref=logo_ref,
            approval_status="pending" if requires_review else "approved",
            created_at=uow.now(),
        )
    )
    uow.patch(
        Account,
        owner_id,
        lambda account: account.model_copy(update={"joined_group_ids": account.joined_group_ids | {group.id}}),
    )
    for channel_name in DEFAULT_GROUP_CHANNELS:
        uow.put(Channel(id=uow.new_id(), container_id=group.id, name=channel_name))
    return group


@mutation
def update_group(
    uow: UnitOfWork,
    *,
    group_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    category: Optional[str] = None,
    logo_ref: Optional[str] = None,
) -> Group:
    """Edit descriptive fields; membership is untouched."""

    updates = {}
    if name is not None:
        if not name.strip():
            raise invalid_argument("Group name must not be empty.")
        updates["name"] = name.strip()
    if description is not None:
        updates["description"] = description
    if category is not None:
        updates["category"] = category
    if logo_ref is not None:
        updates["logo_ref"] = logo_ref
    uow.require(Group, group_id)
    return uow.update(Group, group_id, **updates)


@mutation
def review_group(uow: UnitOfWork, *, group_id: str, approved: bool) -> Group:
    """Settle a pending group; repeating the same decision is a no-op."""

    group = uow.require(Group, group_id)
    target = "approved" if approved else "rejected"
    if group.approval_status == target:
        return group
    if group.approval_status != "pending":
        raise precondition_failed(f"Group {group.name} is already {group.approval_status}.")
    return uow.update(Group, group_id, approval_status=target)


@mutation
def request_join(uow: UnitOfWork, *, group_id: str, account_id: str) -> Group:
    """Queue a join request; members and already-pending accounts are a no-op."""

    group = uow.require(Group, group_id)
    applicant = uow.require(Account, account_id)
    if account_id in group.members or account_id in group.pending_requests:
        return group

    group = uow.update(Group, group_id, pending_requests=group.pending_requests | {account_id})
    emit_alert(
        uow,
        recipient_id=group.owner_id,
        title="New Join Request",
        body=f"{applicant.display_name} has requested to join {group.name}.",
        alert_kind="request",
    )
    return group


@mutation
def approve_join(uow: UnitOfWork, *, group_id: str, account_id: str) -> Group:
    """Move ``account_id`` from pending requests to members."""

    group = uow.require(Group, group_id)
    if account_id not in group.pending_requests:
        raise precondition_failed(f"Account {account_id} has no pending request for {group.name}.")
    uow.require(Account, account_id)

    group = uow.update(
        Group,
        group_id,
        pending_requests=group.pending_requests - {account_id},
        members=group.members | {account_id},
    )
    uow.patch(
        Account,
        account_id,
        lambda account: account.model_copy(update={"joined_group_ids": account.joined_group_ids | {group_id}}),
    )
    emit_alert(
        uow,
        recipient_id=account_id,
        title="Club Admittance",
        body=f"Your request to join {group.name} has been approved.",
        alert_kind="approval",
    )
    return group


@mutation
def reject_join(uow: UnitOfWork, *, group_id: str, account_id: str) -> Group:
    """Drop a pending request; an absent request is a no-op."""

    group = uow.require(Group, group_id)
    if account_id not in group.pending_requests:
        return group
    group = uow.update(Group, group_id, pending_requests=group.pending_requests - {account_id})
    emit_alert(
        uow,
        recipient_id=account_id,
        title="Join Request Declined",
        body=f"Your request to join {group.name} was not approved.",
        alert_kind="rejection",
    )
    return group


@mutation
def remove_member(uow: UnitOfWork, *, group_id: str, account_id: str) -> Group:
    """Remove a member, their role and the mirrored joined-group entry."""

    group = uow.require(Group, group_id)
    if account_id == group.owner_id:
        raise forbidden("The group owner cannot be removed.")
    _ensure_member(group, account_id)

    roles = {member: label for member, label in group.role_assignments.items() if member != account_id}
    group = uow.update(Group, group_id, members=group.members - {account_id}, role_assignments=roles)
    if uow.get(Account, account_id) is not None:
        uow.patch(
            Account,
            account_id,
            lambda account: account.model_copy(
                update={"joined_group_ids": account.joined_group_ids - {group_id}}
            ),
        )
    emit_alert(
        uow,
        recipient_id=account_id,
        title="Membership Terminated",
        body=f"Your membership in {group.name} has been revoked by its leadership.",
        alert_kind="rejection",
    )
    return group


@mutation
def assign_role(uow: UnitOfWork, *, group_id: str, account_id: str, label: str) -> Group:
    """Record a free-text role label for a non-owner member."""

    group = uow.require(Group, group_id)
    if account_id == group.owner_id:
        raise forbidden("The group owner's role is fixed.")
    _ensure_member(group, account_id)
    if not label or not label.strip():
        raise invalid_argument("Role label must not be empty.")
    if group.role_assignments.get(account_id) == label.strip():
        return group

    group = uow.update(Group, group_id, role_assignments={**group.role_assignments, account_id: label.strip()})
    emit_alert(
        uow,
        recipient_id=account_id,
        title="Role Reassigned",
        body=f"Your role in {group.name} has been updated to: {label.strip()}",
        alert_kind="role_assigned",
    )
    return group
