"""Domain logic for initiatives (collaborative projects)."""

from __future__ import annotations

from typing import Iterable

from ..core.errors import forbidden, invalid_argument, precondition_failed
from ..schemas import Account, Channel, Initiative
from ..schemas.initiative import LIFECYCLE_ORDER
from ..store.mutations import UnitOfWork, mutation
from .alert_service import emit_alert

DEFAULT_INITIATIVE_CHANNELS = ("coordination", "intel-sharing")
OWNER_ROLE_LABEL = "Mission Lead"


def _tags(values: Iterable[str]) -> frozenset[str]:
    return frozenset(value.strip() for value in values if value and value.strip())


@mutation
def create_initiative(
    uow: UnitOfWork,
    *,
    owner_id: str,
    title: str,
    description: str = "",
    required_skill_tags: Iterable[str] = (),
    discovery_tags: Iterable[str] = (),
) -> Initiative:
    """Create an initiative with its owner enrolled and its default channels."""

    if not title or not title.strip():
        raise invalid_argument("Initiative title must not be empty.")
    owner = uow.require(Account, owner_id)

    initiative = uow.put(
        Initiative(
            id=uow.new_id(),
            title=title.strip(),
            description=description,
            owner_id=owner_id,
            owner_name=owner.display_name,
            members=frozenset({owner_id}),
            required_skill_tags=_tags(required_skill_tags),
            discovery_tags=_tags(discovery_tags),
            created_at=uow.now(),
        )
    )
    for channel_name in DEFAULT_INITIATIVE_CHANNELS:
        uow.put(Channel(id=uow.new_id(), container_id=initiative.id, name=channel_name))
    return initiative


@mutation
def apply(uow: UnitOfWork, *, initiative_id: str, account_id: str) -> Initiative:
    """Queue an application; members and pending applicants are a no-op."""

    initiative = uow.require(Initiative, initiative_id)
    applicant = uow.require(Account, account_id)
    if account_id in initiative.members or account_id in initiative.pending_applicants:
        return initiative

    initiative = uow.update(
        Initiative, initiative_id, pending_applicants=initiative.pending_applicants | {account_id}
    )
    emit_alert(
        uow,
        recipient_id=initiative.owner_id,
        title="New Applicant",
        body=f"{applicant.display_name} applied to join {initiative.title}.",
        alert_kind="request",
    )
    return initiative


@mutation
def approve_applicant(uow: UnitOfWork, *, initiative_id: str, account_id: str) -> Initiative:
    initiative = uow.require(Initiative, initiative_id)
    if account_id not in initiative.pending_applicants:
        raise precondition_failed(f"Account {account_id} has not applied to {initiative.title}.")

    initiative = uow.update(
        Initiative,
        initiative_id,
        pending_applicants=initiative.pending_applicants - {account_id},
        members=initiative.members | {account_id},
    )
    emit_alert(
        uow,
        recipient_id=account_id,
        title="Project Invite",
        body=f"You have been added to the {initiative.title} team.",
        alert_kind="project_invite",
    )
    return initiative


@mutation
def reject_applicant(uow: UnitOfWork, *, initiative_id: str, account_id: str) -> Initiative:
    initiative = uow.require(Initiative, initiative_id)
    if account_id not in initiative.pending_applicants:
        return initiative
    return uow.update(
        Initiative, initiative_id, pending_applicants=initiative.pending_applicants - {account_id}
    )


@mutation
def remove_member(uow: UnitOfWork, *, initiative_id: str, account_id: str) -> Initiative:
    initiative = uow.require(Initiative, initiative_id)
    if account_id == initiative.owner_id:
        raise forbidden("The initiative owner cannot be removed.")
    if account_id not in initiative.members:
        raise precondition_failed(f"Account {account_id} is not on the {initiative.title} team.")

    roles = {member: label for member, label in initiative.role_assignments.items() if member != account_id}
    initiative = uow.update(
        Initiative, initiative_id, members=initiative.members - {account_id}, role_assignments=roles
    )
    emit_alert(
        uow,
        recipient_id=account_id,
        title="Project Deauthorization",
        body=f"You have been removed from the {initiative.title} team.",
        alert_kind="rejection",
    )
    return initiative


@mutation
def assign_role(uow: UnitOfWork, *, initiative_id: str, account_id: str, label: str) -> Initiative:
    initiative = uow.require(Initiative, initiative_id)
    if account_id == initiative.owner_id:
        raise forbidden(f"The initiative owner is always the {OWNER_ROLE_LABEL}.")
    if account_id not in initiative.members:
        raise precondition_failed(f"Account {account_id} is not on the {initiative.title} team.")
    if not label or not label.strip():
        raise invalid_argument("Role label must not be empty.")
    if initiative.role_assignments.get(account_id) == label.strip():
        return initiative

    initiative = uow.update(
        Initiative,
        initiative_id,
        role_assignments={**initiative.role_assignments, account_id: label.strip()},
    )
    emit_alert(
        uow,
        recipient_id=account_id,
        title="Role Reassigned",
        body=f"Your role in {initiative.title} is now: {label.strip()}",
        alert_kind="role_assigned",
    )
    return initiative


@mutation
def advance_lifecycle(uow: UnitOfWork, *, initiative_id: str, state: str) -> Initiative:
    """Move forward through recruiting -> in-progress -> completed."""

    if state not in LIFECYCLE_ORDER:
        raise invalid_argument(f"Unknown lifecycle state {state!r}.")
    initiative = uow.require(Initiative, initiative_id)
    current = LIFECYCLE_ORDER.index(initiative.lifecycle_state)
    target = LIFECYCLE_ORDER.index(state)
    if target < current:
        raise precondition_failed(f"{initiative.title} is already {initiative.lifecycle_state}.")
    return uow.update(Initiative, initiative_id, lifecycle_state=state)
