"""Account provisioning and profile updates."""

from __future__ import annotations

from typing import Iterable, Optional

from ..collaborators import Identity
from ..core.errors import invalid_argument, precondition_failed
from ..schemas import Account
from ..store.mutations import UnitOfWork, mutation


def _normalize_tags(tags: Iterable[str]) -> frozenset[str]:
    return frozenset(tag.strip() for tag in tags if tag and tag.strip())


@mutation
def sign_in(uow: UnitOfWork, *, identity: Identity, allowed_email_domain: Optional[str] = None) -> Account:
    """Return the account for ``identity``, creating it on first sign-in."""

    existing = uow.get(Account, identity.account_id)
    if existing is not None:
        return existing

    email = identity.email.strip().lower()
    if "@" not in email:
        raise invalid_argument(f"Invalid email address {identity.email!r}.")
    if allowed_email_domain and not email.endswith("@" + allowed_email_domain.lower()):
        raise invalid_argument(f"Only @{allowed_email_domain} addresses may sign in.")
    if any(account.email == email for account in uow.get_all(Account)):
        raise precondition_failed(f"Email {email} is already registered to another account.")

    return uow.put(
        Account(
            id=identity.account_id,
            email=email,
            display_name=identity.display_name or email.split("@")[0],
            role=identity.role,
        )
    )


@mutation
def update_profile(
    uow: UnitOfWork,
    *,
    account_id: str,
    display_name: Optional[str] = None,
    skill_tags: Optional[Iterable[str]] = None,
    interest_tags: Optional[Iterable[str]] = None,
) -> Account:
    updates = {}
    if display_name is not None:
        if not display_name.strip():
            raise invalid_argument("Display name must not be empty.")
        updates["display_name"] = display_name.strip()
    if skill_tags is not None:
        updates["skill_tags"] = _normalize_tags(skill_tags)
    if interest_tags is not None:
        updates["interest_tags"] = _normalize_tags(interest_tags)
    uow.require(Account, account_id)
    return uow.update(Account, account_id, **updates)
