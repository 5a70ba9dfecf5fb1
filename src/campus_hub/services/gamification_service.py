"""Points and badges."""

from __future__ import annotations

from ..core.errors import invalid_argument
from ..schemas import Account, Achievement, find_badge
from ..store.mutations import UnitOfWork, mutation


@mutation
def award_points(uow: UnitOfWork, *, account_id: str, amount: int, reason: str) -> Account:
    """Add ``amount`` points and log an achievement; points never decrease."""

    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise invalid_argument(f"Point awards must be a positive integer, got {amount!r}.")
    if not reason or not reason.strip():
        raise invalid_argument("A point award needs a reason.")

    achievement = Achievement(
        id=uow.new_id(),
        title=reason.strip(),
        description=f"Awarded {amount} points",
        kind="skill",
        awarded_at=uow.now(),
    )
    return uow.patch(
        Account,
        account_id,
        lambda account: account.model_copy(
            update={
                "points": account.points + amount,
                "achievements": account.achievements + (achievement,),
            }
        ),
    )


@mutation
def award_badge(uow: UnitOfWork, *, account_id: str, badge_id: str) -> Account:
    """Grant a catalog badge once; repeats are a no-op."""

    badge = find_badge(badge_id)
    if badge is None:
        raise invalid_argument(f"Unknown badge {badge_id!r}.")
    account = uow.require(Account, account_id)
    if badge_id in account.badge_ids:
        return account

    achievement = Achievement(
        id=uow.new_id(),
        title=badge.name,
        description=badge.description,
        kind="badge",
        awarded_at=uow.now(),
    )
    return uow.update(
        Account,
        account_id,
        badge_ids=account.badge_ids | {badge_id},
        achievements=account.achievements + (achievement,),
    )
