"""Alerts and mentorship requests."""

from __future__ import annotations

from ..core.errors import invalid_argument, precondition_failed
from ..schemas import Account, Alert, Mentorship
from ..store.mutations import UnitOfWork, mutation


def emit_alert(uow: UnitOfWork, *, recipient_id: str, title: str, body: str, alert_kind: str) -> Alert:
    """Stage an unread alert inside the caller's unit of work."""

    return uow.put(
        Alert(
            id=uow.new_id(),
            recipient_id=recipient_id,
            title=title,
            body=body,
            alert_kind=alert_kind,
            created_at=uow.now(),
        )
    )


@mutation
def mark_alerts_read(uow: UnitOfWork, *, recipient_id: str) -> int:
    """Mark every unread alert of ``recipient_id`` as read; returns the count."""

    unread = [alert for alert in uow.get_all(Alert) if alert.recipient_id == recipient_id and not alert.read]
    for alert in unread:
        uow.put(alert.model_copy(update={"read": True}))
    return len(unread)


@mutation
def request_mentorship(
    uow: UnitOfWork,
    *,
    mentee_id: str,
    mentor_id: str,
    topic: str,
    message: str = "",
) -> Mentorship:
    """Record a pending mentorship request and alert the mentor."""

    if mentee_id == mentor_id:
        raise invalid_argument("An account cannot mentor itself.")
    mentee = uow.require(Account, mentee_id)
    uow.require(Account, mentor_id)

    open_request = next(
        (
            request
            for request in uow.get_all(Mentorship)
            if request.mentee_id == mentee_id
            and request.mentor_id == mentor_id
            and request.topic == topic
            and request.status != "completed"
        ),
        None,
    )
    if open_request is not None:
        return open_request

    try:
        request = Mentorship(
            id=uow.new_id(),
            mentor_id=mentor_id,
            mentee_id=mentee_id,
            topic=topic,
            message=message,
            created_at=uow.now(),
        )
    except ValueError as exc:
        raise invalid_argument(f"Invalid mentorship request: {exc}") from exc
    uow.put(request)
    emit_alert(
        uow,
        recipient_id=mentor_id,
        title="Mentorship Request",
        body=f"{mentee.display_name} is seeking your guidance on {topic}.",
        alert_kind="mentorship",
    )
    return request


@mutation
def update_mentorship_status(uow: UnitOfWork, *, mentorship_id: str, status: str) -> Mentorship:
    """Move a mentorship request forward: pending -> active -> completed."""

    order = ("pending", "active", "completed")
    if status not in order:
        raise invalid_argument(f"Unknown mentorship status {status!r}.")
    request = uow.require(Mentorship, mentorship_id)
    if order.index(status) < order.index(request.status):
        raise precondition_failed(f"Mentorship is already {request.status}.")
    return uow.update(Mentorship, mentorship_id, status=status)
