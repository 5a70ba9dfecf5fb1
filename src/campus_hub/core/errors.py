"""Typed failures surfaced by the entity store and its mutations."""

import enum


class ErrorKind(str, enum.Enum):
    """Failure classification returned to callers."""

    NOT_FOUND = "NOT_FOUND"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    FORBIDDEN = "FORBIDDEN"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    PERSISTENCE_UNAVAILABLE = "PERSISTENCE_UNAVAILABLE"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PRECONDITION_FAILED: 409,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.PERSISTENCE_UNAVAILABLE: 503,
}


class StoreRuleViolation(Exception):
    """Raised inside a unit of work when a mutation rule is not met."""

    def __init__(self, kind: ErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    @property
    def status_code(self) -> int:
        return self.kind.status_code


class PersistenceUnavailable(Exception):
    """Raised by persistence adapters when the durable medium cannot be used."""


def not_found(kind: str, entity_id: str) -> StoreRuleViolation:
    return StoreRuleViolation(ErrorKind.NOT_FOUND, f"{kind} {entity_id} not found")


def precondition_failed(detail: str) -> StoreRuleViolation:
    return StoreRuleViolation(ErrorKind.PRECONDITION_FAILED, detail)


def forbidden(detail: str) -> StoreRuleViolation:
    return StoreRuleViolation(ErrorKind.FORBIDDEN, detail)


def invalid_argument(detail: str) -> StoreRuleViolation:
    return StoreRuleViolation(ErrorKind.INVALID_ARGUMENT, detail)
