"""
Pytest configuration and fixtures.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

import pytest

from campus_hub.collaborators import Identity
from campus_hub.schemas import Account
from campus_hub.services import account_service
from campus_hub.store.engine import CampusStore
from campus_hub.store.persistence import JsonFilePersistence


class TickingClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.current = start or datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> TickingClock:
    """Return a fresh ticking clock."""
    return TickingClock()


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Return the JSON state file location for one test."""
    return tmp_path / "state.json"


@pytest.fixture
def store(state_path: Path, clock: TickingClock) -> CampusStore:
    """Create a started store backed by a JSON file."""
    campus = CampusStore(JsonFilePersistence(state_path), clock=clock).init()
    yield campus
    campus.shutdown()


@pytest.fixture
def sign_in() -> Callable[..., Account]:
    """Return a helper that provisions an account and returns it."""

    def _sign_in(store: CampusStore, account_id: str, *, role: str = "student", display_name: Optional[str] = None) -> Account:
        identity = Identity(
            account_id=account_id,
            email=f"{account_id}@campus.edu",
            role=role,
            display_name=display_name or account_id.capitalize(),
        )
        result = account_service.sign_in(store, identity=identity)
        assert result.ok, result.detail
        return result.value

    return _sign_in


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "integration: marks tests that exercise the HTTP layer or a database"
    )
