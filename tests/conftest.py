from datetime import datetime, timezone

import pytest

from postboard import crud
from postboard.store import store_scope

FROZEN_NOW = datetime(2024, 1, 15, 12, 30, tzinfo=timezone.utc)


@pytest.fixture()
def frozen_clock():
    """Clock that always returns the same instant."""
    return lambda: FROZEN_NOW


@pytest.fixture()
def store(frozen_clock):
    """Provide a fresh, empty store for each test."""
    with store_scope(clock=frozen_clock) as s:
        yield s


@pytest.fixture()
def user_factory(store):
    """Factory fixture that creates valid users through the CRUD layer."""

    def _create_user(name: str = "Alice", email: str = None, password: str = "password1"):
        email = email or f"{name.lower().replace(' ', '.')}@example.com"
        return crud.create_user(store, name, email, password)

    return _create_user
