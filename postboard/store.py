from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional

from .models import Post, User

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore:
    """Process-local holder for the user and post lists.

    Both lists keep insertion order. Ids are ``len + 1`` of the owning list,
    so an id can be handed out again after a delete.
    """

    def __init__(self, clock: Clock = utc_now):
        self.clock = clock
        self.users: List[User] = []
        self.posts: List[Post] = []

    def reset(self) -> None:
        logger.debug(
            "Resetting store (%d users, %d posts)", len(self.users), len(self.posts)
        )
        self.users.clear()
        self.posts.clear()

    def timestamp(self) -> str:
        return self.clock().isoformat()

    def next_user_id(self) -> int:
        return len(self.users) + 1

    def next_post_id(self) -> int:
        return len(self.posts) + 1

    def find_user(self, user_id: int) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def find_post(self, post_id: int) -> Optional[Post]:
        return next((p for p in self.posts if p.id == post_id), None)


_default_store = MemoryStore()


def get_store() -> MemoryStore:
    """Return the process-wide store."""
    return _default_store


@contextmanager
def store_scope(clock: Clock = utc_now) -> Iterator[MemoryStore]:
    """Provide a fresh store that is emptied when the block exits."""
    store = MemoryStore(clock=clock)
    try:
        yield store
    finally:
        store.reset()
