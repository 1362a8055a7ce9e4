from __future__ import annotations

import argparse
import logging
from typing import List

from faker import Faker

from . import crud
from .config import configure_logging
from .store import MemoryStore, get_store

logger = logging.getLogger(__name__)

BASE_TAGS = ["python", "testing", "news", "travel", "food"]


def make_faker(seed: int = 1234) -> Faker:
    fake = Faker()
    fake.seed_instance(seed)
    return fake


def seed(
    store: MemoryStore,
    users_count: int,
    posts_per_user: int,
    fake: Faker | None = None,
) -> List[int]:
    """Fill ``store`` with deterministic demo users and posts.

    - Users get emails user{n}@example.com and a Faker name
    - Each user gets N posts with deterministic titles
    - Tags are attached in a fixed pattern so tag filters have something to find
    - Some posts receive likes so stats are non-trivial

    Returns the ids of the created users.
    """
    fake = fake or make_faker()
    user_ids = []

    for i in range(1, users_count + 1):
        user = crud.create_user(
            store,
            name=fake.name(),
            email=f"user{i}@example.com",
            password=fake.password(length=12),
        )
        user_ids.append(user.id)

        for j in range(1, posts_per_user + 1):
            tags = [BASE_TAGS[0]]
            if i % 2 == 0:
                tags.append(BASE_TAGS[1])
            if j % 2 == 1:
                tags.append(BASE_TAGS[2 + (j // 2) % 3])

            post = crud.create_post(
                store,
                user.id,
                title=f"Post {j} by user{i}",
                content=fake.paragraph(nb_sentences=5),
                tags=tags,
            )
            for _ in range((i + j) % 4):
                crud.like_post(store, post.id)

    logger.info(
        "Seeded %d user(s) and %d post(s)", len(user_ids), users_count * posts_per_user
    )
    return user_ids


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the in-memory store.")
    parser.add_argument(
        "--users",
        type=int,
        default=10,
        help="Number of users to create (default: 10).",
    )
    parser.add_argument(
        "--posts-per-user",
        type=int,
        default=3,
        help="Number of posts per user (default: 3).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=1234,
        help="Faker seed (default: 1234).",
    )
    args = parser.parse_args(argv)

    configure_logging()
    store = get_store()
    user_ids = seed(
        store,
        users_count=args.users,
        posts_per_user=args.posts_per_user,
        fake=make_faker(args.seed),
    )
    for user_id in user_ids:
        stats = crud.get_user_stats(store, user_id)
        logger.info(
            "user id=%s posts=%d likes=%d avg=%.2f",
            user_id,
            stats.total_posts,
            stats.total_likes,
            stats.average_likes_per_post,
        )


if __name__ == "__main__":
    main()
