import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Mapping, Optional, Union

from . import models, schemas
from .config import settings
from .errors import NotFoundError, ValidationError
from .store import MemoryStore

logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 3


def _check_non_negative(value: int, field: str) -> int:
    if value < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    return value


def _average(total: int, count: int) -> float:
    """Mean rounded half-up to two decimals; 0 when there is nothing to average."""
    if not count:
        return 0.0
    mean = Decimal(total) / Decimal(count)
    return float(mean.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


# User CRUD


def get_user_by_id(store: MemoryStore, user_id: int) -> Optional[schemas.UserOut]:
    """Return the redacted user, or None if no user has this id."""
    user = store.find_user(user_id)
    if user is None:
        return None
    return schemas.UserOut.model_validate(user)


def create_user(
    store: MemoryStore, name: str, email: str, password: str
) -> schemas.UserCreated:
    """Validate and store a new user.

    Raises:
        ValidationError: if the name, email or password breaks a rule.
    """
    try:
        user_in = schemas.parse(
            schemas.UserCreate, {"name": name, "email": email, "password": password}
        )
    except ValidationError as exc:
        logger.warning("Rejected new user (%s): %s", exc.field, exc)
        raise

    user = models.User(
        id=store.next_user_id(),
        name=user_in.name,
        email=user_in.email,
        password=models.transform_password(user_in.password),
        created_at=store.timestamp(),
        is_active=True,
    )
    store.users.append(user)
    logger.info("Created user id=%s", user.id)
    return schemas.UserCreated.model_validate(user)


def update_user(
    store: MemoryStore,
    user_id: int,
    updates: Union[schemas.UserUpdate, Mapping],
) -> Optional[schemas.UserOut]:
    """Apply a partial update of name, email and/or is_active.

    Returns None if the user does not exist. Keys other than the three
    updatable fields are ignored.
    """
    user = store.find_user(user_id)
    if user is None:
        return None

    if not isinstance(updates, schemas.UserUpdate):
        payload = {
            key: value
            for key, value in dict(updates).items()
            if key in schemas.UserUpdate.model_fields
        }
        updates = schemas.parse(schemas.UserUpdate, payload)

    for field, value in updates.changes().items():
        setattr(user, field, value)

    logger.info("Updated user id=%s", user.id)
    return schemas.UserOut.model_validate(user)


def delete_user(store: MemoryStore, user_id: int) -> bool:
    """Delete a user together with all of their posts.

    Returns:
        True if a user was deleted, False if the user did not exist.
    """
    user = store.find_user(user_id)
    if user is None:
        return False

    store.users.remove(user)
    before = len(store.posts)
    store.posts[:] = [p for p in store.posts if p.user_id != user_id]
    logger.info(
        "Deleted user id=%s and %d post(s)", user_id, before - len(store.posts)
    )
    return True


# Post CRUD


def create_post(
    store: MemoryStore,
    user_id: int,
    title: str,
    content: str,
    tags: Optional[List[str]] = None,
) -> schemas.PostOut:
    """Create a published post owned by ``user_id``.

    Raises:
        NotFoundError: if the user does not exist.
        ValidationError: if the title or content is missing or too long.
    """
    if store.find_user(user_id) is None:
        raise NotFoundError("User not found")

    try:
        post_in = schemas.parse(
            schemas.PostCreate, {"title": title, "content": content, "tags": tags or []}
        )
    except ValidationError as exc:
        logger.warning("Rejected new post for user id=%s: %s", user_id, exc)
        raise

    post = models.Post(
        id=store.next_post_id(),
        user_id=user_id,
        title=post_in.title,
        content=post_in.content,
        tags=list(post_in.tags),
        created_at=store.timestamp(),
    )
    store.posts.append(post)
    logger.info("Created post id=%s for user id=%s", post.id, user_id)
    return schemas.PostOut.model_validate(post)


def get_user_posts(
    store: MemoryStore,
    user_id: int,
    *,
    published: Optional[bool] = None,
    tag: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[schemas.PostOut]:
    """Return a user's posts, filtered by published flag, then tag, then limit."""
    posts = [p for p in store.posts if p.user_id == user_id]
    if published is not None:
        posts = [p for p in posts if p.published == published]
    if tag is not None:
        posts = [p for p in posts if tag in p.tags]
    if limit is not None:
        posts = posts[: _check_non_negative(limit, "limit")]
    return [schemas.PostOut.model_validate(p) for p in posts]


def search_posts(
    store: MemoryStore, keyword: str, max_results: Optional[int] = None
) -> List[schemas.PostOut]:
    """Find posts whose title, content or tags contain ``keyword``.

    Matching is case-insensitive and results keep insertion order.

    Raises:
        ValidationError: if the keyword is shorter than three characters.
    """
    if not keyword or len(keyword) < MIN_KEYWORD_LENGTH:
        raise ValidationError(
            f"Search keyword must be at least {MIN_KEYWORD_LENGTH} characters long",
            field="keyword",
        )
    if max_results is None:
        max_results = settings.search_max_results
    _check_non_negative(max_results, "max_results")

    matches = [p for p in store.posts if p.matches(keyword)]
    return [schemas.PostOut.model_validate(p) for p in matches[:max_results]]


def like_post(store: MemoryStore, post_id: int) -> Optional[schemas.PostLikes]:
    post = store.find_post(post_id)
    if post is None:
        return None
    post.likes += 1
    logger.info("Post id=%s now has %d like(s)", post.id, post.likes)
    return schemas.PostLikes.model_validate(post)


def get_user_stats(store: MemoryStore, user_id: int) -> schemas.UserStats:
    """Aggregate post count and likes for a user.

    Raises:
        NotFoundError: if the user does not exist.
    """
    if store.find_user(user_id) is None:
        raise NotFoundError("User not found")

    posts = [p for p in store.posts if p.user_id == user_id]
    total_likes = sum(p.likes for p in posts)

    most_popular = None
    for post in posts:
        # Strict comparison keeps the first post on ties.
        if most_popular is None or post.likes > most_popular.likes:
            most_popular = post

    return schemas.UserStats(
        total_posts=len(posts),
        total_likes=total_likes,
        average_likes_per_post=_average(total_likes, len(posts)),
        most_popular_post=(
            schemas.PostLikes.model_validate(most_popular) if most_popular else None
        ),
    )
