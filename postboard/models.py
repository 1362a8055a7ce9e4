from dataclasses import dataclass, field
from typing import List


@dataclass
class User:
    """A stored user record.

    ``password`` holds the transformed value from ``transform_password``,
    never the raw input. Callers only ever see it through the redacted
    schemas.
    """

    id: int
    name: str
    email: str
    password: str
    created_at: str
    is_active: bool = True


@dataclass
class Post:
    id: int
    user_id: int
    title: str
    content: str
    created_at: str
    tags: List[str] = field(default_factory=list)
    likes: int = 0
    published: bool = True

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on title, content or any tag."""
        needle = needle.lower()
        return (
            needle in self.title.lower()
            or needle in self.content.lower()
            or any(needle in tag.lower() for tag in self.tags)
        )


def transform_password(password: str) -> str:
    # Placeholder transform, not a real hash.
    return "hashed_" + password
