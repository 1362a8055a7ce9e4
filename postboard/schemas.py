from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

NAME_MIN_LENGTH = 2
PASSWORD_MIN_LENGTH = 8
TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 5000

NAME_RULE = f"Name must be at least {NAME_MIN_LENGTH} characters long"
EMAIL_RULE = "Invalid email address"
PASSWORD_RULE = f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
USER_FIELD_RULES = {"name": NAME_RULE, "email": EMAIL_RULE, "password": PASSWORD_RULE}


class ValidationResult(BaseModel):
    loc: str
    msg: str


def _check_name(value: str) -> str:
    if len(value) < NAME_MIN_LENGTH:
        raise ValueError(NAME_RULE)
    return value


def _check_email(value: str) -> str:
    if "@" not in value:
        raise ValueError(EMAIL_RULE)
    return value


# ----- Input Schemas -----


class UserCreate(BaseModel):
    name: str
    email: str
    password: str

    @field_validator("name", "email", "password", mode="before")
    @classmethod
    def reject_missing(cls, value, info):
        if value is None:
            raise ValueError(USER_FIELD_RULES[info.field_name])
        return value

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(PASSWORD_RULE)
        return value


class UserUpdate(BaseModel):
    """Partial update; only fields given a non-null value are applied."""

    name: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        return value if value is None else _check_name(value)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return value if value is None else _check_email(value)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class PostCreate(BaseModel):
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "content", mode="before")
    @classmethod
    def reject_missing(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return value

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        if len(value) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title must be {TITLE_MAX_LENGTH} characters or less")
        return value

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content is required")
        if len(value) > CONTENT_MAX_LENGTH:
            raise ValueError(f"Content must be {CONTENT_MAX_LENGTH} characters or less")
        return value


# ----- Output Schemas -----


class UserCreated(BaseModel):
    """Redacted view returned right after creation."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: str


class UserOut(UserCreated):
    is_active: bool


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    content: str
    tags: List[str] = []
    created_at: str
    likes: int
    published: bool


class PostLikes(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    likes: int


class UserStats(BaseModel):
    total_posts: int
    total_likes: int
    average_likes_per_post: float
    most_popular_post: Optional[PostLikes] = None


def format_errors(exc: PydanticValidationError) -> List[ValidationResult]:
    results = []
    for error in exc.errors():
        # ctx["error"] is the ValueError raised by the field validators above.
        original = (error.get("ctx") or {}).get("error")
        msg = str(original) if isinstance(original, ValueError) else error["msg"]
        results.append(
            ValidationResult(loc=".".join(str(p) for p in error["loc"]), msg=msg)
        )
    return results


def parse(schema: type, payload: dict) -> BaseModel:
    """Validate ``payload`` against ``schema``; unknown keys are ignored.

    Raises:
        ValidationError: carrying the first violated rule.
    """
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        first = format_errors(exc)[0]
        raise ValidationError(first.msg, field=first.loc) from exc
