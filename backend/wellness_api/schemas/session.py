from typing import Annotated
from datetime import datetime
from pydantic import BaseModel, Field, StringConstraints, field_validator, model_validator

from wellness_api.models.session import TAG_MAX, Category, Difficulty, SessionStatus
from wellness_api.schemas.user import UserSummary

TITLE_MAX = 100
DESCRIPTION_MAX = 1000

TitleStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX)]
DescriptionStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=DESCRIPTION_MAX)]
DurationStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
# Comma separated string from the editor; a list is accepted too
TagsInput = str | list[str]


def _check_url(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if not v:
        return None
    if not (v.startswith("http://") or v.startswith("https://")) or len(v.split("://", 1)[1]) == 0:
        raise ValueError("Please provide a valid URL")
    return v


def _check_tags(v: TagsInput | None) -> TagsInput | None:
    if v is None:
        return None
    parts = v.split(",") if isinstance(v, str) else v
    if any(len(p.strip()) > TAG_MAX for p in parts):
        raise ValueError(f"each tag must be at most {TAG_MAX} characters")
    return v


class SessionCreate(BaseModel):
    title: TitleStr
    description: DescriptionStr
    tags: TagsInput | None = None
    json_file_url: str | None = Field(default=None, max_length=2048)
    duration: DurationStr = "30 min"
    difficulty: Difficulty = Difficulty.beginner
    category: Category = Category.wellness

    @field_validator("json_file_url")
    @classmethod
    def url_is_http(cls, v: str | None) -> str | None:
        return _check_url(v)

    @field_validator("tags")
    @classmethod
    def tags_fit(cls, v: TagsInput | None) -> TagsInput | None:
        return _check_tags(v)


class SessionUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied."""
    title: TitleStr | None = None
    description: DescriptionStr | None = None
    tags: TagsInput | None = None
    json_file_url: str | None = Field(default=None, max_length=2048)
    duration: DurationStr | None = None
    difficulty: Difficulty | None = None
    category: Category | None = None

    @field_validator("json_file_url")
    @classmethod
    def url_is_http(cls, v: str | None) -> str | None:
        return _check_url(v)

    @field_validator("tags")
    @classmethod
    def tags_fit(cls, v: TagsInput | None) -> TagsInput | None:
        return _check_tags(v)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("title", "description", "duration", "difficulty", "category"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class SessionRead(BaseModel):
    id: int
    user_id: int
    user: UserSummary
    title: str
    description: str
    tags: list[str]
    json_file_url: str | None = None
    status: SessionStatus
    duration: str
    difficulty: Difficulty
    category: Category
    likes: list[int]
    like_count: int
    views: int
    is_featured: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
