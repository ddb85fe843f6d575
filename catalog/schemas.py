from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime

from catalog import categories

RankKey = Literal["view", "enjoy", "stored"]


# --- User ---

class UserBase(BaseModel):
    username: str = Field(max_length=50)
    email: str = Field(max_length=255)
    display_name: str | None = None
    avatar: str | None = Field(None, max_length=500)


class UserCreate(UserBase):
    pass


class UserResponse(UserBase):
    id: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# --- Statistics ---

class StatisticsResponse(BaseModel):
    id: int
    view: int
    enjoy: int
    stored: int
    model_config = ConfigDict(from_attributes=True)


class StatisticsAccumulate(BaseModel):
    """Deltas to add; a field left out leaves its counter untouched."""

    enjoy: int | None = None
    stored: int | None = None


# --- Article ---

class ArticleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    subtitle: str = Field("", max_length=300)
    author: str = Field(min_length=1, max_length=150)
    content: str
    category: list[str] = []
    thumbnail: str | None = Field(None, max_length=500)
    is_published: bool = False
    is_original: bool = False
    user_id: int | None = None

    @field_validator("category")
    @classmethod
    def _normalize_category(cls, value: list[str]) -> list[str]:
        return categories.normalize(value)


class ArticleUpdate(BaseModel):
    # Only content and the publish flag are editable after creation.
    content: str | None = None
    is_published: bool | None = None


class ArticleSearch(BaseModel):
    """
    Listing criteria.  Every optional field is a pass-through when absent
    and a predicate when present.
    """

    offset: int = Field(0, ge=0)
    limit: int | None = Field(None, ge=1)
    author: str | None = None
    title: str | None = None
    category: list[str] | None = None
    user_id: int | None = None
    is_overview: bool = False
    rank: RankKey | None = None
    all_state: bool = False


class SeriesOverview(BaseModel):
    total: int
    original: int


class ArticleCreated(BaseModel):
    id: int
