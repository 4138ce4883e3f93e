"""Post schemas.

``PostCreate`` and ``PostUpdate`` validate raw request bodies. Both are composed
from the same pieces: ``prepare_post_input`` (slug derivation, tag cleanup,
empty strings to null) runs as a ``before`` model validator, the annotated
field types below carry the per-field rules, and ``gate_publish_date`` runs
as an ``after`` model validator.

Validation context keys:

- ``today``: callable returning the current date (defaults to the
  configured time zone).
- ``is_published``: the stored flag of the post being updated.
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, Literal, Mapping, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from src.core.config import settings
from src.core.utils.utils import is_blank, normalize_csv, slugify
from src.core.validation import FutureDateRule, MaxWordsRule, SlugFormatRule

POST_FIELDS = (
    "title",
    "slug",
    "body",
    "is_published",
    "publish_date",
    "meta_description",
    "tags",
    "keywords",
)
NULLABLE_FIELDS = ("publish_date", "meta_description", "tags", "keywords")

TITLE_MAX = 255
SLUG_MAX = 255
META_DESCRIPTION_MAX = 160
KEYWORDS_MAX_WORDS = 15


def prepare_post_input(raw: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Normalize a raw payload before any rule runs. Unknown keys are dropped."""
    data = {key: value for key, value in raw.items() if key in POST_FIELDS}

    title = data.get("title")
    usable_title = isinstance(title, str) and not is_blank(title)
    if usable_title and is_blank(data.get("slug")):
        data["slug"] = slugify(title)
    slug = data.get("slug")
    if isinstance(slug, str) and not is_blank(slug):
        data["slug"] = slug.strip().lower()
    elif is_blank(slug) and not partial and not usable_title:
        # nothing to derive from; the title error is reported instead
        data.pop("slug", None)

    if isinstance(data.get("tags"), str):
        data["tags"] = normalize_csv(data["tags"])

    if "is_published" in data and data["is_published"] in (None, ""):
        data["is_published"] = False

    for field in NULLABLE_FIELDS:
        if data.get(field) == "":
            data[field] = None

    return data


def _today(info: ValidationInfo):
    return (info.context or {}).get("today") or settings.get_today


def _publish_date(value: Any, info: ValidationInfo) -> date:
    return FutureDateRule("Publish Date", today=_today(info))(value)


def reject_blank(value: Any, field: str, kind: str = "required") -> Any:
    """Present-but-empty counts as missing for required fields."""
    if is_blank(value):
        raise PydanticCustomError(kind, "The {attribute} field is required.", {"attribute": field})
    return value


def gate_publish_date(post: BaseModel, published: bool) -> None:
    """Published posts need a date; drafts never keep one."""
    if published:
        if post.publish_date is None:
            raise PydanticCustomError(
                "required_if",
                "The publish date is required when the post is marked as published.",
                {"field": "publish_date"},
            )
    else:
        post.publish_date = None


# Field rules shared by PostCreate and PostUpdate
Title = Annotated[str, Field(max_length=TITLE_MAX)]
Slug = Annotated[str, Field(max_length=SLUG_MAX), AfterValidator(SlugFormatRule("Slug"))]
PublishDate = Annotated[date, BeforeValidator(_publish_date)]
MetaDescription = Annotated[str, Field(max_length=META_DESCRIPTION_MAX)]
Keywords = Annotated[str, AfterValidator(MaxWordsRule(KEYWORDS_MAX_WORDS, attribute="Keywords"))]


class PostCreate(BaseModel):
    """Payload for creating a post."""

    title: Title
    slug: Optional[Slug] = None
    body: str
    is_published: bool = False
    publish_date: Optional[PublishDate] = None
    meta_description: Optional[MetaDescription] = None
    tags: Optional[str] = None
    keywords: Optional[Keywords] = None

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return prepare_post_input(data)
        return data

    @field_validator("title", "body", mode="before")
    @classmethod
    def _required(cls, value: Any, info: ValidationInfo) -> Any:
        return reject_blank(value, info.field_name)

    @field_validator("slug", mode="before")
    @classmethod
    def _resolved_slug(cls, value: Any) -> Any:
        # blank here means the title slugified to nothing
        return reject_blank(value, "slug", kind="unresolved")

    @model_validator(mode="after")
    def _check_publish_date(self) -> "PostCreate":
        if self.slug is None:
            raise PydanticCustomError(
                "unresolved",
                "A slug could not be generated from the title.",
                {"field": "slug"},
            )
        gate_publish_date(self, self.is_published)
        return self


class PostUpdate(BaseModel):
    """Payload for updating a post; only set fields are applied.

    When ``is_published`` is absent the stored flag (context key
    ``is_published``) decides how a ``publish_date`` change is gated.
    """

    title: Optional[Title] = None
    slug: Optional[Slug] = None
    body: Optional[str] = None
    is_published: Optional[bool] = None
    publish_date: Optional[PublishDate] = None
    meta_description: Optional[MetaDescription] = None
    tags: Optional[str] = None
    keywords: Optional[Keywords] = None

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return prepare_post_input(data, partial=True)
        return data

    @field_validator("title", "slug", "body", mode="before")
    @classmethod
    def _required_when_present(cls, value: Any, info: ValidationInfo) -> Any:
        return reject_blank(value, info.field_name)

    @model_validator(mode="after")
    def _check_publish_date(self, info: ValidationInfo) -> "PostUpdate":
        sent = self.model_fields_set
        if "is_published" not in sent and "publish_date" not in sent:
            return self
        if "is_published" in sent:
            published = bool(self.is_published)
        else:
            published = bool((info.context or {}).get("is_published", False))
        gate_publish_date(self, published)
        return self


class PostRead(BaseModel):
    """Public representation of a post."""

    id: int
    post_title: str
    slug: str
    content: str
    status: Literal["Published", "Draft"]
    publish_date: Optional[date] = None
    meta_description: Optional[str] = None
    tags: Optional[str] = None
    keywords: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_post(cls, post) -> "PostRead":
        return cls(
            id=post.id,
            post_title=post.title,
            slug=post.slug,
            content=post.body,
            status="Published" if post.is_published else "Draft",
            publish_date=post.publish_date,
            meta_description=post.meta_description,
            tags=post.tags,
            keywords=post.keywords,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


def serialize_post(post) -> dict:
    return PostRead.from_post(post).model_dump(mode="json")
