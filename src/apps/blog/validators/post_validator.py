"""Post payload validator.

Field rules live on ``PostCreate`` / ``PostUpdate``. This class runs them
with the right validation context, renders the failures with the create or
update wording, and adds the slug uniqueness check, which needs the store.
"""

import logging
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from src.core import exceptions
from src.core.bases.base_repository import RepositoryError
from src.core.config import settings
from src.core.logger import get_logger
from src.core.validation import field_errors
from src.apps.blog.models.post import Post
from src.apps.blog.repositories.post_repository import PostRepository
from src.apps.blog.schemas.post import (
    PostCreate,
    PostUpdate,
    prepare_post_input,
)

P = TypeVar("P", bound=BaseModel)

FIELD_LABELS = {"meta_description": "meta description"}

CREATE_MESSAGES = {
    "invalid": "The input data for creating the post is invalid or incomplete.",
    "title.required": "The title field is required.",
    "body.required": "The article content is required.",
    "body.string_type": "The article content must be a string.",
    "slug.unresolved": (
        "A slug could not be generated from the title. Please provide one."
    ),
    "slug.unique": (
        "This slug ({slug}) is already in use. Please choose another one "
        "or leave it blank for automatic generation."
    ),
    "publish_date.required_if": (
        'Since you marked the article as "published", '
        "the publish date must be specified."
    ),
}

UPDATE_MESSAGES = {
    "invalid": "The input data for updating the post is invalid or incomplete.",
    "title.required": "The title field is required when provided for update.",
    "slug.required": "The slug field is required when provided for update.",
    "body.required": "The content field is required when provided for update.",
    "body.string_type": "The article content must be a string.",
    "slug.unique": (
        "This slug ({slug}) is already taken by another post. "
        "Please choose a different one."
    ),
    "publish_date.required_if": (
        "The publish date is required when the post is marked as published."
    ),
}


class PostValidator:
    """Validates create and update payloads for posts."""

    def __init__(
        self,
        repository: PostRepository,
        logger: Optional[logging.Logger] = None,
        today: Callable[[], date] = settings.get_today,
    ):
        self.repository = repository
        self.logger = get_logger(__name__, logger)
        self.today = today

    async def validate_for_create(self, raw: Mapping[str, Any]) -> PostCreate:
        return await self._validate(
            PostCreate,
            raw,
            operation="create",
            context={"today": self.today},
            messages=CREATE_MESSAGES,
        )

    async def validate_for_update(self, raw: Mapping[str, Any], existing: Post) -> PostUpdate:
        """``existing`` is the stored post; its flag gates a lone ``publish_date``."""
        return await self._validate(
            PostUpdate,
            raw,
            operation="update",
            context={"today": self.today, "is_published": existing.is_published},
            messages=UPDATE_MESSAGES,
            existing_id=existing.id,
        )

    async def _validate(
        self,
        schema: Type[P],
        raw: Mapping[str, Any],
        *,
        operation: str,
        context: Dict[str, Any],
        messages: Dict[str, str],
        existing_id: Any = None,
    ) -> P:
        try:
            payload = schema.model_validate(raw, context=context)
        except ValidationError as e:
            errors = field_errors(e, messages, FIELD_LABELS)
            if "slug" not in errors:
                slug = prepare_post_input(raw, partial=operation == "update").get("slug")
                await self._check_slug_unique(slug, errors, existing_id, messages=messages)
            raise self._invalid(errors, operation, existing_id, messages) from e

        slug_errors: Dict[str, List[str]] = {}
        if "slug" in payload.model_fields_set:
            await self._check_slug_unique(
                payload.slug, slug_errors, existing_id, messages=messages
            )
        if slug_errors:
            raise self._invalid(slug_errors, operation, existing_id, messages)

        self.logger.info(
            "Post validation passed (%s): fields=%s",
            operation,
            sorted(payload.model_fields_set),
        )
        return payload

    def _invalid(
        self,
        errors: Dict[str, List[str]],
        operation: str,
        existing_id: Any,
        messages: Dict[str, str],
    ) -> exceptions.ValidationException:
        self.logger.warning(
            "Post validation failed (%s): %s",
            operation,
            errors,
            extra={"post_id": existing_id},
        )
        return exceptions.ValidationException(errors, detail=messages["invalid"])

    async def _check_slug_unique(
        self,
        slug: Any,
        errors: Dict[str, List[str]],
        existing_id: Any,
        *,
        messages: Dict[str, str],
    ) -> None:
        if not isinstance(slug, str) or not slug:
            return
        try:
            taken = await self.repository.slug_exists(slug, exclude_id=existing_id)
        except RepositoryError as e:
            self.logger.error("Slug uniqueness check failed: %s", e)
            raise exceptions.PersistenceException() from e
        if taken:
            errors["slug"] = [messages["slug.unique"].format(slug=slug)]
