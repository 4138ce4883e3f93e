"""Post service."""

import logging
from typing import Optional

from src.core import exceptions
from src.core.bases.base_repository import RepositoryIntegrityError
from src.core.bases.base_service import BaseService
from src.apps.blog.repositories.post_repository import PostRepository
from src.apps.blog.models.post import Post

SLUG_TAKEN_MESSAGE = "This slug is already in use. Please choose another one."
INVALID_INPUT_MESSAGES = {
    "create": "The input data for creating the post is invalid or incomplete.",
    "update": "The input data for updating the post is invalid or incomplete.",
}


class PostService(BaseService[Post]):
    """Post lifecycle service.

    Payloads reaching this class are already validated by ``PostValidator``.
    """

    resource_name = "Post"

    def __init__(
        self, repository: PostRepository, logger: Optional[logging.Logger] = None
    ):
        super().__init__(repository, logger=logger)

    def _on_integrity_error(
        self, error: RepositoryIntegrityError, operation: str
    ) -> exceptions.AppException:
        # lost a race against another write of the same slug
        if "slug" in str(error).lower():
            return exceptions.ValidationException(
                {"slug": [SLUG_TAKEN_MESSAGE]},
                detail=INVALID_INPUT_MESSAGES.get(operation, "The given data was invalid."),
            )
        return super()._on_integrity_error(error, operation)
