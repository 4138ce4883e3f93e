"""Post router."""

from src.core.database import get_session
from src.core.bases.base_router import BaseRouter
from src.apps.blog.services.post_service import PostService
from src.apps.blog.repositories.post_repository import PostRepository
from src.apps.blog.schemas.post import serialize_post
from src.apps.blog.validators.post_validator import PostValidator


def get_post_repository(session_factory=get_session):
    """Get post repository instance."""
    return PostRepository(session_factory)


def get_post_service(repository: PostRepository):
    """Get post service instance."""
    return PostService(repository)


class PostRouter(BaseRouter):
    """Post router class."""

    def __init__(self, session_factory=get_session):
        repository = get_post_repository(session_factory)
        super().__init__(
            service=get_post_service(repository),
            validator=PostValidator(repository),
            serializer=serialize_post,
            prefix="/posts",
            tags=["Posts"]
        )


# Router instance
router = PostRouter().get_router()
