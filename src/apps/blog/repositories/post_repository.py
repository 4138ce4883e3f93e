"""Post repository."""

from typing import Any, Optional

from src.core.bases.base_repository import BaseRepository
from src.apps.blog.models.post import Post


class PostRepository(BaseRepository[Post]):
    """Post repository class."""

    model = Post

    async def slug_exists(self, slug: str, exclude_id: Optional[Any] = None) -> bool:
        """Slugs are unique across active and trashed posts alike."""
        return await self.exists_where("slug", slug, exclude_id=exclude_id)
