import logging
from typing import Any, Awaitable, Dict, Generic, Optional, TypeVar, Union

from pydantic import BaseModel
from sqlmodel import SQLModel

from src.core import exceptions
from src.core.bases.base_repository import (
    BaseRepository,
    RepositoryError,
    RepositoryIntegrityError,
)
from src.core.config import settings
from src.core.logger import get_logger
from src.core.response.schemas import Page

T = TypeVar("T", bound=SQLModel)
R = TypeVar("R")


class BaseService(Generic[T]):
    """Lifecycle operations over a soft-deletable repository.

    States are Active (``deleted_at`` is null), Trashed (``deleted_at`` set)
    and Gone (row purged). Legal transitions:

    - Active --soft_delete--> Trashed
    - Trashed --restore--> Active
    - Active | Trashed --force_delete--> Gone
    """

    resource_name: str = "Item"

    def __init__(
        self,
        repository: BaseRepository[T],
        logger: Optional[logging.Logger] = None,
    ):
        self.repository = repository
        self.logger = get_logger(__name__, logger)

    async def _run(self, operation: str, call: Awaitable[R], **context: Any) -> R:
        """Await a repository call, translating store failures."""
        try:
            return await call
        except RepositoryIntegrityError as e:
            self.logger.warning(
                "%s %s rejected by a constraint: %s", self.resource_name, operation, e
            )
            raise self._on_integrity_error(e, operation) from e
        except RepositoryError as e:
            self.logger.error(
                "Failed to %s %s: %s | %s", operation, self.resource_name.lower(), e, context
            )
            raise exceptions.PersistenceException() from e

    def _on_integrity_error(
        self, error: RepositoryIntegrityError, operation: str
    ) -> exceptions.AppException:
        return exceptions.PersistenceException()

    def _not_found(self, item_id: Any) -> exceptions.NotFoundException:
        return exceptions.NotFoundException(f"{self.resource_name} not found")

    # ----------------- READ ----------------- #
    async def get_list(
        self, page: int = 1, per_page: int = settings.DEFAULT_PER_PAGE
    ) -> Page[T]:
        self.logger.info("Fetching %s page %s (per_page=%s)", self.resource_name, page, per_page)
        return await self._run(
            "list",
            self.repository.paginate(page=page, per_page=per_page, order_by="created_at"),
        )

    async def get_trashed(
        self, page: int = 1, per_page: int = settings.DEFAULT_PER_PAGE
    ) -> Page[T]:
        self.logger.info(
            "Fetching trashed %s page %s (per_page=%s)", self.resource_name, page, per_page
        )
        return await self._run(
            "list trashed",
            self.repository.paginate(
                page=page, per_page=per_page, only_deleted=True, order_by="deleted_at"
            ),
        )

    async def get_by_id(self, item_id: Any, include_deleted: bool = False) -> T:
        item = await self._run(
            "get",
            self.repository.get(item_id, include_deleted=include_deleted),
            item_id=item_id,
        )
        if item is None:
            raise self._not_found(item_id)
        return item

    # ----------------- WRITE ----------------- #
    async def create(self, data: Union[Dict[str, Any], BaseModel]) -> T:
        item = await self._run("create", self.repository.create(data))
        self.logger.info("%s created: id=%s", self.resource_name, getattr(item, "id", None))
        return item

    async def update(
        self,
        item_id: Any,
        data: Union[Dict[str, Any], BaseModel],
        existing: Optional[T] = None,
    ) -> T:
        """Update an active item. Pass ``existing`` when the caller already loaded it."""
        if existing is None:
            await self.get_by_id(item_id)
        item = await self._run(
            "update", self.repository.update(item_id, data), item_id=item_id
        )
        if item is None:
            raise self._not_found(item_id)
        self.logger.info("%s updated: id=%s", self.resource_name, item_id)
        return item

    # ----------------- DELETE / RESTORE ----------------- #
    async def soft_delete(self, item_id: Any) -> T:
        """Move an active item to the trash; trashed ids are not found."""
        await self.get_by_id(item_id)
        item = await self._run(
            "soft delete", self.repository.soft_delete(item_id), item_id=item_id
        )
        if item is None:
            raise self._not_found(item_id)
        self.logger.info("%s moved to trash: id=%s", self.resource_name, item_id)
        return item

    async def restore(self, item_id: Any) -> T:
        existing = await self.get_by_id(item_id, include_deleted=True)
        if getattr(existing, "deleted_at", None) is None:
            self.logger.warning(
                "Attempted to restore a %s that is not in the trash: id=%s",
                self.resource_name.lower(),
                item_id,
            )
            raise exceptions.InvalidStateException(
                f"{self.resource_name} is not in the trash and cannot be restored."
            )

        item = await self._run("restore", self.repository.restore(item_id), item_id=item_id)
        if item is None:
            raise self._not_found(item_id)
        self.logger.info("%s restored: id=%s", self.resource_name, item_id)
        return item

    async def force_delete(self, item_id: Any) -> None:
        """Purge an item whether it is active or trashed. Irreversible."""
        await self.get_by_id(item_id, include_deleted=True)
        self.logger.warning("Permanently deleting %s: id=%s", self.resource_name.lower(), item_id)
        deleted = await self._run(
            "force delete", self.repository.force_delete(item_id), item_id=item_id
        )
        if not deleted:
            raise self._not_found(item_id)
