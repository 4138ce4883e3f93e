from typing import Any, Callable, Dict, Generic, Optional, Type, TypeVar, Union
from sqlmodel import SQLModel, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from pydantic import BaseModel

from src.core.config import settings
from src.core.response.schemas import Page

T = TypeVar("T", bound=SQLModel)


class RepositoryError(Exception):
    """Custom exception for repository errors."""

    def __init__(self, message: str, operation: str = ""):
        super().__init__(message)
        self.operation = operation


class RepositoryIntegrityError(RepositoryError):
    """A constraint (unique index, not null...) rejected the write."""


class BaseRepository(Generic[T]):
    """Async CRUD over one SQLModel table with ``deleted_at`` soft deletes."""

    model: Type[T]

    def __init__(self, get_session: Callable[..., Any]):
        # get_session() must return an async context manager yielding an AsyncSession
        self.get_session = get_session

    def _handle_db_error(self, error: SQLAlchemyError, operation: str) -> None:
        """Handle database errors and raise appropriate exceptions."""
        if isinstance(error, IntegrityError):
            raise RepositoryIntegrityError(
                f"Database integrity error during {operation}: {error.orig}",
                operation,
            ) from error
        else:
            raise RepositoryError(
                f"Database error during {operation}: {error}", operation
            ) from error

    def _build_select_stmt(
        self, include_deleted: bool = False, only_deleted: bool = False, **filters
    ) -> Any:
        """Build select statement with optional filters and soft delete handling."""
        stmt = select(self.model)
        deleted_at = self.model.deleted_at  # type: ignore

        if only_deleted:
            stmt = stmt.where(deleted_at.is_not(None))
        elif not include_deleted:
            stmt = stmt.where(deleted_at.is_(None))

        # Apply additional filters
        for field, value in filters.items():
            if hasattr(self.model, field):
                stmt = stmt.where(getattr(self.model, field) == value)

        return stmt

    @staticmethod
    def _dump(obj_in: Union[Dict[str, Any], BaseModel]) -> Dict[str, Any]:
        if isinstance(obj_in, BaseModel):
            return obj_in.model_dump(exclude_unset=True)
        return dict(obj_in)

    # ----------------- READ ----------------- #
    async def get(
        self,
        item_id: Any,
        include_deleted: bool = False,
        only_deleted: bool = False,
        **filters,
    ) -> Optional[T]:
        """Get a single item by ID with optional additional filters."""
        async with self.get_session() as db:
            try:
                stmt = self._build_select_stmt(
                    include_deleted=include_deleted, only_deleted=only_deleted, **filters
                )
                stmt = stmt.where(self.model.id == item_id)  # type: ignore

                result = await db.exec(stmt)
                return result.first()
            except SQLAlchemyError as e:
                self._handle_db_error(e, "get")

    async def exists_where(
        self, field: str, value: Any, exclude_id: Any = None
    ) -> bool:  # type:ignore
        """True when any row, trashed or not, has ``field == value``."""
        column = getattr(self.model, field)
        async with self.get_session() as db:
            try:
                stmt = select(self.model.id).where(column == value)  # type: ignore
                if exclude_id is not None:
                    stmt = stmt.where(self.model.id != exclude_id)  # type: ignore

                result = await db.exec(stmt)
                return result.first() is not None
            except SQLAlchemyError as e:
                self._handle_db_error(e, "exists_where")

    async def paginate(
        self,
        page: int = 1,
        per_page: int = settings.DEFAULT_PER_PAGE,
        include_deleted: bool = False,
        only_deleted: bool = False,
        order_by: Optional[str] = None,
        **filters,
    ) -> Page[T]:  # type:ignore
        """Get one page of items, newest ``order_by`` first."""
        if page < 1:
            page = 1
        if per_page < 1 or per_page > settings.MAX_PER_PAGE:
            per_page = settings.DEFAULT_PER_PAGE

        async with self.get_session() as db:
            try:
                offset = (page - 1) * per_page

                # Build base query
                stmt = self._build_select_stmt(
                    include_deleted=include_deleted, only_deleted=only_deleted, **filters
                )

                # Get total count
                count_stmt = select(func.count()).select_from(stmt.subquery())
                total_result = await db.exec(count_stmt)
                total = total_result.one()

                order_column = getattr(self.model, order_by or "created_at")
                stmt = stmt.order_by(
                    order_column.desc(), self.model.id.desc()  # type: ignore
                )

                # Get paginated items
                result = await db.exec(stmt.offset(offset).limit(per_page))
                items = list(result.all())

                return Page(items=items, total=total, page=page, per_page=per_page)
            except SQLAlchemyError as e:
                self._handle_db_error(e, "paginate")

    # ----------------- WRITE ----------------- #
    async def create(
        self, obj_in: Union[Dict[str, Any], BaseModel]
    ) -> T:  # type:ignore
        """Create a new item."""
        data = self._dump(obj_in)
        data.pop("id", None)

        async with self.get_session() as db:
            try:
                obj = self.model(**data)  # type: ignore
                db.add(obj)
                await db.commit()
                await db.refresh(obj)
                return obj
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "create")

    async def update(
        self,
        item_id: Any,
        obj_in: Union[Dict[str, Any], BaseModel],
    ) -> Optional[T]:
        """Apply a partial update to an existing item."""
        update_data = self._dump(obj_in)

        # Remove ID from update data to prevent changing primary key
        update_data.pop("id", None)

        async with self.get_session() as db:
            try:
                db_obj = await db.get(self.model, item_id)
                if not db_obj:
                    return None

                for key, value in update_data.items():
                    if hasattr(db_obj, key):
                        setattr(db_obj, key, value)
                # bump even when nothing else changed
                setattr(db_obj, "updated_at", settings.get_now())

                await db.commit()
                await db.refresh(db_obj)
                return db_obj
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "update")

    # ----------------- DELETE / RESTORE ----------------- #
    async def _set_deleted_at(self, item_id: Any, value: Any, operation: str) -> Optional[T]:
        async with self.get_session() as db:
            try:
                db_obj = await db.get(self.model, item_id)
                if not db_obj:
                    return None

                setattr(db_obj, "deleted_at", value)
                await db.commit()
                await db.refresh(db_obj)
                return db_obj
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, operation)

    async def soft_delete(self, item_id: Any) -> Optional[T]:
        """Mark item as deleted instead of removing it."""
        return await self._set_deleted_at(item_id, settings.get_now(), "soft_delete")

    async def restore(self, item_id: Any) -> Optional[T]:
        """Restore a soft deleted item."""
        return await self._set_deleted_at(item_id, None, "restore")

    async def force_delete(self, item_id: Any) -> bool:  # type:ignore
        """Permanently delete the item from DB."""
        async with self.get_session() as db:
            try:
                db_obj = await db.get(self.model, item_id)
                if not db_obj:
                    return False

                await db.delete(db_obj)
                await db.commit()
                return True
            except SQLAlchemyError as e:
                await db.rollback()
                self._handle_db_error(e, "force_delete")
