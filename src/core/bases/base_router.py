from typing import Any, Callable, Dict, List, Optional
from fastapi import APIRouter, Body, Query, status

from src.core.bases.base_service import BaseService
from src.core.config import settings
from src.core.response.handlers import (
    exception_response,
    paginated_response,
    success_response,
)
from src.core import exceptions


class BaseRouter:
    """Base router class with soft-delete aware CRUD endpoints.

    ``validator`` must expose ``validate_for_create(raw)`` and
    ``validate_for_update(raw, existing)``; ``serializer`` turns a model
    instance into its public dict.
    """

    def __init__(
        self,
        service: BaseService,
        validator: Any,
        serializer: Callable[[Any], Dict[str, Any]],
        tags: Optional[List[str]] = None,
        prefix: str = "",
        dependencies: Optional[List[Callable]] = None,
    ):
        self.service = service
        self.validator = validator
        self.serializer = serializer
        self.name = service.resource_name
        self.tags = tags or [self.__class__.__name__.replace("Router", "")]
        self.prefix = prefix

        # Create router
        self.router = APIRouter(
            prefix=self.prefix,
            tags=self.tags,  # type:ignore
            dependencies=dependencies or [],  # type:ignore
        )

        # Register routes
        self._register_routes()

    def _register_routes(self) -> None:
        """Register all CRUD routes. Static paths go before ``/{item_id}``."""
        self._register_list()
        self._register_trashed()
        self._register_create()
        self._register_get_by_id()
        self._register_update()
        self._register_soft_delete()
        self._register_restore()
        self._register_force_delete()

    def _register_list(self) -> None:
        """Register GET / route with pagination."""
        @self.router.get(
            "",
            summary=f"List {self.name.lower()}s",
            responses={
                200: {"description": "Items retrieved successfully"},
                500: {"description": "Internal server error"}
            }
        )
        async def list_items(
            page: int = Query(1, ge=1),
            per_page: int = Query(
                settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE
            ),
        ):
            try:
                result = await self.service.get_list(page=page, per_page=per_page)
                return paginated_response(
                    result,
                    message=f"{self.name}s retrieved successfully",
                    serializer=self.serializer,
                )
            except exceptions.AppException as e:
                return exception_response(e)

    def _register_trashed(self) -> None:
        """Register GET /trashed route."""
        @self.router.get(
            "/trashed",
            summary=f"List trashed {self.name.lower()}s",
            responses={
                200: {"description": "Trashed items retrieved successfully"},
                500: {"description": "Internal server error"}
            }
        )
        async def list_trashed(
            page: int = Query(1, ge=1),
            per_page: int = Query(
                settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE
            ),
        ):
            try:
                result = await self.service.get_trashed(page=page, per_page=per_page)
                return paginated_response(
                    result,
                    message=f"Trashed {self.name.lower()}s retrieved successfully",
                    serializer=self.serializer,
                )
            except exceptions.AppException as e:
                return exception_response(e)

    def _register_create(self) -> None:
        """Register POST / route."""
        @self.router.post(
            "",
            status_code=status.HTTP_201_CREATED,
            summary=f"Create new {self.name.lower()}",
            responses={
                201: {"description": "Item created successfully"},
                422: {"description": "Validation error"},
                500: {"description": "Internal server error"}
            }
        )
        async def create_item(payload: Dict[str, Any] = Body(...)):
            try:
                data = await self.validator.validate_for_create(payload)
                item = await self.service.create(data)
                return success_response(
                    data=self.serializer(item),
                    message=f"{self.name} created successfully",
                    status_code=status.HTTP_201_CREATED,
                )
            except exceptions.AppException as e:
                return exception_response(e)

    def _register_get_by_id(self) -> None:
        """Register GET /{item_id} route."""
        @self.router.get(
            "/{item_id}",
            summary=f"Get {self.name.lower()} by ID",
            responses={
                200: {"description": "Item retrieved successfully"},
                404: {"description": "Item not found"},
                500: {"description": "Internal server error"}
            }
        )
        async def get_by_id(item_id: int):
            try:
                item = await self.service.get_by_id(item_id)
                return success_response(
                    data=self.serializer(item),
                    message=f"{self.name} retrieved successfully",
                )
            except exceptions.AppException as e:
                return exception_response(e)

    def _register_update(self) -> None:
        """Register PUT and PATCH /{item_id} routes."""
        @self.router.api_route(
            "/{item_id}",
            methods=["PUT", "PATCH"],
            summary=f"Update {self.name.lower()}",
            responses={
                200: {"description": "Item updated successfully"},
                404: {"description": "Item not found"},
                422: {"description": "Validation error"},
                500: {"description": "Internal server error"}
            }
        )
        async def update_item(item_id: int, payload: Dict[str, Any] = Body(...)):
            try:
                # unknown ids are a 404 even when the payload is invalid
                existing = await self.service.get_by_id(item_id)
                data = await self.validator.validate_for_update(payload, existing)
                item = await self.service.update(item_id, data, existing=existing)
                return success_response(
                    data=self.serializer(item),
                    message=f"{self.name} updated successfully",
                )
            except exceptions.AppException as e:
                return exception_response(e)

    def _register_soft_delete(self) -> None:
        """Register DELETE /{item_id} route (soft delete)."""
        @self.router.delete(
            "/{item_id}",
            summary=f"Move {self.name.lower()} to trash",
            responses={
                200: {"description": "Item soft deleted successfully"},
                404: {"description": "Item not found"},
                500: {"description": "Internal server error"}
            }
        )
        async def soft_delete_item(item_id: int):
            try:
                await self.service.soft_delete(item_id)
                return success_response(
                    data=None,
                    message=f"{self.name} moved to trash successfully",
                )
            except exceptions.AppException as e:
                return exception_response(e)

    def _register_restore(self) -> None:
        """Register POST /{item_id}/restore route."""
        @self.router.post(
            "/{item_id}/restore",
            summary=f"Restore trashed {self.name.lower()}",
            responses={
                200: {"description": "Item restored successfully"},
                404: {"description": "Item not found"},
                409: {"description": "Item is not in the trash"},
                500: {"description": "Internal server error"}
            }
        )
        async def restore_item(item_id: int):
            try:
                item = await self.service.restore(item_id)
                return success_response(
                    data=self.serializer(item),
                    message=f"{self.name} restored successfully",
                )
            except exceptions.AppException as e:
                return exception_response(e)

    def _register_force_delete(self) -> None:
        """Register DELETE /{item_id}/force route (permanent delete)."""
        @self.router.delete(
            "/{item_id}/force",
            summary=f"Permanently delete {self.name.lower()}",
            responses={
                200: {"description": "Item permanently deleted successfully"},
                404: {"description": "Item not found"},
                500: {"description": "Internal server error"}
            }
        )
        async def force_delete_item(item_id: int):
            try:
                await self.service.force_delete(item_id)
                return success_response(
                    data=None,
                    message=f"{self.name} permanently deleted successfully",
                )
            except exceptions.AppException as e:
                return exception_response(e)

    def get_router(self) -> APIRouter:
        """Get the FastAPI router instance."""
        return self.router
