from math import ceil
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class BaseResponse(BaseModel):
    status: Literal["success", "error"] = "success"
    message: str = Field(default="")
    data: Optional[Any] = None


class PaginationMeta(BaseModel):
    total: int = Field(default=0)
    count: int = Field(default=0)
    per_page: int = Field(default=15)
    current_page: int = Field(default=1)
    total_pages: int = Field(default=1)


class PaginatedResponse(BaseResponse):
    data: List[Any] = []
    pagination: PaginationMeta = Field(default_factory=PaginationMeta)


class ErrorResponse(BaseResponse):
    status: Literal["success", "error"] = "error"
    errors: Optional[Dict[str, List[str]]] = None


class Page(BaseModel, Generic[T]):
    """One offset slice of a query result."""

    items: List[T] = []
    total: int = 0
    page: int = 1
    per_page: int = 15

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def total_pages(self) -> int:
        # an empty result still has one (empty) page
        return max(1, ceil(self.total / self.per_page))

    def meta(self) -> PaginationMeta:
        return PaginationMeta(
            total=self.total,
            count=self.count,
            per_page=self.per_page,
            current_page=self.page,
            total_pages=self.total_pages,
        )
