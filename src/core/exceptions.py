from typing import Dict, List, Optional

from fastapi import status


class AppException(Exception):
    """Base exception for errors that are reported through the API envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "ERROR"

    def __init__(self, detail: str = "An error occurred"):
        super().__init__(detail)
        self.detail = detail


class ServiceException(AppException):
    error_code = "SERVICE_ERROR"


class PersistenceException(ServiceException):
    """The store failed; the detail never carries driver output."""

    error_code = "PERSISTENCE_ERROR"

    def __init__(self, detail: str = "A storage error occurred. Please try again later."):
        super().__init__(detail)


class NotFoundException(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, detail: str = "Item not found"):
        super().__init__(detail)


class InvalidStateException(AppException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "INVALID_STATE"


class ValidationException(AppException):
    status_code = 422
    error_code = "VALIDATION_ERROR"

    def __init__(
        self,
        errors: Optional[Dict[str, List[str]]] = None,
        detail: str = "The given data was invalid.",
    ):
        super().__init__(detail)
        self.errors: Dict[str, List[str]] = errors or {}
