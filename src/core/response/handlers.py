"""Uniform response envelope shared by every endpoint."""

import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.core import exceptions
from src.core.response.schemas import BaseResponse, ErrorResponse, Page, PaginatedResponse
from src.core.validation import error_field

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def build_envelope(
    data: Any = None,
    message: str = "",
    error_kind: Optional[str] = None,
    errors: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, Any]:
    """Map a result or an error onto the envelope dict.

    ``errors`` only appears in the output when field errors were given.
    """
    if error_kind is None and errors is None:
        body = BaseResponse(status="success", message=message, data=data)
        return jsonable_encoder(body)

    body = ErrorResponse(message=message, data=data, errors=errors)
    payload = jsonable_encoder(body)
    if errors is None:
        payload.pop("errors", None)
    return payload


def success_response(
    data: Any = None,
    message: str = "Operation done",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=build_envelope(data=data, message=message)
    )


def paginated_response(
    page: Page,
    message: str = "Items retrieved successfully",
    serializer: Optional[Callable[[Any], Any]] = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    items = [serializer(item) for item in page.items] if serializer else page.items
    body = PaginatedResponse(message=message, data=items, pagination=page.meta())
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def error_response(
    message: str = "Operation failed",
    status_code: int = status.HTTP_400_BAD_REQUEST,
    errors: Optional[Dict[str, List[str]]] = None,
    error_code: str = "ERROR",
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=build_envelope(message=message, error_kind=error_code, errors=errors),
    )


def exception_response(exc: exceptions.AppException) -> JSONResponse:
    """Translate a known application exception into its envelope."""
    errors = exc.errors if isinstance(exc, exceptions.ValidationException) else None
    return error_response(
        message=exc.detail,
        status_code=exc.status_code,
        errors=errors,
        error_code=exc.error_code,
    )


async def app_exception_handler(
    request: Request, exc: exceptions.AppException
) -> JSONResponse:
    return exception_response(exc)


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        errors.setdefault(error_field(error), []).append(error.get("msg", "Invalid value"))
    return error_response(
        message="The given data was invalid.",
        status_code=422,
        errors=errors,
        error_code="VALIDATION_ERROR",
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return error_response(
        message=INTERNAL_ERROR_MESSAGE,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code="INTERNAL_ERROR",
    )
