# app/core/responses.py
import logging
import math
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import AppError, StorageError

logger = logging.getLogger(__name__)


def success(
    data: Any = None,
    message: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """
    Standard success envelope:

        {"success": true, "data": ..., "message": "..."}

    `data` / `message` are omitted when not provided.
    """
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = jsonable_encoder(data)
    if message:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=body)


def paginated(data: list[Any], page: int, limit: int, total: int) -> JSONResponse:
    """Success envelope with a `pagination` block."""
    total_pages = math.ceil(total / limit) if limit else 0
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "data": jsonable_encoder(data),
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "total_pages": total_pages,
            },
        },
    )


def error(status_code: int, message: str) -> JSONResponse:
    """
    Error envelope:

        {"success": false, "error": "...", "code": 401}
    """
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "code": status_code},
    )


# ----- Exception handlers -----


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, StorageError):
        # Never leak driver messages to clients.
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return error(exc.status_code, StorageError.default_message)
    return error(exc.status_code, exc.message)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    response = error(exc.status_code, message)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "Invalid request")
    return error(
        status.HTTP_400_BAD_REQUEST,
        f"{loc}: {msg}" if loc else msg,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors, HTTP errors and input validation onto the envelope."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
