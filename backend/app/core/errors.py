"""Workflow exceptions and their translation into the response envelope."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.app.core.logging import get_logger
from backend.app.schemas.envelope import failure

logger = get_logger(__name__)


class WorkflowError(Exception):
    """Base class for errors raised by the workflow services."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordNotFoundError(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidTransitionError(WorkflowError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, record_id: int, current: str, target: str):
        super().__init__(f"Record {record_id} cannot move from {current} to {target}")
        self.record_id = record_id
        self.current = current
        self.target = target


class DuplicateRecordError(WorkflowError):
    status_code = status.HTTP_409_CONFLICT


class WorkflowValidationError(WorkflowError):
    status_code = 422


async def _workflow_error_handler(request: Request, exc: WorkflowError):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=failure(exc.message))


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=failure(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid request")
        messages.append(f"{location}: {message}" if location else message)
    return JSONResponse(
        status_code=422,
        content=failure("; ".join(messages) or "Invalid request"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WorkflowError, _workflow_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
