"""Error taxonomy for the Text Files API and the handlers that turn it into HTTP responses."""

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

import pydantic
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# failures of either remote store that surface to the client as a generic 500
STORE_EXCEPTIONS = (ClientError, BotoCoreError, sqlite3.Error)


class FilesApiError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(FilesApiError):
    """A required request field is missing or empty."""

    status_code = status.HTTP_400_BAD_REQUEST


class ObjectNotFoundError(FilesApiError):
    """The requested object is not in the bucket."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, object_key: str, message: str = "File not found."):
        super().__init__(message)
        self.object_key = object_key


class StoreError(FilesApiError):
    """The object store or the metadata store failed. The message is generic by construction."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StartupError(Exception):
    """Configuration or store initialization failed; the process should not serve traffic."""


@contextmanager
def translate_store_errors(message: str) -> Iterator[None]:
    """
    Convert remote store failures into a `StoreError` carrying only `message`.

    The underlying error is logged here and never reaches the client.
    `FilesApiError`s raised inside the block pass through untouched.
    """
    try:
        yield
    except STORE_EXCEPTIONS as err:
        logger.error(f"{message} {type(err).__name__}: {err}")
        raise StoreError(message) from err


async def handle_files_api_errors(request: Request, exc: FilesApiError) -> JSONResponse:
    """Render a `FilesApiError` as `{"error": message}`."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and query strings are client errors: answer 400, not 422."""
    errors = exc.errors()
    logger.info(f"Rejected request to {request.url.path}: {errors}")
    first = errors[0] if errors else {}
    detail = first.get("msg", "Invalid request.")
    if first.get("type") == "json_invalid":
        # the location of a decode error is a byte offset, not a field
        location = ""
    else:
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"{location}: {detail}" if location else detail},
    )


async def handle_pydantic_validation_errors(request: Request, exc: pydantic.ValidationError) -> JSONResponse:
    """Validation failures while building responses are server bugs."""
    logger.error(f"Response validation failed for {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Handle any exception that propagates out of the route handlers."""
    try:
        return await call_next(request)
    except Exception:  # pylint: disable=broad-except
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
