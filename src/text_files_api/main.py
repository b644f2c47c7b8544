import logging
import sqlite3
from contextlib import asynccontextmanager
from textwrap import dedent
from typing import Optional

import pydantic
from botocore.client import BaseClient
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from text_files_api.config.settings import Settings, get_settings
from text_files_api.database.tags import TagStore
from text_files_api.errors import (
    FilesApiError,
    StartupError,
    handle_broad_exceptions,
    handle_files_api_errors,
    handle_pydantic_validation_errors,
    handle_request_validation_errors,
)
from text_files_api.routers.files import router as files_router
from text_files_api.routers.health import router as health_router
from text_files_api.routers.index import router as index_router
from text_files_api.routers.search import router as search_router
from text_files_api.s3.bucket import ensure_bucket_exists
from text_files_api.s3.client import create_s3_client

# Set up logging
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route all loggers to stderr at `level`."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


def load_settings() -> Settings:
    """Read settings from the environment, turning invalid or missing values into a `StartupError`."""
    try:
        return get_settings()
    except pydantic.ValidationError as err:
        raise StartupError(f"Invalid configuration: {err}") from err


def init_tag_store(settings: Settings) -> TagStore:
    """Open the metadata store and make sure its table exists; any failure is fatal."""
    try:
        tag_store = TagStore(settings.database_url, pool_size=settings.database_pool_size)
        tag_store.init_table()
    except (sqlite3.Error, ValueError) as err:
        raise StartupError(f"Could not initialize the metadata store: {err}") from err
    return tag_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    tag_store: Optional[TagStore] = app.state.tag_store
    if tag_store is not None:
        tag_store.close()


def create_app(settings: Optional[Settings] = None, s3_client: Optional[BaseClient] = None) -> FastAPI:
    """
    Create a FastAPI application.

    The bucket is ensured best-effort, then (with tags enabled) the tags table;
    a metadata store failure raises `StartupError`.
    """
    settings = settings or load_settings()
    s3_client = s3_client or create_s3_client(settings)

    ensure_bucket_exists(settings.s3_bucket_name, s3_client, region=settings.aws_region)
    tag_store = init_tag_store(settings) if settings.tags_enabled else None

    app = FastAPI(
        title="Text Files API",
        summary="Store free-text files in an S3 bucket and find them by tag",
        version="v1",
        description=dedent(
            """\
        | Helpful Links | Notes |
        | --- | --- |
        | [FastAPI Documentation](https://fastapi.tiangolo.com/) | |
        | [Interactive docs](/docs) | Try every route from the browser |
        """
        ),
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.settings = settings
    app.state.s3_client = s3_client
    app.state.tag_store = tag_store

    app.include_router(index_router, tags=["index"])
    app.include_router(files_router, tags=["files"])
    if settings.tags_enabled:
        app.include_router(search_router, tags=["search"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=FilesApiError,
        handler=handle_files_api_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    logger.info(
        f"Serving bucket '{settings.s3_bucket_name}' "
        f"(tags {'enabled' if settings.tags_enabled else 'disabled'}, index page '{settings.index_page.value}')"
    )
    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    from text_files_api.cli import cli

    cli(["serve"])
