"""FastAPI dependencies resolving the objects built once in `create_app`."""

from typing import Optional

from botocore.client import BaseClient
from fastapi import Request

from text_files_api.config.settings import Settings
from text_files_api.database.tags import TagStore


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_s3_client(request: Request) -> BaseClient:
    return request.app.state.s3_client


def get_tag_store(request: Request) -> Optional[TagStore]:
    """The metadata store, or None when tags are disabled."""
    return request.app.state.tag_store
