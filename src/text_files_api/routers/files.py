import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from botocore.client import BaseClient
from fastapi import APIRouter, Depends, Path, status
from typing_extensions import Annotated

from text_files_api.config.settings import Settings, TagUpdatePolicy
from text_files_api.database.tags import TagStore
from text_files_api.dependencies import get_s3_client, get_settings_from_app, get_tag_store
from text_files_api.errors import (
    STORE_EXCEPTIONS,
    InvalidRequestError,
    ObjectNotFoundError,
    translate_store_errors,
)
from text_files_api.s3.delete_objects import delete_s3_object
from text_files_api.s3.read_objects import fetch_s3_text, list_s3_object_keys, object_exists_in_s3
from text_files_api.s3.write_objects import upload_s3_text
from text_files_api.schemas import (
    DeleteFileResponse,
    ErrorResponse,
    FileContentRequest,
    FileEntry,
    GetFileResponse,
    GetFilesResponse,
    PostFileResponse,
    PutFileResponse,
)
from text_files_api.utils.filenames import generate_filename

logger = logging.getLogger(__name__)

router = APIRouter()

TEXT_REQUIRED = "Text is required in the request body."

FilenamePath = Annotated[str, Path(description="The key of the file in the bucket")]


@contextmanager
def log_store_divergence(filename: str, operation: str) -> Iterator[None]:
    """Log that the object write went through but the following tag write did not."""
    try:
        yield
    except STORE_EXCEPTIONS:
        logger.error(
            f"{operation} of '{filename}' reached the object store but not the metadata store; "
            "object and tags are out of sync"
        )
        raise


def require_text(body: FileContentRequest) -> str:
    if not body.text:
        raise InvalidRequestError(TEXT_REQUIRED)
    return body.text


@router.get(
    "/files",
    response_model=GetFilesResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
def list_files(
    settings: Settings = Depends(get_settings_from_app),
    s3_client: BaseClient = Depends(get_s3_client),
    tag_store: Optional[TagStore] = Depends(get_tag_store),
) -> GetFilesResponse:
    """
    List every file in the bucket.

    With tags enabled each entry is `{filename, tags}`; otherwise entries are bare filenames.
    """
    with translate_store_errors("Error listing files."):
        keys = list_s3_object_keys(settings.s3_bucket_name, s3_client=s3_client)
        if tag_store is None:
            return GetFilesResponse(files=keys)
        tags_by_file = tag_store.get_tags_for(keys)

    return GetFilesResponse(
        files=[FileEntry(filename=key, tags=tags_by_file.get(key, [])) for key in keys]
    )


@router.post(
    "/files",
    status_code=status.HTTP_201_CREATED,
    response_model=PostFileResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def create_file(
    body: FileContentRequest,
    settings: Settings = Depends(get_settings_from_app),
    s3_client: BaseClient = Depends(get_s3_client),
    tag_store: Optional[TagStore] = Depends(get_tag_store),
) -> PostFileResponse:
    """
    Store `text` under a new timestamp-derived filename.

    The object is written first, then one tag row per tag (or a single empty
    row when no tags are given).
    """
    text = require_text(body)
    filename = generate_filename(settings.file_suffix)

    with translate_store_errors("Error saving the file."):
        upload_s3_text(settings.s3_bucket_name, filename, text, s3_client=s3_client)
        logger.info(f"Stored new file {filename} ({len(text)} chars)")

        if tag_store is None:
            return PostFileResponse(filename=filename)

        tags: List[str] = body.tags or []
        with log_store_divergence(filename, "Create"):
            tag_store.add_tags(filename, tags)

    return PostFileResponse(filename=filename, tags=tags)


@router.get(
    "/files/{filename}",
    response_model=GetFileResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def get_file(
    filename: FilenamePath,
    settings: Settings = Depends(get_settings_from_app),
    s3_client: BaseClient = Depends(get_s3_client),
    tag_store: Optional[TagStore] = Depends(get_tag_store),
) -> GetFileResponse:
    """Return the text of a file, and its tags when tags are enabled."""
    with translate_store_errors("Error reading the file."):
        content = fetch_s3_text(settings.s3_bucket_name, filename, s3_client=s3_client)
        tags = tag_store.get_tags(filename) if tag_store is not None else None

    return GetFileResponse(content=content, tags=tags)


@router.put(
    "/files/{filename}",
    response_model=PutFileResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def update_file(
    body: FileContentRequest,
    filename: FilenamePath,
    settings: Settings = Depends(get_settings_from_app),
    s3_client: BaseClient = Depends(get_s3_client),
    tag_store: Optional[TagStore] = Depends(get_tag_store),
) -> PutFileResponse:
    """
    Overwrite the text of a file, creating the object if it does not exist.

    Given `tags` replace the stored set. Without `tags`, the stored set is kept
    or cleared according to the `omitted_tags_on_update` setting.
    """
    text = require_text(body)

    with translate_store_errors("Error updating the file."):
        upload_s3_text(settings.s3_bucket_name, filename, text, s3_client=s3_client)
        logger.info(f"Updated file {filename} ({len(text)} chars)")

        tags: Optional[List[str]] = None
        if tag_store is not None:
            with log_store_divergence(filename, "Update"):
                if body.tags is not None:
                    tags = body.tags
                    tag_store.replace_tags(filename, tags)
                elif settings.omitted_tags_on_update == TagUpdatePolicy.CLEAR:
                    tags = []
                    tag_store.replace_tags(filename, tags)
                else:
                    tags = tag_store.get_tags(filename)

    return PutFileResponse(filename=filename, message="File updated successfully.", tags=tags)


@router.delete(
    "/files/{filename}",
    response_model=DeleteFileResponse,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def delete_file(
    filename: FilenamePath,
    settings: Settings = Depends(get_settings_from_app),
    s3_client: BaseClient = Depends(get_s3_client),
    tag_store: Optional[TagStore] = Depends(get_tag_store),
) -> DeleteFileResponse:
    """Delete a file and all of its tag rows."""
    with translate_store_errors("Error deleting the file."):
        if not object_exists_in_s3(settings.s3_bucket_name, filename, s3_client=s3_client):
            raise ObjectNotFoundError(filename)

        delete_s3_object(settings.s3_bucket_name, filename, s3_client=s3_client)
        logger.info(f"Deleted file {filename}")

        if tag_store is not None:
            with log_store_divergence(filename, "Delete"):
                removed = tag_store.delete_tags(filename)
            logger.debug(f"Removed {removed} tag rows of {filename}")

    return DeleteFileResponse(message="File deleted successfully.")
