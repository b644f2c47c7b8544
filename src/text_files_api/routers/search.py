import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from text_files_api.database.tags import TagStore
from text_files_api.dependencies import get_tag_store
from text_files_api.errors import InvalidRequestError, translate_store_errors
from text_files_api.schemas import ErrorResponse, SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_tags_param(tags: str) -> List[str]:
    """Split a comma-separated tag list, dropping blank entries."""
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def search_files(
    tags: Optional[str] = Query(None, description="Comma-separated tags; a file matches if it has any of them"),
    tag_store: TagStore = Depends(get_tag_store),
) -> SearchResponse:
    """Find the files carrying at least one of the given tags."""
    if tags is None:
        raise InvalidRequestError("Tags query parameter is required.")
    tag_list = parse_tags_param(tags)
    if not tag_list:
        raise InvalidRequestError("Tags query parameter must name at least one tag.")

    with translate_store_errors("Error searching files."):
        filenames = tag_store.search_filenames(tag_list)
    logger.debug(f"Search for {tag_list} matched {len(filenames)} files")

    return SearchResponse(filenames=filenames)
