import logging
from typing import Optional

from botocore.client import BaseClient
from fastapi import APIRouter, Depends

from text_files_api.config.settings import Settings
from text_files_api.database.tags import TagStore
from text_files_api.dependencies import get_s3_client, get_settings_from_app, get_tag_store
from text_files_api.errors import STORE_EXCEPTIONS
from text_files_api.schemas import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(
    settings: Settings = Depends(get_settings_from_app),
    s3_client: BaseClient = Depends(get_s3_client),
    tag_store: Optional[TagStore] = Depends(get_tag_store),
) -> HealthResponse:
    """
    Health check endpoint for monitoring API status and store reachability.

    Failures are reported per component without detail; the detail is logged.
    """
    components = {
        "api": "ready",
        "object_store": "ready",
        "metadata_store": "ready" if tag_store is not None else "disabled",
    }

    try:
        s3_client.head_bucket(Bucket=settings.s3_bucket_name)
    except STORE_EXCEPTIONS as e:
        logger.warning(f"Health check: bucket '{settings.s3_bucket_name}' unreachable: {e}")
        components["object_store"] = "error"

    if tag_store is not None:
        try:
            tag_store.ping()
        except STORE_EXCEPTIONS as e:
            logger.warning(f"Health check: metadata store unreachable: {e}")
            components["metadata_store"] = "error"

    status = "degraded" if "error" in components.values() else "ok"
    return HealthResponse(status=status, components=components)
