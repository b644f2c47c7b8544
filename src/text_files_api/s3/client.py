"""Construction of the boto3 S3 client from application settings."""

from typing import TYPE_CHECKING

import boto3
from botocore.config import Config

from text_files_api.config.settings import Settings

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


def create_s3_client(settings: Settings) -> "S3Client":
    """
    Create an S3 client for the configured endpoint.

    Path-style addressing is forced so that self-hosted S3-compatible servers
    (MinIO, Ceph, localstack) work without wildcard DNS.
    """
    return boto3.client(
        "s3",
        endpoint_url=settings.s3_endpoint,
        aws_access_key_id=settings.s3_access_key_id,
        aws_secret_access_key=settings.s3_secret_access_key,
        region_name=settings.aws_region,
        config=Config(s3={"addressing_style": "path"}),
    )
