"""Startup-time bucket provisioning."""

import logging
from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError

from text_files_api.s3.read_objects import NOT_FOUND_ERROR_CODES
from text_files_api.utils.decorators import log_startup_step

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

# us-east-1 rejects an explicit LocationConstraint
DEFAULT_REGION = "us-east-1"


def bucket_exists(bucket_name: str, s3_client: "S3Client") -> bool:
    """
    Check whether a bucket exists and is reachable.

    :param bucket_name: The name of the S3 bucket.
    :param s3_client: A boto3 S3 client.
    :return: False if the bucket is missing; any other failure is raised.
    """
    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError as err:
        error_code = err.response.get("Error", {}).get("Code")
        if error_code in NOT_FOUND_ERROR_CODES or error_code == "NoSuchBucket":
            return False
        raise
    return True


def create_bucket(bucket_name: str, s3_client: "S3Client", region: str = DEFAULT_REGION) -> None:
    """Create a bucket, passing a location constraint outside the default region."""
    if region and region != DEFAULT_REGION:
        s3_client.create_bucket(
            Bucket=bucket_name,
            CreateBucketConfiguration={"LocationConstraint": region},
        )
    else:
        s3_client.create_bucket(Bucket=bucket_name)


@log_startup_step("ensure bucket")
def ensure_bucket_exists(bucket_name: str, s3_client: "S3Client", region: str = DEFAULT_REGION) -> bool:
    """
    Make sure the bucket exists, creating it if needed.

    Best-effort: store failures are logged and reported by the return value,
    never raised, so the API can still come up against a bucket that is
    provisioned out of band.

    :return: True if the bucket exists (or was created) when this returns.
    """
    try:
        if bucket_exists(bucket_name, s3_client):
            logger.info(f"Bucket '{bucket_name}' already exists.")
            return True
        create_bucket(bucket_name, s3_client, region=region)
        logger.info(f"Bucket '{bucket_name}' created.")
        return True
    except (ClientError, BotoCoreError) as err:
        logger.warning(f"Could not ensure bucket '{bucket_name}' exists: {err}")
        return False
