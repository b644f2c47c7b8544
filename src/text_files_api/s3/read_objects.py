"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import TYPE_CHECKING, List

from botocore.exceptions import ClientError

from text_files_api.errors import ObjectNotFoundError

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

# error codes S3-compatible servers use for a missing key
NOT_FOUND_ERROR_CODES = {"NoSuchKey", "404", "NotFound"}


def is_not_found_error(err: ClientError) -> bool:
    return err.response.get("Error", {}).get("Code") in NOT_FOUND_ERROR_CODES


def object_exists_in_s3(bucket_name: str, object_key: str, s3_client: "S3Client") -> bool:
    """
    Check if an object exists in the S3 bucket using head_object.

    :param bucket_name: Name of the S3 bucket.
    :param object_key: Key of the object to check.
    :param s3_client: A boto3 S3 client.

    :return: True if the object exists, False otherwise.
    """
    try:
        s3_client.head_object(Bucket=bucket_name, Key=object_key)
        return True
    except ClientError as err:
        if is_not_found_error(err):
            return False
        raise


def fetch_s3_text(bucket_name: str, object_key: str, s3_client: "S3Client") -> str:
    """
    Fetch an object and decode its body as UTF-8, replacing undecodable bytes.

    :raises ObjectNotFoundError: if the key is not in the bucket.
    """
    try:
        response = s3_client.get_object(Bucket=bucket_name, Key=object_key)
    except ClientError as err:
        if is_not_found_error(err):
            raise ObjectNotFoundError(object_key) from err
        raise
    return response["Body"].read().decode("utf-8", errors="replace")


def list_s3_object_keys(bucket_name: str, s3_client: "S3Client") -> List[str]:
    """
    List every key in the bucket, following continuation tokens.

    :param bucket_name: Name of the S3 bucket.
    :param s3_client: A boto3 S3 client.

    :return: Keys in the order S3 returns them (lexicographic).
    """
    paginator = s3_client.get_paginator("list_objects_v2")
    keys: List[str] = []
    for page in paginator.paginate(Bucket=bucket_name):
        keys.extend(obj["Key"] for obj in page.get("Contents", []))
    return keys
