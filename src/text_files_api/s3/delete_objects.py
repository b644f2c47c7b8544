"""Functions for deleting objects from an S3 bucket--the "D" in CRUD."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


def delete_s3_object(bucket_name: str, object_key: str, s3_client: "S3Client") -> None:
    """
    Delete a file from an S3 bucket.

    S3 reports success for keys that do not exist, so callers that need a 404
    check with `object_exists_in_s3` first.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: The key of the object to delete.
    :param s3_client: A boto3 S3 client.
    """
    s3_client.delete_object(Bucket=bucket_name, Key=object_key)
