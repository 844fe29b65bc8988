"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import TYPE_CHECKING, Optional

from botocore.exceptions import ClientError

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import HeadObjectOutputTypeDef


def fetch_s3_object_metadata(
    s3_client: "S3Client",
    bucket_name: str,
    object_key: str,
) -> Optional["HeadObjectOutputTypeDef"]:
    """
    Fetch the metadata of an object without its body.

    :param s3_client: A boto3 S3 client.
    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.

    :return: The ``head_object`` response, or None if the object does not exist.
    """
    try:
        return s3_client.head_object(Bucket=bucket_name, Key=object_key)
    except ClientError as err:
        if err.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
            return None
        raise
