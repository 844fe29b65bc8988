"""Functions for issuing presigned S3 URLs--the client talks to S3 directly with these."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


def generate_presigned_upload_url(
    s3_client: "S3Client",
    bucket_name: str,
    object_key: str,
    content_type: str,
    expires_in: int,
) -> str:
    """
    Generate a presigned URL that allows a single ``PUT`` of an object.

    The content type is part of the signature, so the client must send the same
    ``Content-Type`` header when uploading.

    :param s3_client: A boto3 S3 client.
    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param content_type: The MIME type the upload will carry.
    :param expires_in: Seconds until the URL stops working.
    """
    return s3_client.generate_presigned_url(
        ClientMethod="put_object",
        Params={
            "Bucket": bucket_name,
            "Key": object_key,
            "ContentType": content_type,
        },
        ExpiresIn=expires_in,
    )


def generate_presigned_download_url(
    s3_client: "S3Client",
    bucket_name: str,
    object_key: str,
    expires_in: int,
) -> str:
    """
    Generate a presigned URL that allows a ``GET`` of an object.

    :param s3_client: A boto3 S3 client.
    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param expires_in: Seconds until the URL stops working.
    """
    return s3_client.generate_presigned_url(
        ClientMethod="get_object",
        Params={
            "Bucket": bucket_name,
            "Key": object_key,
        },
        ExpiresIn=expires_in,
    )
