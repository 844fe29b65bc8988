"""Bucket provisioning helpers used by the CLI."""
import logging
from typing import TYPE_CHECKING, List

from botocore.exceptions import ClientError

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


def ensure_bucket(s3_client: "S3Client", bucket_name: str, region: str) -> bool:
    """
    Create the bucket if it does not exist yet.

    :return: True if the bucket was created, False if it already existed.
    """
    try:
        s3_client.head_bucket(Bucket=bucket_name)
        logger.info(f"Bucket {bucket_name} already exists")
        return False
    except ClientError as err:
        if err.response.get("Error", {}).get("Code") not in ("404", "NoSuchBucket", "NotFound"):
            raise

    # us-east-1 rejects an explicit LocationConstraint
    if region == "us-east-1":
        s3_client.create_bucket(Bucket=bucket_name)
    else:
        s3_client.create_bucket(
            Bucket=bucket_name,
            CreateBucketConfiguration={"LocationConstraint": region},
        )
    logger.info(f"Created bucket {bucket_name} in {region}")
    return True


def allow_browser_uploads(s3_client: "S3Client", bucket_name: str, allowed_origins: List[str]) -> None:
    """Set the bucket CORS rules so browsers can PUT to presigned URLs and GET downloads."""
    s3_client.put_bucket_cors(
        Bucket=bucket_name,
        CORSConfiguration={
            "CORSRules": [{
                "AllowedHeaders": ["*"],
                "AllowedMethods": ["PUT", "GET"],
                "AllowedOrigins": allowed_origins,
                "ExposeHeaders": ["ETag"],
                "MaxAgeSeconds": 3000,
            }]
        },
    )
