"""AWS client construction from settings."""
import logging
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config

from uploads_api.config.settings import Settings

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBClient
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


def create_aws_client(service_name: str, settings: Settings) -> Any:
    """
    Create a boto3 client configured from settings.

    Explicit credentials and the custom endpoint are only passed when present,
    so in aws-prod the default credential chain (IAM execution role) applies.

    :param service_name: boto3 service name, e.g. "s3" or "dynamodb".
    :param settings: Application settings.
    """
    client_kwargs = {
        'region_name': settings.aws_region
    }

    if settings.aws_access_key_id:
        client_kwargs['aws_access_key_id'] = settings.aws_access_key_id
    if settings.aws_secret_access_key:
        client_kwargs['aws_secret_access_key'] = settings.aws_secret_access_key

    if settings.uses_custom_endpoint:
        client_kwargs['endpoint_url'] = settings.aws_endpoint_url

    # presigned URLs must be SigV4 to work in every region
    if service_name == 's3':
        client_kwargs['config'] = Config(signature_version='s3v4')

    try:
        client = boto3.client(service_name, **client_kwargs)
        logger.debug(f"Created {service_name} client (region={settings.aws_region}, endpoint={client_kwargs.get('endpoint_url')})")
        return client
    except Exception as e:
        logger.error(f"Error creating {service_name} client: {str(e)}")
        raise


def create_s3_client(settings: Settings) -> "S3Client":
    """Get an S3 client."""
    return create_aws_client('s3', settings)


def create_dynamodb_client(settings: Settings) -> "DynamoDBClient":
    """Get a DynamoDB client."""
    return create_aws_client('dynamodb', settings)
