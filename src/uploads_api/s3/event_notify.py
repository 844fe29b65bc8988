"""S3 event notification functions."""
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

UPLOAD_EVENTS = ['s3:ObjectCreated:Put', 's3:ObjectCreated:Post', 's3:ObjectCreated:CompleteMultipartUpload']


def enable_upload_notifications(
    s3_client: "S3Client",
    bucket_name: str,
    prefix: str,
    queue_arn: Optional[str] = None,
    lambda_arn: Optional[str] = None,
) -> None:
    """
    Send ObjectCreated events for keys under ``prefix`` to an SQS queue or a Lambda function.

    Exactly one of ``queue_arn`` and ``lambda_arn`` must be given.
    """
    if bool(queue_arn) == bool(lambda_arn):
        raise ValueError("Provide exactly one of queue_arn or lambda_arn")

    key_filter = {'Key': {'FilterRules': [{'Name': 'prefix', 'Value': prefix}]}}
    if queue_arn:
        configuration = {
            'QueueConfigurations': [{
                'QueueArn': queue_arn,
                'Events': UPLOAD_EVENTS,
                'Filter': key_filter,
            }]
        }
    else:
        configuration = {
            'LambdaFunctionConfigurations': [{
                'LambdaFunctionArn': lambda_arn,
                'Events': UPLOAD_EVENTS,
                'Filter': key_filter,
            }]
        }

    s3_client.put_bucket_notification_configuration(
        Bucket=bucket_name,
        NotificationConfiguration=configuration,
    )
