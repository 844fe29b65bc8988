"""AWS fixtures: moto-backed S3 bucket and DynamoDB table."""
import boto3
import pytest
from botocore.config import Config
from moto import mock_aws

from tests.consts import TEST_BUCKET_NAME, TEST_REGION, TEST_TABLE_NAME


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so nothing can reach a real AWS account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def mocked_aws(aws_credentials):
    """Mock AWS with the test bucket and files table already created."""
    with mock_aws():
        s3_client = boto3.client("s3", region_name=TEST_REGION)
        s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)

        dynamodb_client = boto3.client("dynamodb", region_name=TEST_REGION)
        dynamodb_client.create_table(
            TableName=TEST_TABLE_NAME,
            KeySchema=[{"AttributeName": "fileId", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "fileId", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )

        yield


@pytest.fixture
def s3_client(mocked_aws):
    return boto3.client("s3", region_name=TEST_REGION, config=Config(signature_version="s3v4"))


@pytest.fixture
def dynamodb_client(mocked_aws):
    return boto3.client("dynamodb", region_name=TEST_REGION)
