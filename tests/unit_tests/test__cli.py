import boto3
import pytest
from click.testing import CliRunner
from fastapi.testclient import TestClient

from uploads_api import cli as cli_module
from uploads_api.client import FilesClient
from uploads_api.config.settings import get_settings
from tests.consts import TEST_BUCKET_NAME, TEST_QUEUE_ARN, TEST_REGION, TEST_TABLE_NAME


@pytest.fixture
def cli_env(aws_credentials, monkeypatch):
    monkeypatch.setenv("DEPLOYMENT_MODE", "aws-mock")
    monkeypatch.setenv("S3_BUCKET_NAME", "cli-bucket")
    monkeypatch.setenv("FILES_TABLE", "cli-files")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def test__show_config(cli_env, runner: CliRunner):
    result = runner.invoke(cli_module.cli, ["show-config"])

    assert result.exit_code == 0, result.output
    assert "Deployment Mode: aws-mock" in result.output
    assert "S3 Bucket: cli-bucket" in result.output
    assert "Files Table: cli-files" in result.output


def test__create_resources(cli_env, mocked_aws, runner: CliRunner):
    boto3.client("sqs", region_name=TEST_REGION).create_queue(QueueName=TEST_QUEUE_ARN.split(":")[-1])

    result = runner.invoke(cli_module.cli, ["create-resources", "--queue-arn", TEST_QUEUE_ARN])

    assert result.exit_code == 0, result.output
    assert "Created bucket cli-bucket" in result.output
    assert "Created table cli-files" in result.output

    s3_client = boto3.client("s3", region_name=TEST_REGION)
    assert s3_client.get_bucket_notification_configuration(Bucket="cli-bucket")["QueueConfigurations"]
    tables = boto3.client("dynamodb", region_name=TEST_REGION).list_tables()["TableNames"]
    assert "cli-files" in tables

    result = runner.invoke(cli_module.cli, ["create-resources"])
    assert "Found bucket cli-bucket" in result.output
    assert "Found table cli-files" in result.output


@pytest.fixture
def api_client(client: TestClient, monkeypatch):
    """Point the CLI's client commands at the in-process app."""
    monkeypatch.setattr(cli_module, "FilesClient", lambda api_url: FilesClient(api_url, session=client))


def test__upload_ls_download_rm(api_client, runner: CliRunner, tmp_path):
    source = tmp_path / "notes.txt"
    source.write_bytes(b"remember the milk")

    result = runner.invoke(cli_module.cli, ["upload", "--api-url", "http://testserver", str(source)])
    assert result.exit_code == 0, result.output
    file_id = result.output.strip().splitlines()[-1]

    result = runner.invoke(cli_module.cli, ["ls", "--api-url", "http://testserver"])
    assert result.exit_code == 0, result.output
    assert file_id in result.output
    assert "uploaded" in result.output
    assert "notes.txt" in result.output

    destination = tmp_path / "copy.txt"
    result = runner.invoke(cli_module.cli, ["download", "--api-url", "http://testserver", file_id, str(destination)])
    assert result.exit_code == 0, result.output
    assert destination.read_bytes() == b"remember the milk"

    result = runner.invoke(cli_module.cli, ["rm", "--api-url", "http://testserver", file_id])
    assert result.exit_code == 0, result.output
    assert "File deleted successfully" in result.output


def test__rm_unknown_file(api_client, runner: CliRunner):
    result = runner.invoke(cli_module.cli, ["rm", "--api-url", "http://testserver", "missing"])

    assert result.exit_code != 0
    assert "Delete failed: File not found" in result.output


def test__client_commands_read_api_url_from_env(cli_env, runner: CliRunner, monkeypatch):
    seen_urls = []

    class RecordingClient:
        def __init__(self, api_url):
            seen_urls.append(api_url)

        def list_files(self):
            return []

    monkeypatch.setattr(cli_module, "FilesClient", RecordingClient)
    monkeypatch.setenv("UPLOADS_API_URL", "http://uploads.internal:9000")

    result = runner.invoke(cli_module.cli, ["ls"])

    assert result.exit_code == 0, result.output
    assert seen_urls == ["http://uploads.internal:9000"]


def test__client_commands_default_api_url(cli_env, runner: CliRunner, monkeypatch):
    seen_urls = []
    monkeypatch.delenv("UPLOADS_API_URL", raising=False)
    monkeypatch.setattr(cli_module.FilesClient, "list_files", lambda self: seen_urls.append(self.api_url) or [])

    result = runner.invoke(cli_module.cli, ["ls"])

    assert result.exit_code == 0, result.output
    assert seen_urls == [cli_module.DEFAULT_API_URL]
