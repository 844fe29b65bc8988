import importlib

import pytest

from uploads_api.config.settings import get_settings
from tests.consts import TEST_BUCKET_NAME, TEST_TABLE_NAME


@pytest.fixture
def lambda_module(mocked_aws, monkeypatch):
    monkeypatch.setenv("DEPLOYMENT_MODE", "aws-prod")
    monkeypatch.setenv("S3_BUCKET_NAME", TEST_BUCKET_NAME)
    monkeypatch.setenv("FILES_TABLE", TEST_TABLE_NAME)
    get_settings.cache_clear()
    import uploads_api.lambda_handler as module
    yield importlib.reload(module)
    get_settings.cache_clear()


def test__s3_event_handler_completes_uploads(lambda_module):
    service = lambda_module.app.state.file_service
    upload = service.issue_upload_url("photo.jpg", "image/jpeg")
    event = {
        "Records": [
            {
                "eventSource": "aws:s3",
                "eventName": "ObjectCreated:Put",
                "s3": {"bucket": {"name": TEST_BUCKET_NAME}, "object": {"key": upload.key, "size": 512}},
            }
        ]
    }

    assert lambda_module.s3_event_handler(event, None) == {"completed": [upload.file_id]}
    assert service.get_file(upload.file_id).file_size == 512


def test__http_handler_is_exported(lambda_module):
    assert lambda_module.lambda_handler is lambda_module.handler
