import json
from urllib.parse import quote_plus

from uploads_api.events import iter_s3_records, process_s3_event
from uploads_api.services.files import FileService
from tests.consts import TEST_BUCKET_NAME


def s3_record(key: str, size: int = 11, bucket: str = TEST_BUCKET_NAME, event_name: str = "ObjectCreated:Put") -> dict:
    return {
        "eventSource": "aws:s3",
        "eventName": event_name,
        "s3": {
            "bucket": {"name": bucket},
            "object": {"key": quote_plus(key), "size": size},
        },
    }


def test__process_s3_event__completes_upload(file_service: FileService):
    upload = file_service.issue_upload_url("my report.pdf", "application/pdf")

    completed = process_s3_event(file_service, {"Records": [s3_record(upload.key, size=2048)]})

    assert completed == [upload.file_id]
    record = file_service.get_file(upload.file_id)
    assert record.status.value == "uploaded"
    assert record.file_size == 2048


def test__process_s3_event__sqs_wrapped(file_service: FileService):
    upload = file_service.issue_upload_url("a.txt", "text/plain")
    sqs_event = {
        "Records": [
            {"eventSource": "aws:sqs", "body": json.dumps({"Records": [s3_record(upload.key)]})},
        ]
    }

    assert process_s3_event(file_service, sqs_event) == [upload.file_id]


def test__process_s3_event__skips_unrelated_objects(file_service: FileService):
    upload = file_service.issue_upload_url("a.txt", "text/plain")
    event = {
        "Records": [
            s3_record("exports/report.csv"),
            s3_record(upload.key, bucket="some-other-bucket"),
            s3_record(upload.key, event_name="ObjectRemoved:Delete"),
            s3_record("uploads/0b7f6a5e-3c1d-4f7e-9a57-3b0f2f0c9a11-deleted.txt"),
        ]
    }

    assert process_s3_event(file_service, event) == []
    assert file_service.get_file(upload.file_id).status.value == "uploading"


def test__iter_s3_records__ignores_test_events():
    sqs_event = {
        "Records": [
            {"eventSource": "aws:sqs", "body": json.dumps({"Service": "Amazon S3", "Event": "s3:TestEvent"})},
        ]
    }
    assert list(iter_s3_records(sqs_event)) == []
