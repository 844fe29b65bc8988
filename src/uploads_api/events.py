"""Handling of S3 ObjectCreated notifications, the upload completion signal."""
import json
import logging
from typing import Any, Dict, Iterator, List
from urllib.parse import unquote_plus

from uploads_api.errors import FileRecordNotFoundError
from uploads_api.services.files import FileService, parse_file_id

logger = logging.getLogger(__name__)


def iter_s3_records(event: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """
    Yield S3 event records from a direct S3 -> Lambda event or an SQS batch of them.
    """
    for record in event.get("Records", []):
        if record.get("eventSource") == "aws:sqs":
            body = json.loads(record.get("body") or "{}")
            yield from iter_s3_records(body)
        elif record.get("eventSource") == "aws:s3":
            yield record


def process_s3_event(service: FileService, event: Dict[str, Any]) -> List[str]:
    """
    Mark the file records of newly created objects as uploaded.

    Objects outside the upload prefix, or whose record no longer exists, are skipped.

    Returns:
        The ids of the records that were completed
    """
    completed = []
    for record in iter_s3_records(event):
        if not record.get("eventName", "").startswith("ObjectCreated:"):
            continue

        s3_info = record.get("s3", {})
        bucket = s3_info.get("bucket", {}).get("name")
        if bucket != service.bucket_name:
            logger.warning(f"Ignoring event for unexpected bucket {bucket}")
            continue

        # keys arrive URL-encoded
        key = unquote_plus(s3_info.get("object", {}).get("key", ""))
        file_id = parse_file_id(key, service.upload_prefix)
        if file_id is None:
            logger.info(f"Ignoring object {key}: not an upload key")
            continue

        size = s3_info.get("object", {}).get("size")
        try:
            service.complete_upload(file_id, file_size=size)
        except FileRecordNotFoundError:
            logger.warning(f"Object {key} has no file record {file_id}")
            continue
        completed.append(file_id)

    return completed
