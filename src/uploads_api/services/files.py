"""
File service for the Uploads API.

Implements the presigned-upload handshake and the file record lifecycle:
issue an upload URL (record created as ``uploading``), list, retrieve with a
download URL, confirm an upload (record becomes ``uploaded``) and delete.
"""

import logging
import uuid
from typing import TYPE_CHECKING, Callable, List, Optional

from uploads_api.adapters.records import BaseRecordStore, create_record_store
from uploads_api.aws.clients import create_s3_client
from uploads_api.config.settings import Settings
from uploads_api.errors import FileRecordNotFoundError, UploadNotCompleteError
from uploads_api.s3.delete_objects import delete_s3_object
from uploads_api.s3.presign import (
    generate_presigned_download_url,
    generate_presigned_upload_url,
)
from uploads_api.s3.read_objects import fetch_s3_object_metadata
from uploads_api.schemas import (
    FileRecord,
    FileStatus,
    GeneratePresignedUrlResponse,
    GetFileResponse,
)
from uploads_api.utils.decorators import log_execution_time

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

UUID_LENGTH = 36


def build_storage_key(file_id: str, file_name: str, prefix: str = "uploads/") -> str:
    """Key of the object for a file record: ``{prefix}{file_id}-{file_name}``."""
    return f"{prefix}{file_id}-{file_name}"


def parse_file_id(object_key: str, prefix: str = "uploads/") -> Optional[str]:
    """Recover the file id from a key built by :func:`build_storage_key`, or None."""
    if not object_key.startswith(prefix):
        return None
    remainder = object_key[len(prefix):]
    candidate, separator = remainder[:UUID_LENGTH], remainder[UUID_LENGTH:UUID_LENGTH + 1]
    if separator != "-":
        return None
    try:
        return str(uuid.UUID(candidate))
    except ValueError:
        return None


class FileService:
    """Service for file records and their objects in S3"""

    def __init__(
        self,
        s3_client: "S3Client",
        record_store: BaseRecordStore,
        bucket_name: str,
        upload_prefix: str = "uploads/",
        url_expiry_seconds: int = 300,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        self.s3_client = s3_client
        self.record_store = record_store
        self.bucket_name = bucket_name
        self.upload_prefix = upload_prefix
        self.url_expiry_seconds = url_expiry_seconds
        self.id_factory = id_factory

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        s3_client: Optional["S3Client"] = None,
        record_store: Optional[BaseRecordStore] = None,
    ) -> "FileService":
        """Build the service, creating whichever collaborators were not injected."""
        return cls(
            s3_client=s3_client or create_s3_client(settings),
            record_store=record_store or create_record_store(settings),
            bucket_name=settings.s3_bucket_name,
            upload_prefix=settings.upload_prefix,
            url_expiry_seconds=settings.presigned_url_expiry_seconds,
        )

    def _get_record(self, file_id: str) -> FileRecord:
        document = self.record_store.get(file_id)
        if document is None:
            raise FileRecordNotFoundError(file_id)
        return FileRecord.model_validate(document)

    @log_execution_time
    def issue_upload_url(self, file_name: str, file_type: str) -> GeneratePresignedUrlResponse:
        """
        Create a file record in ``uploading`` status and a presigned PUT URL for it.

        Args:
            file_name: Name of the file the client will upload
            file_type: MIME type the client will send as Content-Type

        Returns:
            GeneratePresignedUrlResponse: upload URL, file id and object key
        """
        file_id = self.id_factory()
        key = build_storage_key(file_id, file_name, self.upload_prefix)

        upload_url = generate_presigned_upload_url(
            self.s3_client,
            bucket_name=self.bucket_name,
            object_key=key,
            content_type=file_type,
            expires_in=self.url_expiry_seconds,
        )

        record = FileRecord(
            file_id=file_id,
            file_name=file_name,
            file_type=file_type,
            s3_key=key,
        )
        self.record_store.put(record.to_document())
        logger.info(f"Issued upload URL for {file_id} ({file_type}) at {key}")

        return GeneratePresignedUrlResponse(upload_url=upload_url, file_id=file_id, key=key)

    @log_execution_time
    def list_files(self) -> List[FileRecord]:
        """All file records, unfiltered, in store order."""
        return [FileRecord.model_validate(document) for document in self.record_store.scan()]

    @log_execution_time
    def get_file(self, file_id: str) -> GetFileResponse:
        """
        Look up a file record and attach a presigned download URL.

        Raises:
            FileRecordNotFoundError: if no record exists for ``file_id``
        """
        record = self._get_record(file_id)
        download_url = generate_presigned_download_url(
            self.s3_client,
            bucket_name=self.bucket_name,
            object_key=record.s3_key,
            expires_in=self.url_expiry_seconds,
        )
        return GetFileResponse(**record.model_dump(), download_url=download_url)

    @log_execution_time
    def delete_file(self, file_id: str) -> None:
        """
        Delete the object, then the record.

        A failure between the two steps leaves the record pointing at a missing object.

        Raises:
            FileRecordNotFoundError: if no record exists for ``file_id``
        """
        record = self._get_record(file_id)
        delete_s3_object(self.s3_client, self.bucket_name, record.s3_key)
        self.record_store.delete(file_id)
        logger.info(f"Deleted {file_id} and object {record.s3_key}")

    @log_execution_time
    def complete_upload(self, file_id: str, file_size: Optional[int] = None) -> FileRecord:
        """
        Mark a file record as ``uploaded`` and store its size.

        When ``file_size`` is not given (API confirmation) the object is looked up in S3;
        S3 event notifications pass the size they carry.

        Raises:
            FileRecordNotFoundError: if no record exists for ``file_id``
            UploadNotCompleteError: if the object is not in the bucket
        """
        record = self._get_record(file_id)

        if file_size is None:
            metadata = fetch_s3_object_metadata(self.s3_client, self.bucket_name, record.s3_key)
            if metadata is None:
                raise UploadNotCompleteError(file_id)
            file_size = metadata["ContentLength"]

        changes = {"status": FileStatus.UPLOADED.value, "fileSize": file_size}
        document = self.record_store.update(file_id, changes)
        if document is None:
            # deleted between the lookup and the update
            raise FileRecordNotFoundError(file_id)

        logger.info(f"Upload of {file_id} complete ({file_size} bytes)")
        return FileRecord.model_validate(document)
