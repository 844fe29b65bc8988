####################################
# --- Request/response schemas --- #
####################################

from datetime import datetime, timezone
from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model whose JSON field names are camelCase."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FileStatus(str, Enum):
    """Lifecycle of a file record."""
    UPLOADING = 'uploading'
    UPLOADED = 'uploaded'


class FileRecord(CamelModel):
    """Metadata of one uploaded file as stored in the record store."""
    file_id: str = Field(
        description="Unique identifier generated when the upload was requested.",
        json_schema_extra={"example": "0b7f6a5e-3c1d-4f7e-9a57-3b0f2f0c9a11"},
    )
    file_name: str = Field(description="Client supplied file name.")
    file_type: str = Field(description="Client supplied MIME type.")
    s3_key: str = Field(
        description="Key of the object in the S3 bucket.",
        json_schema_extra={"example": "uploads/0b7f6a5e-3c1d-4f7e-9a57-3b0f2f0c9a11-report.pdf"},
    )
    upload_date: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the upload was requested.",
    )
    file_size: int = Field(0, ge=0, description="Size in bytes, 0 until the upload is confirmed.")
    status: FileStatus = Field(FileStatus.UPLOADING, description="Upload status.")

    def to_document(self) -> dict:
        """Serialize for the record store (camelCase keys, JSON-compatible values)."""
        return self.model_dump(mode="json", by_alias=True)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "fileId": "0b7f6a5e-3c1d-4f7e-9a57-3b0f2f0c9a11",
                "fileName": "report.pdf",
                "fileType": "application/pdf",
                "s3Key": "uploads/0b7f6a5e-3c1d-4f7e-9a57-3b0f2f0c9a11-report.pdf",
                "uploadDate": "2024-01-01T12:34:56Z",
                "fileSize": 0,
                "status": "uploading",
            }
        }
    )


class GeneratePresignedUrlRequest(CamelModel):
    """Request body for `POST /generate-presigned-url`."""
    file_name: str = Field(min_length=1, description="Name of the file to upload.")
    file_type: str = Field(min_length=1, description="MIME type of the file to upload.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"fileName": "report.pdf", "fileType": "application/pdf"}
        }
    )


class GeneratePresignedUrlResponse(CamelModel):
    """Response model for `POST /generate-presigned-url`."""
    upload_url: str = Field(description="Presigned URL accepting a single PUT of the file.")
    file_id: str = Field(description="Identifier of the new file record.")
    key: str = Field(description="Key the object will be stored under.")


class GetFileResponse(FileRecord):
    """Response model for `GET /files/:id`."""
    download_url: str = Field(description="Presigned URL serving the file content.")


class DeleteFileResponse(BaseModel):
    """Response model for `DELETE /files/:id`."""
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
