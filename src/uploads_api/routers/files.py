from typing import List

from fastapi import (
    APIRouter,
    Depends,
    Path,
    status
)

from uploads_api.dependencies import get_file_service
from uploads_api.schemas import (
    DeleteFileResponse,
    ErrorResponse,
    FileRecord,
    GeneratePresignedUrlRequest,
    GeneratePresignedUrlResponse,
    GetFileResponse,
)
from uploads_api.services.files import FileService

router = APIRouter()

NOT_FOUND_RESPONSE = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "File not found"}}


@router.post(
    "/generate-presigned-url",
    response_model=GeneratePresignedUrlResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Missing fileName or fileType"}},
)
async def generate_presigned_url(
    body: GeneratePresignedUrlRequest,
    service: FileService = Depends(get_file_service),
) -> GeneratePresignedUrlResponse:
    """
    Request a presigned URL for uploading a file directly to S3.

    A file record is created in `uploading` status. The client then PUTs the
    raw bytes to `uploadUrl` with the same `Content-Type` it declared here.
    """
    return service.issue_upload_url(file_name=body.file_name, file_type=body.file_type)


@router.get("/files", response_model=List[FileRecord])
async def list_files(service: FileService = Depends(get_file_service)) -> List[FileRecord]:
    """List every file record."""
    return service.list_files()


@router.get("/files/{file_id}", response_model=GetFileResponse, responses=NOT_FOUND_RESPONSE)
async def get_file(
    file_id: str = Path(..., description="Identifier returned when the upload was requested"),
    service: FileService = Depends(get_file_service),
) -> GetFileResponse:
    """
    Retrieve a file record together with a presigned `downloadUrl`.
    """
    return service.get_file(file_id)


@router.delete("/files/{file_id}", response_model=DeleteFileResponse, responses=NOT_FOUND_RESPONSE)
async def delete_file(
    file_id: str = Path(..., description="Identifier returned when the upload was requested"),
    service: FileService = Depends(get_file_service),
) -> DeleteFileResponse:
    """
    Delete a file from S3 and remove its record.
    """
    service.delete_file(file_id)
    return DeleteFileResponse(message="File deleted successfully")


@router.post(
    "/files/{file_id}/complete",
    response_model=FileRecord,
    responses={
        **NOT_FOUND_RESPONSE,
        status.HTTP_409_CONFLICT: {"model": ErrorResponse, "description": "Object not uploaded yet"},
    },
)
async def complete_upload(
    file_id: str = Path(..., description="Identifier returned when the upload was requested"),
    service: FileService = Depends(get_file_service),
) -> FileRecord:
    """
    Confirm that the client finished uploading.

    The object is looked up in S3; the record becomes `uploaded` and gets the object's size.
    """
    return service.complete_upload(file_id)
