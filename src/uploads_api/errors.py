"""Domain exceptions and the handlers mapping them onto HTTP responses."""
import logging
from typing import Sequence

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class FilesApiError(Exception):
    """Base class for errors the API reports to clients."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"


class FileRecordNotFoundError(FilesApiError):
    """No file record exists for the identifier."""
    status_code = status.HTTP_404_NOT_FOUND
    message = "File not found"

    def __init__(self, file_id: str):
        super().__init__(f"File record {file_id} not found")
        self.file_id = file_id


class UploadNotCompleteError(FilesApiError):
    """The record exists but its object has not been uploaded to S3 yet."""
    status_code = status.HTTP_409_CONFLICT
    message = "File has not been uploaded yet"

    def __init__(self, file_id: str):
        super().__init__(f"No object uploaded for file record {file_id}")
        self.file_id = file_id


def _describe_validation_errors(errors: Sequence[dict]) -> str:
    parts = []
    for err in errors:
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


async def handle_pydantic_validation_errors(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report invalid or missing request fields as a 400."""
    message = _describe_validation_errors(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


async def handle_http_exceptions(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (unknown path, wrong method) in the same body shape as every other error."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def handle_files_api_errors(request: Request, exc: FilesApiError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Turn any unhandled exception into a generic 500 without leaking details."""
    try:
        return await call_next(request)
    except Exception:
        logger.exception(f"Unhandled error serving {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
