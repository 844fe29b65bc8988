import logging
from textwrap import dedent
from typing import TYPE_CHECKING, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from uploads_api.adapters.records import BaseRecordStore
from uploads_api.config.settings import Settings
from uploads_api.errors import (
    FilesApiError,
    handle_broad_exceptions,
    handle_files_api_errors,
    handle_http_exceptions,
    handle_pydantic_validation_errors,
)
from uploads_api.routers.files import router as files_router
from uploads_api.routers.health import router as health_router
from uploads_api.services.files import FileService

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    s3_client: Optional["S3Client"] = None,
    record_store: Optional[BaseRecordStore] = None,
) -> FastAPI:
    """
    Create a FastAPI application.

    The S3 client and record store are created from settings unless injected.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Uploads API",
        summary="Upload files straight to S3 with presigned URLs and track their metadata",
        version="v1",
        description=dedent(
            """\
        1. `POST /generate-presigned-url` with `fileName` and `fileType`.
        2. `PUT` the raw bytes to the returned `uploadUrl` with the same `Content-Type`.
        3. Optionally `POST /files/{id}/complete` (or let the S3 event handler do it).
        4. `GET /files`, `GET /files/{id}` for a `downloadUrl`, `DELETE /files/{id}`.
        """
        ),
        docs_url="/",  # its easier to find the docs when they live on the base url
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.state.settings = settings
    app.state.file_service = FileService.from_settings(
        settings,
        s3_client=s3_client,
        record_store=record_store,
    )
    logger.info(
        f"Serving bucket {settings.s3_bucket_name} with {settings.record_store_backend} records "
        f"({settings.deployment_mode})"
    )

    app.include_router(files_router, tags=["files"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=FilesApiError,
        handler=handle_files_api_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=StarletteHTTPException,
        handler=handle_http_exceptions,
    )
    app.middleware("http")(handle_broad_exceptions)

    # added last so it wraps the error middleware and 500s carry CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
