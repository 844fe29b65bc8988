from fastapi import Request

from uploads_api.config.settings import Settings
from uploads_api.services.files import FileService


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_file_service(request: Request) -> FileService:
    """File service dependency, built once per app by ``create_app``."""
    return request.app.state.file_service
