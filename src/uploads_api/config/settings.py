# src/uploads_api/config/settings.py
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_DEPLOYMENT_MODES = ["local-dev", "aws-mock", "aws-prod"]
VALID_RECORD_STORE_BACKENDS = ["dynamodb", "sqlite"]


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from uploads_api.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    app_name: str = Field(
        default="uploads-api",
        description="Application name"
    )

    # Deployment Mode
    deployment_mode: str = Field(
        default="local-dev",
        description="Deployment mode: local-dev, aws-mock, or aws-prod"
    )

    # AWS Core Settings
    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        alias="AWS_ACCESS_KEY_ID"
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        alias="AWS_SECRET_ACCESS_KEY"
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        alias="AWS_ENDPOINT_URL",
        description="Custom endpoint (moto server, localstack) for local/mock modes"
    )

    # S3 Configuration
    s3_bucket_name: str = Field(
        default="serverless-file-upload-uploads",
        description="S3 bucket receiving direct uploads"
    )

    upload_prefix: str = Field(
        default="uploads/",
        description="Key prefix for uploaded objects"
    )

    presigned_url_expiry_seconds: int = Field(
        default=300,
        description="Lifetime of presigned upload and download URLs"
    )

    # Record store Configuration
    record_store_backend: str = Field(
        default="dynamodb",
        description="Where file records live: dynamodb or sqlite"
    )

    files_table_name: str = Field(
        default="files",
        alias="FILES_TABLE",
        description="DynamoDB table holding file records"
    )

    sqlite_db_path: str = Field(
        default="files.db",
        description="SQLite database used by the sqlite record store"
    )

    # HTTP
    cors_allow_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator('deployment_mode', mode='before')
    @classmethod
    def normalize_deployment_mode(cls, v):
        """Normalize deployment mode values for backwards compatibility."""
        if v:
            mode_mapping = {
                "local-mock": "local-dev",
                "cloud": "aws-prod",
            }
            return mode_mapping.get(v, v)
        return v

    @field_validator('deployment_mode')
    @classmethod
    def validate_deployment_mode(cls, v):
        """Validate deployment mode is one of the allowed values."""
        if v not in VALID_DEPLOYMENT_MODES:
            raise ValueError(f"Invalid deployment_mode: {v}. Must be one of {VALID_DEPLOYMENT_MODES}")
        return v

    @field_validator('record_store_backend')
    @classmethod
    def validate_record_store_backend(cls, v):
        if v not in VALID_RECORD_STORE_BACKENDS:
            raise ValueError(f"Invalid record_store_backend: {v}. Must be one of {VALID_RECORD_STORE_BACKENDS}")
        return v

    @field_validator('presigned_url_expiry_seconds')
    @classmethod
    def validate_expiry(cls, v):
        if v <= 0:
            raise ValueError("presigned_url_expiry_seconds must be positive")
        return v

    @property
    def uses_custom_endpoint(self) -> bool:
        """Whether AWS calls should go to ``aws_endpoint_url`` instead of AWS proper."""
        return bool(self.aws_endpoint_url) and self.deployment_mode in ["local-dev", "aws-mock"]

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=(".env", ".env.local-dev", ".env.aws-mock", ".env.aws-prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
