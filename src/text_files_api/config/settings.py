# src/text_files_api/config/settings.py
from enum import Enum
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self


class TagUpdatePolicy(str, Enum):
    """What `PUT /files/{filename}` does with stored tags when the body has no `tags`."""
    KEEP = "keep"
    CLEAR = "clear"


class IndexPage(str, Enum):
    """Which page `GET /` serves."""
    STATIC = "static"
    LISTING = "listing"


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from text_files_api.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    host: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )

    port: int = Field(
        default=3000,
        description="Port the HTTP server listens on"
    )

    # Object Store Settings
    s3_endpoint: Optional[str] = Field(
        default=None,
        description="S3-compatible endpoint URL (AWS default when unset)"
    )

    s3_access_key_id: Optional[str] = Field(
        default=None,
        description="Access key; falls back to the boto3 credential chain"
    )

    s3_secret_access_key: Optional[str] = Field(
        default=None,
        description="Secret key; falls back to the boto3 credential chain"
    )

    s3_bucket_name: str = Field(
        description="Bucket holding the stored files"
    )

    aws_region: str = Field(
        default="us-east-1",
        alias="AWS_DEFAULT_REGION"
    )

    file_suffix: str = Field(
        default=".txt",
        description="Extension appended to generated filenames"
    )

    # Metadata Store Settings
    tags_enabled: bool = Field(
        default=True,
        description="Store tags in the metadata store and expose /search"
    )

    database_url: Optional[str] = Field(
        default=None,
        description="Metadata store location, e.g. sqlite:///tags.db"
    )

    database_pool_size: int = Field(
        default=5,
        ge=1,
        description="Maximum number of open metadata store connections"
    )

    omitted_tags_on_update: TagUpdatePolicy = Field(
        default=TagUpdatePolicy.KEEP,
        description="Keep or clear stored tags when an update omits `tags`"
    )

    # HTTP Settings
    index_page: IndexPage = Field(
        default=IndexPage.STATIC,
        description="Serve a static landing page or a generated bucket listing at /"
    )

    cors_allow_origins: List[str] = Field(
        default_factory=list,
        description="Origins allowed by the CORS middleware; empty disables it"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names."""
        level = v.upper()
        valid_levels = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]
        if level not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return level

    @field_validator("s3_bucket_name")
    @classmethod
    def bucket_name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("s3_bucket_name must not be empty")
        return v

    @model_validator(mode="after")
    def check_database_url_when_tags_enabled(self) -> Self:
        if self.tags_enabled and not self.database_url:
            raise ValueError("database_url is required when tags_enabled is true")
        return self

    def describe(self) -> dict:
        """Settings as a flat dict with secrets masked, for display."""
        values = self.model_dump(mode="json")
        for key in ("s3_access_key_id", "s3_secret_access_key"):
            if values.get(key):
                values[key] = "****"
        return values

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
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
