"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Service configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ITEMCATALOG_",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server configuration
    host: str = Field(
        default="127.0.0.1",
        description="Host to bind the server to",
    )

    port: int = Field(
        default=8080,
        description="Port to bind the server to",
        ge=1,
        le=65535,
    )

    # Storage configuration
    storage_backend: Literal["json", "database"] = Field(
        default="json",
        description="Catalog backend: a JSON document file or a relational database",
    )

    catalog_path: Path = Field(
        default=Path("items.json"),
        description="Path of the catalog document used by the json backend",
    )

    images_dir: Path = Field(
        default=Path("images"),
        description="Directory holding uploaded images",
    )

    database_url: str = Field(
        default="sqlite:///items.sqlite3",
        description="Database URL used by the database backend",
    )

    db_pool_size: int = Field(
        default=5,
        description="Database connection pool size",
        ge=1,
        le=20,
    )

    db_pool_overflow: int = Field(
        default=10,
        description="Database connection pool overflow",
        ge=0,
        le=50,
    )

    # Item policy
    require_image: bool = Field(
        default=True,
        description="Reject new items submitted without an image",
    )

    max_upload_bytes: int = Field(
        default=10 << 20,
        description="Maximum accepted image size in bytes",
        ge=1,
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format string",
    )


def get_settings() -> ServerSettings:
    """Get the application settings instance."""
    return ServerSettings()
