"""Configuration management for the guide image pipeline."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage
    storage_bucket: Optional[str] = None
    image_cache_control: str = "public, max-age=31536000"  # images are immutable

    # Extraction
    image_size_threshold: int = 50  # skip icons and decorations
    extract_text_blocks: bool = True
    image_marker_scan_bytes: int = 100_000

    # Upload
    upload_batch_size: int = 5

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
