import logging
from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Ai2PDF API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///./ai2pdf.db"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5000",
    ]

    # Job record store: "database" (SQLAlchemy) or "memory"
    job_store: str = "database"

    # Uploads & storage
    upload_dir: str = "uploads"
    tools_dir: str = "tools/usertool"
    max_upload_size_mb: int = 25
    max_tool_upload_size_mb: int = 5
    max_batch_files: int = 10
    allowed_api_upload_extensions: list[str] = [
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".txt", ".rtf", ".odt", ".html", ".csv",
        ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp", ".tiff",
    ]

    # Conversion lifecycle timing (milliseconds)
    conversion_start_delay_ms: int = 100
    conversion_batch_stride_ms: int = 100
    quality_delays_ms: dict[str, int] = {"high": 3000, "medium": 2000, "low": 1000}
    default_quality_delay_ms: int = 1000
    default_quality: str = "high"

    # Batch download policy: "archive" (ZIP of completed members) or "first"
    batch_download_mode: str = "archive"

    # Admin gate
    admin_access_key: str = "MY_SECRET_KEY_2024"

    # Visitor tracking
    visitor_cookie_name: str = "user-token"
    visitor_header_name: str = "x-user-token"
    visitor_cookie_max_age_days: int = 365

    # API access
    max_api_keys_per_user: int = 3

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine: SQL queries
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_lifecycle: str = "INFO"        # ConversionScheduler pipeline
    log_level_requests: str = "INFO"         # request logging middleware

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def model_post_init(self, __context: object) -> None:
        """Normalise enum-like string settings, falling back to defaults."""
        if self.job_store not in ("database", "memory"):
            _config_logger.warning(
                "Unknown JOB_STORE %r; falling back to 'database'", self.job_store
            )
            object.__setattr__(self, "job_store", "database")
        if self.batch_download_mode not in ("archive", "first"):
            _config_logger.warning(
                "Unknown BATCH_DOWNLOAD_MODE %r; falling back to 'archive'",
                self.batch_download_mode,
            )
            object.__setattr__(self, "batch_download_mode", "archive")

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def max_tool_upload_size_bytes(self) -> int:
        return self.max_tool_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance, reads .env once."""
    return Settings()
