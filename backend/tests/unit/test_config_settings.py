"""Unit tests for application settings configuration."""

from pathlib import Path

from ai2pdf.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_lifecycle_defaults():
    settings = Settings(_env_file=None)
    assert settings.conversion_start_delay_ms == 100
    assert settings.conversion_batch_stride_ms == 100
    assert settings.quality_delays_ms == {"high": 3000, "medium": 2000, "low": 1000}
    assert settings.max_upload_size_bytes == 25 * 1024 * 1024
    assert settings.max_batch_files == 10


def test_unknown_modes_fall_back_to_defaults():
    settings = Settings(_env_file=None, job_store="redis", batch_download_mode="tarball")
    assert settings.job_store == "database"
    assert settings.batch_download_mode == "archive"


def test_modes_read_from_environment(monkeypatch):
    monkeypatch.setenv("JOB_STORE", "memory")
    monkeypatch.setenv("BATCH_DOWNLOAD_MODE", "first")
    settings = Settings(_env_file=None)
    assert settings.job_store == "memory"
    assert settings.batch_download_mode == "first"
