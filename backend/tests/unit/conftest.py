"""Shared fixtures for service unit tests."""

import pytest

from ai2pdf.application.services import SystemSettingsService

from fakes import FakeActivityLogRepository, FakeSystemSettingsRepository


@pytest.fixture
def activity_repository() -> FakeActivityLogRepository:
    return FakeActivityLogRepository()


@pytest.fixture
def settings_service(activity_repository) -> SystemSettingsService:
    return SystemSettingsService(FakeSystemSettingsRepository(), activity_repository)
