"""Unit tests for system settings and visitor tracking services."""

import pytest

from ai2pdf.application.services import VisitorService
from ai2pdf.domain.exceptions import EntityNotFoundError

from fakes import FakeVisitorRepository


@pytest.mark.asyncio
async def test_settings_upsert_and_read(settings_service):
    assert await settings_service.get("site_name") is None

    await settings_service.set("site_name", "Ai2PDF", "Shown in page titles")
    await settings_service.set("site_name", "Ai2PDF Pro")

    assert await settings_service.get("site_name") == "Ai2PDF Pro"
    assert await settings_service.get_all() == {"site_name": "Ai2PDF Pro"}


@pytest.mark.asyncio
async def test_api_service_disabled_by_default(settings_service):
    assert await settings_service.is_api_service_enabled() is False


@pytest.mark.asyncio
async def test_toggling_api_service_is_logged(settings_service, activity_repository):
    await settings_service.set_api_service_enabled(True, ip_address="127.0.0.1")
    assert await settings_service.is_api_service_enabled() is True

    await settings_service.set_api_service_enabled(False)
    assert await settings_service.is_api_service_enabled() is False

    recent = await settings_service.recent_activity()
    assert [e.action for e in recent] == ["api_service_toggled", "api_service_toggled"]
    assert recent[0].details["enabled"] is False
    assert recent[1].ip_address == "127.0.0.1"


@pytest.fixture
def visitors() -> VisitorService:
    return VisitorService(FakeVisitorRepository())


@pytest.mark.asyncio
async def test_track_creates_then_refreshes(visitors):
    first = await visitors.track("token-1", ip_address="1.2.3.4", user_agent="pytest")
    assert first.user_type == "visitor"
    assert first.metadata == {"source": "website"}

    again = await visitors.track("token-1")
    assert again.id == first.id
    assert again.last_active_at >= first.first_visit
    assert await visitors.total() == 1


@pytest.mark.asyncio
async def test_delete_visitors(visitors):
    a = await visitors.track("a")
    await visitors.track("b")

    await visitors.delete_visitor(a.id)
    with pytest.raises(EntityNotFoundError):
        await visitors.delete_visitor(a.id)

    assert await visitors.delete_all() == 1
    assert await visitors.count_by_type() == {}
