"""Pydantic DTOs for the admin surface."""

from datetime import datetime
from typing import Any

from pydantic import Field

from ai2pdf.application.schemas.base import CamelModel


class VisitorStats(CamelModel):
    total: int
    by_type: dict[str, int]


class DashboardResponse(CamelModel):
    users: VisitorStats
    tools: dict[str, int]
    conversions: dict[str, int]
    api: dict[str, int]


class SettingUpdateRequest(CamelModel):
    key: str = Field(..., min_length=1, max_length=255)
    value: str | None = None
    description: str | None = None


class ToggleApiServiceResponse(CamelModel):
    success: bool = True
    enabled: bool


class AdminApiStatusResponse(CamelModel):
    enabled: bool
    total_keys: int
    active_keys: int
    total_requests: int


class ActivityLogResponse(CamelModel):
    id: str
    action: str
    details: dict[str, Any] = {}
    user_id: str | None = None
    ip_address: str | None = None
    created_at: datetime


class StoredFileResponse(CamelModel):
    name: str
    size: int
    modified: datetime
