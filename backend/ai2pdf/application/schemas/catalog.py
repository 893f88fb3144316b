"""Pydantic DTOs for the tool catalog and visitor tracking."""

from datetime import datetime
from typing import Any

from ai2pdf.application.schemas.base import CamelModel


class ToolResponse(CamelModel):
    id: str
    name: str
    folder_name: str
    version: str
    category_id: str | None = None
    description: str | None = None
    keywords: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    is_active: bool
    usage_count: int
    created_at: datetime
    updated_at: datetime


class CategoryResponse(CamelModel):
    id: str
    name: str
    slug: str
    icon: str
    color: str
    description: str


class VisitorResponse(CamelModel):
    id: str
    auth_token: str
    user_type: str
    is_active: bool
    email: str | None = None
    name: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    metadata: dict[str, Any] = {}
    first_visit: datetime
    last_active_at: datetime


class TrackUserResponse(CamelModel):
    message: str
    user_token: str
    total_users: int
