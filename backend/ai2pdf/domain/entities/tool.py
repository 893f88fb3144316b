"""Domain entities for the HTML tool catalog."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


def slugify_tool_name(name: str) -> str:
    """Derive a folder slug from a tool name: lowercase, non-alphanumerics collapsed to '-'."""
    slug = re.sub(r"[^a-z0-9]", "-", name.lower())
    return re.sub(r"-+", "-", slug).strip("-")


@dataclass
class Tool:
    """A self-contained HTML tool served from ``<tools_dir>/<folder_name>/index.html``."""

    name: str
    folder_name: str
    file_path: str
    id: str = field(default_factory=lambda: str(uuid4()))
    version: str = "v1.0.0"
    category_id: str | None = None
    description: str | None = None
    keywords: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    is_active: bool = True
    usage_count: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ToolCategory:
    id: str
    name: str
    slug: str
    icon: str
    color: str
    description: str


DEFAULT_CATEGORIES: tuple[ToolCategory, ...] = (
    ToolCategory("pdf-tools", "PDF Tools", "pdf-tools", "fas fa-file-pdf", "#EF4444", "Tools for PDF manipulation"),
    ToolCategory("image-tools", "Image Tools", "image-tools", "fas fa-image", "#10B981", "Image editing and conversion tools"),
    ToolCategory("text-tools", "Text Tools", "text-tools", "fas fa-font", "#3B82F6", "Text processing utilities"),
    ToolCategory("converter", "Converters", "converter", "fas fa-exchange-alt", "#8B5CF6", "File format converters"),
    ToolCategory("utilities", "Utilities", "utilities", "fas fa-tools", "#F59E0B", "General purpose utilities"),
    ToolCategory("security", "Security", "security", "fas fa-shield-alt", "#DC2626", "Security and privacy tools"),
)
