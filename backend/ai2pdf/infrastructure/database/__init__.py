from .base import Base
from .session import engine, async_session_factory, get_db_session
from .models import (
    ConversionJobModel,
    VisitorModel,
    ApiKeyModel,
    ApiPlanModel,
    ToolModel,
    ActivityLogModel,
    SystemSettingModel,
)

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "get_db_session",
    "ConversionJobModel",
    "VisitorModel",
    "ApiKeyModel",
    "ApiPlanModel",
    "ToolModel",
    "ActivityLogModel",
    "SystemSettingModel",
]
