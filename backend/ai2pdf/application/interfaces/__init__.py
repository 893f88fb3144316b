from .conversion_job_repository import ConversionJobRepository
from .converter import Converter
from .visitor_repository import VisitorRepository
from .api_access_repository import ApiKeyRepository, ApiPlanRepository
from .tool_repository import ToolRepository
from .system_settings_repository import ActivityLogRepository, SystemSettingsRepository

__all__ = [
    "ConversionJobRepository",
    "Converter",
    "VisitorRepository",
    "ApiKeyRepository",
    "ApiPlanRepository",
    "ToolRepository",
    "ActivityLogRepository",
    "SystemSettingsRepository",
]
