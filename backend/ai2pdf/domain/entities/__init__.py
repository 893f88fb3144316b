from .conversion_job import ConversionJob, JobStatus, BATCH_ID_KEY, BATCH_SIZE_KEY
from .visitor import Visitor
from .api_access import ApiPlan, ApiKey, ApiKeyStatus
from .tool import Tool, ToolCategory, DEFAULT_CATEGORIES, slugify_tool_name
from .system_setting import SystemSetting, ActivityLog, API_SERVICE_ENABLED_KEY

__all__ = [
    "ConversionJob",
    "JobStatus",
    "BATCH_ID_KEY",
    "BATCH_SIZE_KEY",
    "Visitor",
    "ApiPlan",
    "ApiKey",
    "ApiKeyStatus",
    "Tool",
    "ToolCategory",
    "DEFAULT_CATEGORIES",
    "slugify_tool_name",
    "SystemSetting",
    "ActivityLog",
    "API_SERVICE_ENABLED_KEY",
]
