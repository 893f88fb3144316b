from .conversion_job import ConversionJobModel
from .visitor import VisitorModel
from .api_access import ApiKeyModel, ApiPlanModel
from .tool import ToolModel
from .system_setting import ActivityLogModel, SystemSettingModel

__all__ = [
    "ConversionJobModel",
    "VisitorModel",
    "ApiKeyModel",
    "ApiPlanModel",
    "ToolModel",
    "ActivityLogModel",
    "SystemSettingModel",
]
