from .conversion_job_repository import SQLAlchemyConversionJobRepository
from .visitor_repository import SQLAlchemyVisitorRepository
from .api_access_repository import SQLAlchemyApiKeyRepository, SQLAlchemyApiPlanRepository
from .tool_repository import SQLAlchemyToolRepository
from .system_settings_repository import (
    SQLAlchemyActivityLogRepository,
    SQLAlchemySystemSettingsRepository,
)

__all__ = [
    "SQLAlchemyConversionJobRepository",
    "SQLAlchemyVisitorRepository",
    "SQLAlchemyApiKeyRepository",
    "SQLAlchemyApiPlanRepository",
    "SQLAlchemyToolRepository",
    "SQLAlchemyActivityLogRepository",
    "SQLAlchemySystemSettingsRepository",
]
