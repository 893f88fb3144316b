from .batch_correlator import BatchCorrelator
from .conversion_scheduler import ConversionScheduler
from .conversion_service import BatchSubmission, ConversionService, DownloadArtifact, Upload
from .visitor_service import VisitorService
from .system_settings_service import SystemSettingsService
from .api_access_service import ApiAccessService
from .tool_catalog_service import ToolCatalogService
from .admin_service import AdminService

__all__ = [
    "BatchCorrelator",
    "ConversionScheduler",
    "BatchSubmission",
    "ConversionService",
    "DownloadArtifact",
    "Upload",
    "VisitorService",
    "SystemSettingsService",
    "ApiAccessService",
    "ToolCatalogService",
    "AdminService",
]
