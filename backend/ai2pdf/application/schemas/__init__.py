from .base import CamelModel, MessageResponse
from .conversion import BatchSubmissionResponse, ConversionResponse, DeleteConversionResponse
from .api_access import (
    ApiConvertResponse,
    ApiKeyResponse,
    ApiKeysListResponse,
    ApiPlanCreate,
    ApiPlanResponse,
    ApiServiceStatusResponse,
    IssueApiKeyRequest,
    KeyInfo,
    KeyInfoResponse,
    PlanInfo,
)
from .catalog import CategoryResponse, ToolResponse, TrackUserResponse, VisitorResponse
from .admin import (
    ActivityLogResponse,
    AdminApiStatusResponse,
    DashboardResponse,
    SettingUpdateRequest,
    StoredFileResponse,
    ToggleApiServiceResponse,
    VisitorStats,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "BatchSubmissionResponse",
    "ConversionResponse",
    "DeleteConversionResponse",
    "ApiConvertResponse",
    "ApiKeyResponse",
    "ApiKeysListResponse",
    "ApiPlanCreate",
    "ApiPlanResponse",
    "ApiServiceStatusResponse",
    "IssueApiKeyRequest",
    "KeyInfo",
    "KeyInfoResponse",
    "PlanInfo",
    "CategoryResponse",
    "ToolResponse",
    "TrackUserResponse",
    "VisitorResponse",
    "ActivityLogResponse",
    "AdminApiStatusResponse",
    "DashboardResponse",
    "SettingUpdateRequest",
    "StoredFileResponse",
    "ToggleApiServiceResponse",
    "VisitorStats",
]
