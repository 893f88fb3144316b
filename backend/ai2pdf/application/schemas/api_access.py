"""Pydantic DTOs for API plans, keys and metered requests."""

from datetime import datetime

from pydantic import Field

from ai2pdf.application.schemas.base import CamelModel
from ai2pdf.domain.entities import ApiKey


class ApiPlanResponse(CamelModel):
    id: str
    name: str
    price: float
    currency: str
    request_limit: int
    features: list[str] = []
    is_active: bool
    sort_order: int


class ApiPlanCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., ge=0)
    currency: str = Field("INR", min_length=3, max_length=3)
    request_limit: int = Field(..., gt=0)
    features: list[str] = []
    sort_order: int = 0


class ApiKeyResponse(CamelModel):
    """An API key as listed to its owner: the raw key is never shown again."""

    id: str
    api_key: str
    plan_id: str | None
    status: str
    request_count: int
    last_used: datetime | None
    expires_at: datetime | None
    created_at: datetime

    @classmethod
    def from_entity(cls, key: ApiKey, raw_key: str | None = None) -> "ApiKeyResponse":
        return cls(
            id=key.id,
            api_key=raw_key or key.masked(),
            plan_id=key.plan_id,
            status="active" if key.is_active else "inactive",
            request_count=key.request_count,
            last_used=key.last_used,
            expires_at=key.expiry_date,
            created_at=key.created_at,
        )


class ApiKeysListResponse(CamelModel):
    locked: bool
    message: str | None = None
    keys: list[ApiKeyResponse] = []


class ApiServiceStatusResponse(CamelModel):
    enabled: bool
    message: str


class IssueApiKeyRequest(CamelModel):
    user_token: str = Field(..., min_length=1, max_length=64)
    plan_id: str = Field(..., min_length=1)
    valid_days: int | None = Field(30, gt=0)


class PlanInfo(CamelModel):
    name: str | None
    remaining_requests: int


class ApiConvertResponse(CamelModel):
    success: bool = True
    message: str = "File conversion initiated"
    conversion_id: str
    status: str
    plan_info: PlanInfo


class KeyInfo(CamelModel):
    plan_name: str | None
    request_count: int
    request_limit: int
    remaining_requests: int


class KeyInfoResponse(CamelModel):
    success: bool = True
    key_info: KeyInfo
