"""Application service for API plans, key issuance and request metering."""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from ai2pdf.application.interfaces import ApiKeyRepository, ApiPlanRepository
from ai2pdf.application.services.system_settings_service import SystemSettingsService
from ai2pdf.domain.entities import ApiKey, ApiKeyStatus, ApiPlan
from ai2pdf.domain.exceptions import (
    ApiAccessError,
    ApiServiceDisabledError,
    EntityNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

API_KEY_PREFIX = "ak_"

DEFAULT_PLANS: tuple[ApiPlan, ...] = (
    ApiPlan(
        id="plan-basic",
        name="Basic API Access",
        price=Decimal("200"),
        request_limit=1000,
        features=["1000 API calls/month", "Email support", "Basic documentation"],
        sort_order=1,
    ),
    ApiPlan(
        id="plan-standard",
        name="Standard API Access",
        price=Decimal("600"),
        request_limit=5000,
        features=["5000 API calls/month", "Priority support", "Advanced documentation", "Webhooks"],
        sort_order=2,
    ),
    ApiPlan(
        id="plan-premium",
        name="Premium API Access",
        price=Decimal("900"),
        request_limit=10000,
        features=[
            "10000 API calls/month",
            "Priority support",
            "Complete documentation",
            "Webhooks",
            "Custom integrations",
        ],
        sort_order=3,
    ),
)


def hash_api_key(raw_key: str) -> str:
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()


def generate_api_key() -> tuple[str, str]:
    """Return a new ``(raw_key, key_hash)`` pair. Only the hash is ever stored."""
    raw_key = f"{API_KEY_PREFIX}{secrets.token_hex(24)}"
    return raw_key, hash_api_key(raw_key)


class ApiAccessService:
    """Validates bearer keys against their plan and manages keys per visitor."""

    def __init__(
        self,
        plan_repository: ApiPlanRepository,
        key_repository: ApiKeyRepository,
        settings_service: SystemSettingsService,
        *,
        max_keys_per_user: int = 3,
    ):
        self._plans = plan_repository
        self._keys = key_repository
        self._settings = settings_service
        self._max_keys_per_user = max_keys_per_user

    # ── Metering ─────────────────────────────────────────────────────

    async def authenticate(self, authorization: str | None) -> ApiKeyStatus:
        """Resolve an ``Authorization: Bearer ak_...`` header to a usable key.

        Raises ApiAccessError with 401 for missing, malformed, unknown,
        inactive or expired keys, and 429 once the plan allowance is used up.
        """
        if not authorization or not authorization.startswith("Bearer "):
            raise ApiAccessError(401, "Missing or invalid authorization header")

        raw_key = authorization[len("Bearer "):].strip()
        if not raw_key.startswith(API_KEY_PREFIX):
            raise ApiAccessError(401, "Invalid API key format")

        key = await self._keys.get_by_hash(hash_api_key(raw_key))
        if key is None:
            raise ApiAccessError(401, "Invalid API key")
        if not key.is_active:
            raise ApiAccessError(401, "API key is inactive")
        if key.is_expired():
            raise ApiAccessError(401, "API key has expired")

        plan = await self._plans.get_by_id(key.plan_id) if key.plan_id else None
        if plan is None:
            raise ApiAccessError(401, "API key is not attached to a plan")

        if key.request_count >= plan.request_limit:
            raise ApiAccessError(
                429,
                "Monthly request limit exceeded",
                {"limit": plan.request_limit, "used": key.request_count},
            )

        return ApiKeyStatus(key=key, plan_name=plan.name, request_limit=plan.request_limit)

    async def record_usage(self, status: ApiKeyStatus) -> ApiKeyStatus:
        """Count one metered request against the key."""
        status.key.record_usage()
        status.key = await self._keys.update(status.key)
        return status

    # ── Keys per visitor ─────────────────────────────────────────────

    async def list_keys(self, user_token: str) -> list[ApiKey]:
        if not await self._settings.is_api_service_enabled():
            raise ApiServiceDisabledError()
        return await self._keys.get_by_user(user_token)

    async def generate_key(self, user_token: str) -> tuple[ApiKey, str]:
        """Issue an extra key that inherits the plan and expiry of the active one."""
        if not await self._settings.is_api_service_enabled():
            raise ApiServiceDisabledError()

        keys = await self._keys.get_by_user(user_token)
        active = next((k for k in keys if k.is_active), None)
        if active is None:
            raise ValidationError("Active subscription required to generate API keys")
        if len(keys) >= self._max_keys_per_user:
            raise ValidationError(
                f"Maximum number of API keys reached ({self._max_keys_per_user})"
            )

        raw_key, key_hash = generate_api_key()
        key = await self._keys.create(
            ApiKey(
                user_token=user_token,
                key_hash=key_hash,
                plan_id=active.plan_id,
                expiry_date=active.expiry_date,
            )
        )
        logger.info("New API key generated for visitor %s", user_token)
        return key, raw_key

    async def revoke_key(self, user_token: str, key_id: str) -> None:
        key = await self._keys.get_by_id(key_id)
        if key is None or key.user_token != user_token:
            raise EntityNotFoundError("ApiKey", key_id)
        key.is_active = False
        await self._keys.update(key)
        logger.info("API key %s revoked", key_id)

    async def issue_key(
        self, user_token: str, plan_id: str, valid_days: int | None = 30
    ) -> tuple[ApiKey, str]:
        """Admin path: attach a fresh key on ``plan_id`` to a visitor token."""
        plan = await self._plans.get_by_id(plan_id)
        if plan is None:
            raise EntityNotFoundError("ApiPlan", plan_id)

        expiry = None
        if valid_days:
            expiry = datetime.now(timezone.utc) + timedelta(days=valid_days)

        raw_key, key_hash = generate_api_key()
        key = await self._keys.create(
            ApiKey(user_token=user_token, key_hash=key_hash, plan_id=plan.id, expiry_date=expiry)
        )
        logger.info("Issued API key on plan %s for visitor %s", plan.name, user_token)
        return key, raw_key

    # ── Plans ────────────────────────────────────────────────────────

    async def list_plans(self, *, active_only: bool = True) -> list[ApiPlan]:
        return await self._plans.get_all(active_only=active_only)

    async def create_plan(self, plan: ApiPlan) -> ApiPlan:
        return await self._plans.create(plan)

    async def ensure_default_plans(self) -> int:
        """Seed the default plans into an empty table. Returns how many were added."""
        if await self._plans.get_all():
            return 0
        for plan in DEFAULT_PLANS:
            await self._plans.create(
                ApiPlan(
                    id=plan.id,
                    name=plan.name,
                    price=plan.price,
                    request_limit=plan.request_limit,
                    features=list(plan.features),
                    sort_order=plan.sort_order,
                )
            )
        logger.info("Seeded %d default API plans", len(DEFAULT_PLANS))
        return len(DEFAULT_PLANS)

    async def stats(self) -> dict[str, int]:
        return {
            "totalKeys": await self._keys.count(),
            "activeKeys": await self._keys.count(active_only=True),
            "totalRequests": await self._keys.total_requests(),
        }
