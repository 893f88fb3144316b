"""Abstract repository interfaces (ports) for API plans and API keys."""

from abc import ABC, abstractmethod

from ai2pdf.domain.entities import ApiKey, ApiPlan


class ApiPlanRepository(ABC):
    """Port for API plan persistence."""

    @abstractmethod
    async def get_by_id(self, plan_id: str) -> ApiPlan | None:
        ...

    @abstractmethod
    async def get_all(self, *, active_only: bool = False) -> list[ApiPlan]:
        """Retrieve plans ordered by price, cheapest first."""
        ...

    @abstractmethod
    async def create(self, plan: ApiPlan) -> ApiPlan:
        ...


class ApiKeyRepository(ABC):
    """Port for API key persistence."""

    @abstractmethod
    async def get_by_id(self, key_id: str) -> ApiKey | None:
        ...

    @abstractmethod
    async def get_by_hash(self, key_hash: str) -> ApiKey | None:
        ...

    @abstractmethod
    async def get_by_user(self, user_token: str) -> list[ApiKey]:
        """Retrieve all keys for a visitor token, oldest first."""
        ...

    @abstractmethod
    async def create(self, key: ApiKey) -> ApiKey:
        ...

    @abstractmethod
    async def update(self, key: ApiKey) -> ApiKey:
        ...

    @abstractmethod
    async def count(self, *, active_only: bool = False) -> int:
        ...

    @abstractmethod
    async def total_requests(self) -> int:
        """Sum of ``request_count`` across all keys."""
        ...
