"""Aggregated figures for the admin dashboard."""

from ai2pdf.application.services.api_access_service import ApiAccessService
from ai2pdf.application.services.conversion_service import ConversionService
from ai2pdf.application.services.tool_catalog_service import ToolCatalogService
from ai2pdf.application.services.visitor_service import VisitorService


class AdminService:

    def __init__(
        self,
        visitors: VisitorService,
        tools: ToolCatalogService,
        conversions: ConversionService,
        api_access: ApiAccessService,
    ):
        self._visitors = visitors
        self._tools = tools
        self._conversions = conversions
        self._api_access = api_access

    async def dashboard(self) -> dict:
        by_type = await self._visitors.count_by_type()
        all_tools = await self._tools.list_tools(active_only=False)
        by_status = await self._conversions.count_by_status()
        api_stats = await self._api_access.stats()

        return {
            "users": {"total": sum(by_type.values()), "by_type": by_type},
            "tools": {
                "total": len(all_tools),
                "active": sum(1 for t in all_tools if t.is_active),
            },
            "conversions": {"total": sum(by_status.values()), **by_status},
            "api": api_stats,
        }
