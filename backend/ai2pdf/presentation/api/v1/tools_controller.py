"""Public tool catalog listing."""

from fastapi import APIRouter, Depends

from ai2pdf.application.schemas import ToolResponse
from ai2pdf.application.services import ToolCatalogService
from ai2pdf.infrastructure.dependencies import get_tool_catalog_service

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.get("", response_model=list[ToolResponse])
async def list_tools(
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> list[ToolResponse]:
    """Active tools, most recently added first."""
    tools = await service.list_tools(active_only=True)
    return [ToolResponse.model_validate(t, from_attributes=True) for t in tools]
