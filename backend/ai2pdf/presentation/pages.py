"""Non-API routes: uploaded HTML tools served as standalone pages."""

import html

from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse, HTMLResponse

from ai2pdf.application.services import ToolCatalogService
from ai2pdf.infrastructure.dependencies import get_tool_catalog_service

router = APIRouter(tags=["Pages"])

_NOT_FOUND_PAGE = """<!DOCTYPE html>
<html>
<head><title>Tool Not Found</title></head>
<body>
  <h1>Tool Not Found</h1>
  <p>The tool "{folder}" does not exist.</p>
  <a href="/">Go back home</a>
</body>
</html>
"""


@router.get("/tools/{folder_name}", response_class=HTMLResponse, include_in_schema=False)
async def serve_tool(
    folder_name: str,
    service: ToolCatalogService = Depends(get_tool_catalog_service),
):
    entrypoint = await service.open_tool(folder_name)
    if entrypoint is None:
        return HTMLResponse(
            _NOT_FOUND_PAGE.format(folder=html.escape(folder_name)),
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return FileResponse(entrypoint, media_type="text/html")
