"""V1 API router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from ai2pdf.presentation.api.v1.endpoints.health import router as health_router
from ai2pdf.presentation.api.v1.endpoints.track_user import router as track_user_router
from ai2pdf.presentation.api.v1.conversions_controller import router as conversions_router
from ai2pdf.presentation.api.v1.public_api_controller import router as public_api_router
from ai2pdf.presentation.api.v1.user_api_controller import router as user_api_router
from ai2pdf.presentation.api.v1.tools_controller import router as tools_router
from ai2pdf.presentation.api.v1.admin_controller import router as admin_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(track_user_router)
router.include_router(conversions_router)
router.include_router(public_api_router)
router.include_router(user_api_router)
router.include_router(tools_router)
router.include_router(admin_router)
