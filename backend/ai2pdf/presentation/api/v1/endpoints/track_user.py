"""Visitor token echo: the tracking middleware has already recorded the visit."""

from fastapi import APIRouter, Depends

from ai2pdf.application.schemas import TrackUserResponse
from ai2pdf.application.services import VisitorService
from ai2pdf.infrastructure.dependencies import get_user_token, get_visitor_service

router = APIRouter(tags=["Visitors"])


@router.get("/track-user", response_model=TrackUserResponse)
async def track_user(
    user_token: str = Depends(get_user_token),
    service: VisitorService = Depends(get_visitor_service),
) -> TrackUserResponse:
    return TrackUserResponse(
        message="User tracked successfully",
        user_token=user_token,
        total_users=await service.total(),
    )
