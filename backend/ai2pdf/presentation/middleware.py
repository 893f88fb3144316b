"""HTTP middleware: request logging and anonymous visitor tracking."""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ai2pdf.application.services.visitor_service import VisitorService
from ai2pdf.config import get_settings
from ai2pdf.infrastructure.database.repositories import SQLAlchemyVisitorRepository

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every ``/api`` request."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not path.startswith("/api"):
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s failed after %.1fms",
                request.method, path, (time.perf_counter() - start_time) * 1000,
            )
            raise

        logger.info(
            "%s %s %d in %.1fms",
            request.method, path, response.status_code, (time.perf_counter() - start_time) * 1000,
        )
        return response


class VisitorTrackingMiddleware(BaseHTTPMiddleware):
    """Identifies the browser behind each request and keeps its visitor record fresh.

    The token comes from the ``x-user-token`` header, then the ``user-token``
    cookie, and is minted when neither is present. It is exposed as
    ``request.state.user_token`` and echoed back as a long-lived cookie.
    Tracking failures are logged and never block the request.
    """

    async def dispatch(self, request: Request, call_next):
        settings = get_settings()
        token = (
            request.headers.get(settings.visitor_header_name)
            or request.cookies.get(settings.visitor_cookie_name)
            or str(uuid.uuid4())
        )
        request.state.user_token = token

        await self._track(request, token)

        response: Response = await call_next(request)
        response.set_cookie(
            settings.visitor_cookie_name,
            token,
            max_age=settings.visitor_cookie_max_age_days * 24 * 60 * 60,
            httponly=True,
            samesite="lax",
        )
        return response

    async def _track(self, request: Request, token: str) -> None:
        session_factory = getattr(request.app.state, "session_factory", None)
        if session_factory is None:
            return
        try:
            async with session_factory() as session:
                service = VisitorService(SQLAlchemyVisitorRepository(session))
                await service.track(
                    token,
                    ip_address=request.client.host if request.client else None,
                    user_agent=request.headers.get("user-agent"),
                )
                await session.commit()
        except Exception:
            logger.warning("Visitor tracking failed for %s", token, exc_info=True)
