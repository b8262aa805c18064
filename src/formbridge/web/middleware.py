from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from formbridge.config import get_settings
from formbridge.context import page_var


class PageContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        settings = get_settings()
        page = request.headers.get(settings.PAGE_HEADER)

        token = page_var.set(page) if page_var.get() is None else None
        try:
            return await call_next(request)
        finally:
            if token is not None:
                page_var.reset(token)
