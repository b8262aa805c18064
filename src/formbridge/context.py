from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode

from formbridge.config import get_settings


page_var: ContextVar[Optional[str]] = ContextVar("page", default=None)

# Pages carrying this marker are addressed as-is, outside the page namespace.
PAGE_MARKER = ";"


@dataclass(frozen=True)
class PageContext:
    page: str = ""
    url_postfix: str = ""
    base_url: str = "/"

    def destination_url(self, page: str, **args: Any) -> str:
        if page.startswith(PAGE_MARKER):
            url = page[len(PAGE_MARKER) :]
        else:
            url = self.base_url.rstrip("/") + "/" + page + self.url_postfix
        if args:
            url += "?" + urlencode(args)
        return url


def get_page_context(page: Optional[str] = None) -> PageContext:
    settings = get_settings()
    return PageContext(
        page=page if page is not None else (page_var.get() or ""),
        url_postfix=settings.URL_POSTFIX,
        base_url=settings.BASE_URL,
    )
