from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import text

from formbridge import __version__
from formbridge.config import get_settings
from formbridge.database import get_db_session
from formbridge.web.registry import registered_models

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> dict:
    settings = get_settings()
    return {
        "ok": True,
        "service": "formbridge",
        "version": __version__,
        "environment": settings.ENVIRONMENT,
        "form_models": registered_models(),
    }


@router.get("/health/deps")
def health_deps() -> dict:
    try:
        with get_db_session() as db:
            db.execute(text("SELECT 1"))
        deps = {"db": {"ok": True}}
    except Exception as exc:
        deps = {"db": {"ok": False, "error": str(exc)}}
    return {"ok": deps["db"]["ok"], "deps": deps}
