from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from formbridge import __version__
from formbridge.config import get_settings
from formbridge.database import init_db
from formbridge.exceptions import FormBridgeException
from formbridge.web.health import router as health_router
from formbridge.web.middleware import PageContextMiddleware
from formbridge.web.ui_router import ui_router


def create_app() -> FastAPI:
    app = FastAPI(title="formbridge", version=__version__)
    app.add_middleware(PageContextMiddleware)
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(ui_router, prefix="/api/v1")

    @app.exception_handler(FormBridgeException)
    async def _formbridge_error(_request: Request, exc: FormBridgeException):
        return JSONResponse(
            status_code=exc.status_code, content=jsonable_encoder(exc.to_dict())
        )

    @app.on_event("startup")
    def _startup() -> None:  # pragma: no cover
        # Dev convenience: auto-create tables; use migrations elsewhere.
        if get_settings().ENVIRONMENT == "dev":
            init_db(create_tables=True)

    return app


app = create_app()
