from __future__ import annotations

import logging
from typing import Optional

import typer
import uvicorn

from formbridge import __version__
from formbridge.config import get_settings

app = typer.Typer(add_completion=False, help="formbridge CLI")


@app.callback()
def _root() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def start(
    host: Optional[str] = typer.Option(None, help="Bind host"),
    port: Optional[int] = typer.Option(None, help="Bind port"),
    reload: bool = typer.Option(False, help="Auto-reload on changes (dev)"),
) -> None:
    settings = get_settings()
    uvicorn.run(
        "formbridge.web.app:app",
        host=host or settings.HOST,
        port=port or settings.PORT,
        reload=reload,
    )


@app.command()
def version() -> None:
    typer.echo(__version__)


@app.command("init-db")
def init_db_command() -> None:
    """Create all mapped tables in DATABASE_URL."""
    from formbridge.database import init_db

    init_db(create_tables=True)
    typer.echo("Tables created.")


@app.command()
def menu(
    page: str = typer.Option("", help="Current page identifier"),
    items: Optional[str] = typer.Option(None, help="Menu items; defaults to MENU_ITEMS"),
) -> None:
    """Render the navigation menu as HTML."""
    from formbridge.context import get_page_context
    from formbridge.menu import menu_from_config

    settings = get_settings()
    built = menu_from_config(
        items if items is not None else settings.MENU_ITEMS,
        page_context=get_page_context(page),
    )
    typer.echo(str(built.render()))


if __name__ == "__main__":
    app()
