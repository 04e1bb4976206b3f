"""Server commands."""

import click
import uvicorn

from billboard_service.cli.utils import info, warning
from billboard_service.core.settings import get_app_settings


@click.command()
@click.option(
    "--host",
    default=None,
    help="Host to bind (default: from settings or 0.0.0.0)",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Port to bind (default: from settings or 3000)",
)
@click.option(
    "--reload/--no-reload",
    default=False,
    help="Enable auto-reload on code changes",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["critical", "error", "warning", "info", "debug", "trace"]),
    help="Uvicorn log level",
)
def serve(host: str | None, port: int | None, reload: bool, log_level: str) -> None:
    """Run the billboard service under uvicorn."""
    settings = get_app_settings()
    host = host or settings.host
    port = port or settings.port

    info(f"Server will run at: http://{host}:{port}")
    info(f"Environment: {settings.environment}")
    if reload:
        warning("Auto-reload enabled; do not use in production")

    uvicorn.run(
        "billboard_service.app.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )
