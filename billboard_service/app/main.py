"""FastAPI application factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI

from billboard_service.app.exception_handlers import configure_exception_handlers
from billboard_service.app.lifespan import lifespan
from billboard_service.app.router import setup_routers
from billboard_service.core.settings import get_app_settings, get_websocket_settings

if TYPE_CHECKING:
    from billboard_service.infra.flags import FlagProvider


def create_app(flag_provider: FlagProvider | None = None) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        flag_provider: Provider to serve instead of the one named by
            FlagSettings. The caller keeps ownership; shutdown does not close it.

    Returns:
        Configured FastAPI application instance.
    """
    app_settings = get_app_settings()

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        docs_url=app_settings.get_docs_url(),
        redoc_url=None,
        openapi_url=app_settings.get_openapi_url(),
        debug=app_settings.debug,
        lifespan=lifespan,
    )
    app.state.flag_provider = flag_provider

    configure_exception_handlers(app)
    setup_routers(app, app_settings, get_websocket_settings())

    return app


# Application instance for uvicorn
app = create_app()
