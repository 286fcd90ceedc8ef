"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
No business logic here. See cms.core.lifespan and cms.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().
"""

from collections.abc import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from cms.api.v1 import api_router
from cms.application.services.collection_registry import build_registry
from cms.core.config import get_settings
from cms.core.exception_handlers import register_exception_handlers
from cms.core.lifespan import create_lifespan
from cms.core.limiter import limiter
from cms.domain.entities.collection import CollectionConfig


def create_app(collections: Iterable[CollectionConfig] | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        collections: Static collection configs. When omitted they are loaded
            from settings.collections_module ("package.module:attribute").
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.registry = build_registry(collections, settings.collections_module)
    app.state.record_store = None
    app.state.session_resolver = None

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
