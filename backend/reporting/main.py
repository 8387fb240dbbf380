"""FastAPI application entrypoint.

Configures logging and CORS, builds the dataset registry once, includes the
analytics router, and exposes a healthcheck endpoint.
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reporting import schemas
from reporting.deps import get_settings
from reporting.routers import analytics as analytics_router
from reporting.semantic.registry import build_default_registry

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title="Reporting Semantic Layer API",
        description="""
        Business-semantics layer in front of Cube.js.

        Report UIs describe queries with business ids (KPIs, dimensions,
        filters); this API validates them against the dataset registry,
        translates them to Cube.js queries with tenant/user security filters
        injected, and returns the rows with column metadata.
        """,
        version="1.0.0",
    )

    # Built once; read-only afterwards, shared by all requests.
    app.state.registry = build_default_registry()

    allowed_origins = settings.cors_origins
    logger.info(f"[CORS] Allowed origins: {allowed_origins}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(analytics_router.router)

    @app.get(
        "/health",
        response_model=schemas.HealthResponse,
        tags=["Health"],
        summary="Health check",
    )
    def health():
        return schemas.HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc))

    return app


app = create_app()
