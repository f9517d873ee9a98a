"""FastAPI app entry point for the tuning catalog API."""

import time
from contextlib import asynccontextmanager
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .api.deps import check_store_health, get_catalog_store
from .api.routes import router
from .core.config import Settings, get_settings, validate_settings
from .core.exceptions import CatalogStoreError, NotFoundError
from .core.logging import log_error, log_request, log_response, logger, setup_logging
from .services.catalog_store import CatalogStore
from .services.sanity import SanityCatalogStore


class HealthResponse(BaseModel):
    status: str
    store: dict[str, Any] | None = None


def create_app(
    settings: Settings | None = None, store: CatalogStore | None = None
) -> FastAPI:
    """Build the app. ``store`` replaces the Sanity-backed store (tests, local data)."""
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan - open the catalog store on startup."""
        logger.info("Starting tuning catalog API...")
        if store is not None:
            app.state.store = store
        else:
            validate_settings(settings)
            app.state.store = SanityCatalogStore(settings)
            logger.info(
                f"Sanity store ready project={settings.sanity_project_id} "
                f"dataset={settings.sanity_dataset}"
            )
        yield
        logger.info("Shutting down...")
        await app.state.store.close()

    app = FastAPI(
        title="Tuning Catalog API",
        description="Vehicle tuning catalog with reseller overrides",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiting applies to every route
    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Admin-Key"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        log_request(request.method, request.url.path)

        response = await call_next(request)

        duration_ms = (time.time() - start) * 1000
        log_response(request.method, request.url.path, response.status_code, duration_ms)
        return response

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=exc.to_dict())

    @app.exception_handler(CatalogStoreError)
    async def store_error_handler(request: Request, exc: CatalogStoreError):
        log_error("Catalog store failure", exc, operation=exc.operation)
        return JSONResponse(
            status_code=502, content={"error": "Catalog store unavailable"}
        )

    app.include_router(router, prefix="/api")

    @app.get("/health", response_model=HealthResponse)
    async def health(
        store: Annotated[CatalogStore, Depends(get_catalog_store)],
        detailed: bool = False,
    ):
        """
        Health check endpoint.

        - Basic: Returns {"status": "healthy"}
        - Detailed (?detailed=true): Checks catalog store connectivity
        """
        if not detailed:
            return {"status": "healthy"}
        store_health = await check_store_health(store)
        overall = "healthy" if store_health["status"] == "healthy" else "degraded"
        return {"status": overall, "store": store_health}

    return app


app = create_app()
