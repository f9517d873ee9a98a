"""FastAPI dependency injection."""

import time
from typing import Annotated, Any

from fastapi import Depends, Header, HTTPException, Request

from ..core.config import Settings, get_settings
from ..core.logging import log_external_call, logger
from ..services.catalog import CatalogService
from ..services.catalog_store import CatalogStore


def get_catalog_store(request: Request) -> CatalogStore:
    """Catalog store created by the app lifespan."""
    return request.app.state.store


def get_catalog_service(
    store: Annotated[CatalogStore, Depends(get_catalog_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CatalogService:
    return CatalogService(store, settings)


async def verify_admin_key(
    request: Request,
    x_admin_key: Annotated[str | None, Header()] = None,
    settings: Settings = Depends(get_settings),
) -> bool:
    """Verify admin API key for write endpoints."""
    if not settings.api_admin_key:
        logger.warning("API_ADMIN_KEY not set - admin endpoints disabled")
        raise HTTPException(
            status_code=503,
            detail="Admin endpoints not configured. Set API_ADMIN_KEY environment variable.",
        )

    if not x_admin_key:
        raise HTTPException(status_code=401, detail="Missing X-Admin-Key header")

    if x_admin_key != settings.api_admin_key:
        logger.warning(f"Invalid admin key attempt from {request.client}")
        raise HTTPException(status_code=403, detail="Invalid admin key")

    return True


async def check_store_health(store: CatalogStore) -> dict[str, Any]:
    """Check content store connectivity."""
    start = time.time()
    try:
        await store.ping()
    except Exception as e:
        duration_ms = (time.time() - start) * 1000
        log_external_call("catalog_store", "health_check", False, duration_ms)
        return {
            "status": "unhealthy",
            "error": str(e),
            "latency_ms": round(duration_ms, 2),
        }
    duration_ms = (time.time() - start) * 1000
    log_external_call("catalog_store", "health_check", True, duration_ms)
    return {"status": "healthy", "latency_ms": round(duration_ms, 2)}
