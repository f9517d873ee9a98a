"""FastAPI route definitions for the tuning catalog API."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..models.catalog import AddOnOption, Brand
from ..models.reseller import ResellerConfig, ResellerOverride
from ..models.views import (
    AddOnView,
    BulkOverrideRequest,
    BulkOverrideResult,
    EngineDetail,
    NavItem,
    StageDescriptionView,
    VehiclePath,
)
from ..services.catalog import CatalogService
from .deps import get_catalog_service, verify_admin_key

router = APIRouter()

Service = Annotated[CatalogService, Depends(get_catalog_service)]
Admin = Annotated[bool, Depends(verify_admin_key)]


class SaveOverridesResponse(BaseModel):
    success: bool
    updated: int


# ---------------------------------------------------------------------------
# Catalog navigation
# ---------------------------------------------------------------------------


@router.get("/brands")
async def get_brands(service: Service) -> list[NavItem]:
    """All brands with canonical slugs."""
    return await service.list_brands()


@router.get("/brands/{brand}/models")
async def get_models(brand: str, service: Service) -> list[NavItem]:
    return await service.list_models(brand)


@router.get("/brands/{brand}/models/{model}/years")
async def get_years(brand: str, model: str, service: Service) -> list[NavItem]:
    return await service.list_years(brand, model)


@router.get("/brands/{brand}/models/{model}/years/{year}/engines")
async def get_engines(brand: str, model: str, year: str, service: Service) -> list[NavItem]:
    return await service.list_engines(brand, model, year)


# ---------------------------------------------------------------------------
# Engine pages
# ---------------------------------------------------------------------------


@router.get("/tuning/{brand}/{model}/{year}/{engine}")
async def get_tuning(
    brand: str,
    model: str,
    year: str,
    engine: str,
    service: Service,
    reseller_id: Optional[str] = None,
) -> EngineDetail:
    """Engine with stages and add-ons; reseller overrides applied if requested."""
    path = VehiclePath(brand=brand, model=model, year=year, engine=engine)
    return await service.engine_detail(path, reseller_id=reseller_id)


@router.get("/tuning/{reseller_id}/{brand}/{model}/{year}/{engine}")
async def get_reseller_tuning(
    reseller_id: str,
    brand: str,
    model: str,
    year: str,
    engine: str,
    service: Service,
) -> EngineDetail:
    path = VehiclePath(brand=brand, model=model, year=year, engine=engine)
    return await service.engine_detail(path, reseller_id=reseller_id)


@router.get("/addons")
async def get_addons(service: Service) -> list[AddOnOption]:
    """All add-on options, unfiltered."""
    return await service.addon_options()


# ---------------------------------------------------------------------------
# Reseller portal
# ---------------------------------------------------------------------------


@router.get("/resellers/{reseller_id}/config")
async def get_reseller_config(reseller_id: str, service: Service) -> ResellerConfig:
    return await service.reseller_config(reseller_id)


@router.get("/resellers/{reseller_id}/catalog")
async def get_reseller_catalog(reseller_id: str, service: Service) -> list[Brand]:
    """Full catalog with the reseller's stage overrides applied."""
    return await service.reseller_catalog(reseller_id)


@router.get("/resellers/{reseller_id}/overrides")
async def get_overrides(reseller_id: str, service: Service) -> list[ResellerOverride]:
    return await service.list_overrides(reseller_id)


@router.put("/resellers/{reseller_id}/overrides")
async def put_overrides(
    reseller_id: str,
    overrides: list[ResellerOverride],
    service: Service,
    _admin: Admin,
) -> SaveOverridesResponse:
    """Create or replace overrides. Requires X-Admin-Key."""
    updated = await service.save_overrides(reseller_id, overrides)
    return SaveOverridesResponse(success=True, updated=updated)


@router.post("/resellers/{reseller_id}/bulk-overrides")
async def post_bulk_overrides(
    reseller_id: str,
    request: BulkOverrideRequest,
    service: Service,
    _admin: Admin,
) -> BulkOverrideResult:
    """Set stage prices for every engine of a model. Requires X-Admin-Key.

    With ``preview`` set, returns the planned rows without writing.
    """
    return await service.bulk_overrides(reseller_id, request)


@router.get("/resellers/{reseller_id}/addons")
async def get_reseller_addons(
    reseller_id: str, service: Service, lang: Optional[str] = None
) -> list[AddOnView]:
    return await service.reseller_addons(reseller_id, lang)


@router.get("/resellers/{reseller_id}/stage-descriptions")
async def get_stage_descriptions(
    reseller_id: str, service: Service
) -> list[StageDescriptionView]:
    return await service.reseller_stage_descriptions(reseller_id)
