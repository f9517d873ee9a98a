"""Catalog service: fetches from the injected store and runs the pure steps.

Request flow for an engine page:
    resolve path → attach add-ons → apply reseller overrides → presentation
"""

import logging

from ..core.config import Settings
from ..core.enums import SECTION_AKTPLUS, SECTION_DESCRIPTIONS
from ..models.catalog import AddOnOption, Brand, Engine, ReferencedDescription
from ..models.reseller import ResellerConfig, ResellerOverride
from ..models.views import (
    AddOnView,
    BulkOverrideRequest,
    BulkOverrideResult,
    EngineDetail,
    NavItem,
    StageDescriptionView,
    StageSummary,
    VehiclePath,
)
from ..utils.slugs import stage_anchor, vehicle_path
from .addons import attach_addons
from .bulk import override_document_id, plan_bulk_overrides
from .catalog_store import CatalogStore
from .pricing import convert_price
from .overrides import (
    apply_catalog_overrides,
    apply_engine_overrides,
    engine_branding,
    merge_addon_overrides,
    merge_stage_descriptions,
)
from .resolver import (
    brand_slug,
    engine_slug,
    find_brand,
    find_model,
    find_year,
    model_slug,
    resolve,
    year_slug,
)

logger = logging.getLogger(__name__)


def _nav(name: str, slug: str, parent: str = "") -> NavItem:
    return NavItem(name=name, slug=slug, path=f"{parent}/{slug}")


def _stage_summaries(engine: Engine, config: ResellerConfig) -> list[StageSummary]:
    """Stage list for an engine page; prices stay SEK, ``display_price`` is converted."""
    show_text = config.section_visible(SECTION_DESCRIPTIONS)
    return [
        StageSummary(
            name=stage.name,
            anchor=stage_anchor(stage.name),
            price=stage.price,
            display_price=convert_price(stage.price, config.currency, config.exchange_rates),
            description_text=stage.description_text if show_text else "",
        )
        for stage in engine.stages
    ]


class CatalogService:
    """Catalog reads and reseller writes over a ``CatalogStore``."""

    def __init__(self, store: CatalogStore, settings: Settings) -> None:
        self.store = store
        self.settings = settings

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    async def list_brands(self) -> list[NavItem]:
        # Alphabetical for display only; resolution keeps storage order
        forest = sorted(
            await self.store.fetch_brand_forest(), key=lambda b: b.name.casefold()
        )
        return [_nav(b.name, brand_slug(b)) for b in forest]

    async def list_models(self, brand: str) -> list[NavItem]:
        found = find_brand(await self.store.fetch_brand_forest(), brand)
        parent = f"/{brand_slug(found)}"
        return [_nav(m.name, model_slug(m), parent) for m in found.models]

    async def list_years(self, brand: str, model: str) -> list[NavItem]:
        found_brand = find_brand(await self.store.fetch_brand_forest(), brand)
        found_model = find_model(found_brand, model)
        parent = f"/{brand_slug(found_brand)}/{model_slug(found_model)}"
        return [_nav(y.label, year_slug(y), parent) for y in found_model.years]

    async def list_engines(self, brand: str, model: str, year: str) -> list[NavItem]:
        found_brand = find_brand(await self.store.fetch_brand_forest(), brand)
        found_model = find_model(found_brand, model)
        found_year = find_year(found_model, year)
        parent = (
            f"/{brand_slug(found_brand)}/{model_slug(found_model)}/{year_slug(found_year)}"
        )
        return [_nav(e.label, engine_slug(e), parent) for e in found_year.engines]

    # -------------------------------------------------------------------------
    # Engine page
    # -------------------------------------------------------------------------

    async def engine_detail(
        self, path: VehiclePath, reseller_id: str | None = None
    ) -> EngineDetail:
        """Resolve an engine page, with a reseller's overrides when given.

        Raises:
            NotFoundError: if any path segment has no match.
        """
        resolved = resolve(await self.store.fetch_brand_forest(), path)
        engine = attach_addons(resolved.engine, await self.store.fetch_addon_options())

        logo = resolved.brand.logo
        aktplus_visible = True
        if reseller_id:
            config = await self.reseller_config(reseller_id)
            overrides = await self.store.fetch_overrides(reseller_id)
            labels = (
                resolved.brand.name,
                resolved.model.name,
                resolved.year.label,
            )
            engine = apply_engine_overrides(engine, overrides, reseller_id, *labels)
            logo, aktplus_visible = engine_branding(
                overrides, (reseller_id, *labels, engine.label), logo
            )
            aktplus_visible = aktplus_visible and config.section_visible(SECTION_AKTPLUS)
            engine = await self._apply_reseller_descriptions(engine, reseller_id)
        else:
            config = self._default_config()

        return EngineDetail(
            brand=resolved.brand.name,
            model=resolved.model.name,
            year=resolved.year.label,
            engine=engine,
            path=vehicle_path(
                brand_slug(resolved.brand),
                model_slug(resolved.model),
                resolved.year.label,
                resolved.engine.label,
            ),
            currency=config.currency,
            stage_summaries=_stage_summaries(engine, config),
            logo=logo,
            aktplus_visible=aktplus_visible,
            reseller_id=reseller_id,
        )

    async def _apply_reseller_descriptions(self, engine: Engine, reseller_id: str) -> Engine:
        """Swap in a reseller's own description for stages they have rewritten."""
        replacements = {
            d.stage_name: d
            for d in reversed(await self.store.fetch_stage_descriptions(reseller_id))
            if d.description
        }
        if not replacements:
            return engine
        stages = []
        for stage in engine.stages:
            doc = replacements.get(stage.name)
            if doc is not None:
                stage = stage.model_copy(
                    update={
                        "description": ReferencedDescription(
                            stage_name=doc.stage_name, blocks=doc.description
                        )
                    }
                )
            stages.append(stage)
        return engine.model_copy(update={"stages": stages})

    # -------------------------------------------------------------------------
    # Add-ons and descriptions
    # -------------------------------------------------------------------------

    async def addon_options(self) -> list[AddOnOption]:
        return await self.store.fetch_addon_options()

    async def reseller_addons(self, reseller_id: str, lang: str | None = None) -> list[AddOnView]:
        options = await self.store.fetch_addon_options()
        overrides = await self.store.fetch_addon_overrides(reseller_id)
        return merge_addon_overrides(options, overrides, lang or self.settings.default_language)

    async def reseller_stage_descriptions(self, reseller_id: str) -> list[StageDescriptionView]:
        defaults = await self.store.fetch_stage_descriptions()
        overrides = await self.store.fetch_stage_descriptions(reseller_id)
        return merge_stage_descriptions(defaults, overrides)

    # -------------------------------------------------------------------------
    # Reseller portal
    # -------------------------------------------------------------------------

    async def reseller_config(self, reseller_id: str) -> ResellerConfig:
        config = await self.store.fetch_reseller_config(reseller_id)
        if config is None:
            return self._default_config(reseller_id)
        return config

    def _default_config(self, reseller_id: str = "") -> ResellerConfig:
        return ResellerConfig(
            reseller_id=reseller_id,
            currency=self.settings.default_currency,
            language=self.settings.default_language,
        )

    async def reseller_catalog(self, reseller_id: str) -> list[Brand]:
        forest = await self.store.fetch_brand_forest()
        overrides = await self.store.fetch_overrides(reseller_id)
        return apply_catalog_overrides(forest, overrides, reseller_id)

    async def list_overrides(self, reseller_id: str) -> list[ResellerOverride]:
        return await self.store.fetch_overrides(reseller_id)

    async def save_overrides(
        self, reseller_id: str, overrides: list[ResellerOverride]
    ) -> int:
        """Write overrides for ``reseller_id``; last write wins per key."""
        documents = []
        for override in overrides:
            override = override.model_copy(update={"reseller_id": reseller_id})
            if not override.id:
                override = override.model_copy(
                    update={"id": override_document_id(override.key)}
                )
            documents.append(override)
        saved = await self.store.save_overrides(documents)
        logger.info("Saved %d overrides reseller=%s", saved, reseller_id)
        return saved

    async def bulk_overrides(
        self, reseller_id: str, request: BulkOverrideRequest
    ) -> BulkOverrideResult:
        """Plan a bulk price edit and, unless previewing, write it."""
        config = await self.reseller_config(reseller_id)
        rows, documents = plan_bulk_overrides(
            await self.store.fetch_brand_forest(),
            request,
            reseller_id,
            await self.store.fetch_overrides(reseller_id),
            config.currency,
            config.exchange_rates,
        )
        if not request.preview and documents:
            await self.store.save_overrides(documents)

        years: list[str] = []
        for row in rows:
            if row.year not in years:
                years.append(row.year)
        return BulkOverrideResult(
            preview=request.preview,
            brand=rows[0].brand if rows else request.brand,
            model=rows[0].model if rows else request.model,
            years=years,
            count=len(rows),
            items=rows if request.preview else [],
        )
