"""Reseller override merging.

Overrides are matched by ``OverrideKey`` using exact string equality;
unlike path resolution, no slug normalization is applied, since overrides
are written with the literal labels shown in the reseller admin. Merges
are shallow and override-wins; fields an override leaves unset keep
their base value. A missing override is not an error.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from ..core.logging import log_duplicate_override
from ..models.catalog import AddOnOption, Brand, Engine, Stage, StageDescriptionDoc
from ..models.reseller import AddOnOverride, OverrideKey, ResellerOverride
from ..models.views import AddOnView, StageDescriptionView
from ..utils.portable_text import resolve_localized

logger = logging.getLogger(__name__)

# Stage fields a reseller override may replace
STAGE_OVERRIDE_FIELDS: tuple[str, ...] = ("price", "tuned_hk", "tuned_nm")


# =============================================================================
# Stage overrides
# =============================================================================


def index_overrides(
    overrides: Iterable[ResellerOverride],
) -> dict[OverrideKey, ResellerOverride]:
    """Index overrides by composite key; the first of any duplicates wins."""
    index: dict[OverrideKey, ResellerOverride] = {}
    for override in overrides:
        key = override.key
        if key in index:
            log_duplicate_override(key)
            continue
        index[key] = override
    return index


def find_override(
    overrides: Iterable[ResellerOverride], key: OverrideKey
) -> ResellerOverride | None:
    return next((o for o in overrides if o.key == key), None)


def merge_override(stage: Stage, override: ResellerOverride | None) -> Stage:
    """Shallow-merge override values that are defined onto a copy of ``stage``."""
    if override is None:
        return stage
    update = {
        field: getattr(override, field)
        for field in STAGE_OVERRIDE_FIELDS
        if getattr(override, field) is not None
    }
    if not update:
        return stage
    return stage.model_copy(update=update)


def apply_override(
    stage: Stage, overrides: Sequence[ResellerOverride], key: OverrideKey
) -> Stage:
    """Apply the reseller override addressed by ``key`` to ``stage``.

    Args:
        stage: Base stage from the catalog.
        overrides: The reseller's overrides, in storage order.
        key: Composite key of the stage being shown.

    Returns:
        The merged stage, or ``stage`` itself when no override matches.
    """
    return merge_override(stage, find_override(overrides, key))


def apply_engine_overrides(
    engine: Engine,
    overrides: Sequence[ResellerOverride],
    reseller_id: str,
    brand: str,
    model: str,
    year: str,
) -> Engine:
    """Apply overrides to every stage of an engine.

    ``brand``, ``model`` and ``year`` are the display labels used when the
    overrides were written (brand name, model name, year range).
    """
    return _merge_engine(
        engine, index_overrides(overrides), reseller_id, brand, model, year
    )


def _merge_engine(
    engine: Engine,
    index: dict[OverrideKey, ResellerOverride],
    reseller_id: str,
    brand: str,
    model: str,
    year: str,
) -> Engine:
    stages = [
        merge_override(
            stage,
            index.get(
                OverrideKey(
                    reseller_id=reseller_id,
                    brand=brand,
                    model=model,
                    year=year,
                    engine=engine.label,
                    stage_name=stage.name,
                )
            ),
        )
        for stage in engine.stages
    ]
    return engine.model_copy(update={"stages": stages})


def engine_branding(
    overrides: Iterable[ResellerOverride],
    engine_key: tuple[str, str, str, str, str],
    base_logo: dict[str, Any] | None,
) -> tuple[dict[str, Any] | None, bool]:
    """Resolve logo and add-on visibility for an engine page.

    The first override on the engine that sets a logo replaces the brand
    logo; the first one that sets visibility decides it. Add-ons are
    visible unless an override hides them.
    """
    logo = None
    visible = None
    for override in overrides:
        if override.key.engine_key() != engine_key:
            continue
        if logo is None and override.logo:
            logo = override.logo
        if visible is None and override.aktplus_visible is not None:
            visible = override.aktplus_visible
    return logo or base_logo, True if visible is None else visible


def apply_catalog_overrides(
    forest: Sequence[Brand], overrides: Iterable[ResellerOverride], reseller_id: str
) -> list[Brand]:
    """Copy of the whole forest with a reseller's stage overrides applied."""
    index = index_overrides(o for o in overrides if o.reseller_id == reseller_id)
    if not index:
        return list(forest)

    brands = []
    for brand in forest:
        models = []
        for model in brand.models:
            years = []
            for year in model.years:
                engines = [
                    _merge_engine(
                        engine,
                        index,
                        reseller_id,
                        brand.name,
                        model.name,
                        year.label,
                    )
                    for engine in year.engines
                ]
                years.append(year.model_copy(update={"engines": engines}))
            models.append(model.model_copy(update={"years": years}))
        brands.append(brand.model_copy(update={"models": models}))
    logger.info("Overrides applied for reseller=%s total=%d", reseller_id, len(index))
    return brands


# =============================================================================
# Add-on and stage description overrides
# =============================================================================


def merge_addon_overrides(
    options: Iterable[AddOnOption],
    addon_overrides: Iterable[AddOnOverride],
    lang: str,
) -> list[AddOnView]:
    """Merge a reseller's add-on overrides onto the default add-ons.

    Title and description fall back to the default when the override
    leaves them empty; the gallery falls back when the override has none.
    """
    by_addon: dict[str, AddOnOverride] = {}
    for override in addon_overrides:
        by_addon.setdefault(override.addon_id, override)

    merged = []
    for option in options:
        override = by_addon.get(option.id)
        gallery = override.gallery if override and override.gallery else option.gallery
        price = override.price if override and override.price is not None else None
        if price is None:
            price = option.price if option.price is not None else 0
        merged.append(
            AddOnView(
                id=option.id,
                title=resolve_localized((override and override.title) or option.title, lang),
                description=resolve_localized(
                    (override and override.description) or option.description, lang
                ),
                price=price,
                is_override=override is not None,
                image_url=gallery[0].url if gallery else None,
                installation_time=option.installation_time,
            )
        )
    return merged


def merge_stage_descriptions(
    defaults: Iterable[StageDescriptionDoc],
    overrides: Iterable[StageDescriptionDoc],
) -> list[StageDescriptionView]:
    """Shared stage descriptions with a reseller's replacements, keyed by stage name."""
    by_stage: dict[str, StageDescriptionDoc] = {}
    for override in overrides:
        by_stage.setdefault(override.stage_name, override)

    views = []
    for default in defaults:
        override = by_stage.get(default.stage_name)
        views.append(
            StageDescriptionView(
                stage_name=default.stage_name,
                description=(override and override.description) or default.description,
                is_override=override is not None,
            )
        )
    return views
