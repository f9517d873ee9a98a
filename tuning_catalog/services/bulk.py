"""Bulk stage-price overrides for every engine of a brand/model.

A reseller enters one price per standard stage in their own currency;
the planner converts each to SEK and produces one override per
(year range, engine, stage). Tuned figures are carried over from an
existing override, else from the base stage.
"""

import logging
import re
from collections.abc import Sequence

from ..core.enums import STANDARD_STAGE_NAMES
from ..core.exceptions import NotFoundError
from ..models.catalog import Brand, Engine, Stage, VehicleModel, YearRange
from ..models.reseller import OverrideKey, ResellerOverride
from ..models.views import BulkOverrideRequest, BulkOverrideRow
from ..utils.slugs import normalize
from .overrides import index_overrides
from .pricing import to_base_currency

logger = logging.getLogger(__name__)


def _compact(value: str) -> str:
    """Case- and whitespace-insensitive form used by the bulk editor."""
    return re.sub(r"\s+", "", value.lower())


def override_document_id(key: OverrideKey) -> str:
    """Deterministic document id for an override key."""
    parts = [
        key.reseller_id,
        key.brand,
        key.model,
        key.year,
        key.engine,
        key.stage_name,
    ]
    return "override-" + "-".join(normalize(p) for p in parts)


def _find_brand(forest: Sequence[Brand], name: str) -> Brand:
    wanted = _compact(name)
    for brand in forest:
        if _compact(brand.name) == wanted:
            return brand
    raise NotFoundError("brand", name)


def _find_model(brand: Brand, name: str) -> VehicleModel:
    wanted = _compact(name)
    for model in brand.models:
        if _compact(model.name) == wanted:
            return model
    raise NotFoundError("model", name)


def _years_to_process(model: VehicleModel, year: str | None) -> list[YearRange]:
    years = [y for y in model.years if y.label == year] if year else list(model.years)
    if not years:
        raise NotFoundError("year", year or "")
    return years


def _stage_named(engine: Engine, name: str) -> Stage | None:
    wanted = _compact(name)
    return next((s for s in engine.stages if _compact(s.name) == wanted), None)


def plan_bulk_overrides(
    forest: Sequence[Brand],
    request: BulkOverrideRequest,
    reseller_id: str,
    existing: Sequence[ResellerOverride],
    currency: str,
    rates: dict[str, float] | None = None,
) -> tuple[list[BulkOverrideRow], list[ResellerOverride]]:
    """Plan the overrides a bulk price edit would write.

    Args:
        forest: Catalog brands.
        request: Brand/model (optionally one year range) and stage prices.
        reseller_id: Reseller the overrides belong to.
        existing: The reseller's current overrides.
        currency: Currency the prices were entered in.
        rates: Exchange table; defaults to the static table.

    Returns:
        Preview rows and the override documents to write. Stages with an
        empty price are skipped.

    Raises:
        NotFoundError: if the brand, model or year range does not exist.
    """
    brand = _find_brand(forest, request.brand.strip())
    model = _find_model(brand, request.model.strip())
    year = request.year.strip() if request.year else None
    years = _years_to_process(model, year)

    prices = {
        stage_name: to_base_currency(value, currency, rates)
        for stage_name, value in request.prices_by_stage().items()
    }
    current = index_overrides(existing)

    rows: list[BulkOverrideRow] = []
    documents: list[ResellerOverride] = []
    for year_entry in years:
        for engine in year_entry.engines:
            for stage_name in STANDARD_STAGE_NAMES:
                price = prices.get(stage_name)
                if price is None:
                    continue
                key = OverrideKey(
                    reseller_id=reseller_id,
                    brand=brand.name,
                    model=model.name,
                    year=year_entry.label,
                    engine=engine.label,
                    stage_name=stage_name,
                )
                base = _stage_named(engine, stage_name)
                previous = current.get(key)

                rows.append(
                    BulkOverrideRow(
                        brand=brand.name,
                        model=model.name,
                        year=year_entry.label,
                        engine=engine.label,
                        stage_name=stage_name,
                        new_price=price,
                        current_price=base.price if base else None,
                    )
                )
                documents.append(
                    ResellerOverride(
                        id=(previous.id if previous and previous.id else None)
                        or override_document_id(key),
                        reseller_id=reseller_id,
                        brand=brand.name,
                        model=model.name,
                        year=year_entry.label,
                        engine=engine.label,
                        stage_name=stage_name,
                        price=price,
                        tuned_hk=_first_defined(
                            previous.tuned_hk if previous else None,
                            base.tuned_hk if base else None,
                        ),
                        tuned_nm=_first_defined(
                            previous.tuned_nm if previous else None,
                            base.tuned_nm if base else None,
                        ),
                    )
                )

    logger.info(
        "Planned %d bulk overrides reseller=%s brand=%s model=%s",
        len(documents),
        reseller_id,
        brand.name,
        model.name,
    )
    return rows, documents


def _first_defined(*values):
    return next((v for v in values if v is not None), None)
