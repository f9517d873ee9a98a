"""Path resolution over the brand → model → year → engine tree.

Every level compares normalized slugs (see ``utils.slugs``). Brands and
models may carry a stored slug, which is preferred over the display name;
year ranges and engines only have labels. The first matching child in
storage order wins; there is no fuzzy or partial matching.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Optional, TypeVar

from ..core.exceptions import NotFoundError
from ..core.logging import log_duplicate_match, log_not_found
from ..models.catalog import Brand, Engine, VehicleModel, YearRange
from ..models.views import ResolvedEngine, VehiclePath
from ..utils.slugs import normalize

T = TypeVar("T")


# =============================================================================
# Identifying slugs per level
# =============================================================================


def brand_slug(brand: Brand) -> str:
    """Canonical slug for a brand: stored slug, else normalized name."""
    return normalize(brand.slug) if brand.slug else normalize(brand.name)


def model_slug(model: VehicleModel) -> str:
    """Canonical slug for a model: stored slug, else normalized name."""
    return normalize(model.slug) if model.slug else normalize(model.name)


def year_slug(year: YearRange) -> str:
    return normalize(year.label)


def engine_slug(engine: Engine) -> str:
    return normalize(engine.label)


def _matches_slug_or_name(slug: Optional[str], name: str, wanted: str) -> bool:
    # Stored slug first, normalized display name as fallback
    if slug and normalize(slug) == wanted:
        return True
    return normalize(name) == wanted


# =============================================================================
# Level lookups
# =============================================================================


def _first_match(
    items: Sequence[T],
    keys: Callable[[T], bool],
    level: str,
    segment: str,
) -> T:
    """Return the first item satisfying ``keys``, raising NotFoundError if none."""
    matches = [item for item in items if keys(item)]
    if not matches:
        log_not_found(level, segment)
        raise NotFoundError(level, segment)
    if len(matches) > 1:
        log_duplicate_match(level, segment, len(matches))
    return matches[0]


def find_brand(brands: Iterable[Brand], segment: str) -> Brand:
    wanted = normalize(segment)
    return _first_match(
        list(brands),
        lambda b: _matches_slug_or_name(b.slug, b.name, wanted),
        "brand",
        segment,
    )


def find_model(brand: Brand, segment: str) -> VehicleModel:
    wanted = normalize(segment)
    return _first_match(
        brand.models,
        lambda m: _matches_slug_or_name(m.slug, m.name, wanted),
        "model",
        segment,
    )


def find_year(model: VehicleModel, segment: str) -> YearRange:
    wanted = normalize(segment)
    return _first_match(
        model.years, lambda y: normalize(y.label) == wanted, "year", segment
    )


def find_engine(year: YearRange, segment: str) -> Engine:
    wanted = normalize(segment)
    return _first_match(
        year.engines, lambda e: normalize(e.label) == wanted, "engine", segment
    )


def resolve(forest: Iterable[Brand], path: VehiclePath) -> ResolvedEngine:
    """Resolve URL path segments to a single engine record.

    Args:
        forest: Brands in storage order.
        path: Brand/model/year/engine segments as they appear in the URL.

    Returns:
        The brand, model, year range and engine the path addresses.

    Raises:
        NotFoundError: at the first level with no matching child.
    """
    brand = find_brand(forest, path.brand)
    model = find_model(brand, path.model)
    year = find_year(model, path.year)
    engine = find_engine(year, path.engine)
    return ResolvedEngine(brand=brand, model=model, year=year, engine=engine)


def find_duplicate_paths(forest: Iterable[Brand]) -> list[tuple[str, int]]:
    """List canonical paths that more than one catalog node normalizes to.

    Only the first node in storage order is reachable through such a
    path; the rest are shadowed.

    Returns:
        ``(path, count)`` pairs in first-seen order.
    """
    counts: dict[str, int] = {}

    def _count(path: str) -> None:
        counts[path] = counts.get(path, 0) + 1

    for brand in forest:
        b = f"/{brand_slug(brand)}"
        _count(b)
        for model in brand.models:
            m = f"{b}/{model_slug(model)}"
            _count(m)
            for year in model.years:
                y = f"{m}/{year_slug(year)}"
                _count(y)
                for engine in year.engines:
                    _count(f"{y}/{engine_slug(engine)}")
    return [(path, n) for path, n in counts.items() if n > 1]
