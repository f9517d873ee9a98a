"""Add-on eligibility by fuel type and stage.

An option is eligible for ``(fuel, stage_name)`` when

    (is_universal OR fuel in applicable_fuel_types)
    AND (stage_compatibility is unset OR stage_compatibility == stage_name)

"Universal" (any fuel) and "global" (no stage gate) are separate
conditions and are never collapsed into one flag.
"""

from collections.abc import Iterable

from ..core.enums import FuelType
from ..models.catalog import AddOnOption, Engine


def _fuel_key(fuel: str) -> str:
    """Canonical fuel key so "Bensin", "bensin" and "petrol" compare equal."""
    fuel_type = FuelType.from_string(fuel)
    if fuel_type is not None:
        return fuel_type.value
    return fuel.strip().lower()


def fuel_matches(option: AddOnOption, fuel: str) -> bool:
    if option.is_universal:
        return True
    if not fuel:
        return False
    wanted = _fuel_key(fuel)
    return any(_fuel_key(f) == wanted for f in option.applicable_fuel_types if f)


def stage_matches(option: AddOnOption, stage_name: str | None) -> bool:
    """Stage gate check.

    Engine-level queries (``stage_name=None``) only accept ungated options.
    Gated options compare stage names exactly as stored, case included.
    """
    if option.stage_compatibility is None:
        return True
    if stage_name is None:
        return False
    return option.stage_compatibility == stage_name


def is_eligible(option: AddOnOption, fuel: str, stage_name: str | None) -> bool:
    return fuel_matches(option, fuel) and stage_matches(option, stage_name)


def match_addons(
    options: Iterable[AddOnOption], fuel: str, stage_name: str | None
) -> list[AddOnOption]:
    """Return the options eligible for an engine's fuel and a stage.

    Args:
        options: All add-on option documents, in storage order.
        fuel: The engine's fuel type as stored.
        stage_name: Stage to match, or None for engine-level (global) add-ons.

    Returns:
        Eligible options in their original order; may be empty.
    """
    return [o for o in options if is_eligible(o, fuel, stage_name)]


def attach_addons(engine: Engine, options: Iterable[AddOnOption]) -> Engine:
    """Copy of ``engine`` with global and per-stage add-ons filled in."""
    options = list(options)
    stages = [
        stage.model_copy(update={"addons": match_addons(options, engine.fuel, stage.name)})
        for stage in engine.stages
    ]
    return engine.model_copy(
        update={
            "stages": stages,
            "global_addons": match_addons(options, engine.fuel, None),
        }
    )
