"""Enums for catalog-related constants."""

from enum import Enum


class FuelType(str, Enum):
    """Engine fuel types used for add-on eligibility."""

    DIESEL = "diesel"
    PETROL = "petrol"
    HYBRID = "hybrid"
    ELECTRIC = "electric"

    @classmethod
    def from_string(cls, value: str | None) -> "FuelType | None":
        """Convert string to enum, handling the catalog's local spellings."""
        if not value:
            return None
        value_lower = value.strip().lower()
        mappings = {
            "diesel": cls.DIESEL,
            "petrol": cls.PETROL,
            "gasoline": cls.PETROL,
            "bensin": cls.PETROL,
            "hybrid": cls.HYBRID,
            "hybrid bensin": cls.HYBRID,
            "hybrid diesel": cls.HYBRID,
            "electric": cls.ELECTRIC,
            "el": cls.ELECTRIC,
            "elbil": cls.ELECTRIC,
        }
        return mappings.get(value_lower)


class Currency(str, Enum):
    """Display currencies supported by reseller configs."""

    SEK = "SEK"
    EUR = "EUR"
    USD = "USD"


# Stage names offered by the bulk price editor, in display order
STANDARD_STAGE_NAMES: tuple[str, ...] = ("Steg 1", "Steg 2", "Steg 3", "Steg 4", "DSG")

# Static exchange rates, SEK is base (1 SEK = rate units of currency)
EXCHANGE_RATES: dict[str, float] = {
    Currency.SEK.value: 1.0,
    Currency.EUR.value: 0.1,
    Currency.USD.value: 0.095,
}

BASE_CURRENCY = Currency.SEK.value
DEFAULT_LANGUAGE = "sv"

# Engine page sections a reseller can switch off (ResellerConfig.visible_sections)
SECTION_AKTPLUS = "aktplus"
SECTION_DESCRIPTIONS = "descriptions"
