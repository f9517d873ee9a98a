"""Reseller documents: stage overrides, add-on overrides and display config."""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from ..core.enums import BASE_CURRENCY, DEFAULT_LANGUAGE, EXCHANGE_RATES
from .catalog import CatalogDocument, GalleryImage, Number


class OverrideKey(BaseModel):
    """Composite key addressing one stage of one engine for one reseller.

    Fields are compared as stored, without slug normalization: overrides
    are written with the literal labels the admin UI displayed.
    """

    model_config = ConfigDict(frozen=True)

    reseller_id: str
    brand: str
    model: str
    year: str
    engine: str
    stage_name: str

    def engine_key(self) -> tuple[str, str, str, str, str]:
        """Key without the stage, for engine-level branding overrides."""
        return (self.reseller_id, self.brand, self.model, self.year, self.engine)


class ResellerOverride(CatalogDocument):
    id: Optional[str] = Field(default=None, alias="_id")
    reseller_id: str = Field(default="", alias="resellerId")
    brand: str = ""
    model: str = ""
    year: str = ""
    engine: str = ""
    stage_name: str = Field(default="", alias="stageName")

    price: Number = Field(
        default=None, validation_alias=AliasChoices("price", "overridePrice")
    )
    tuned_hk: Number = Field(
        default=None,
        alias="tunedHk",
        validation_alias=AliasChoices("tunedHk", "overrideHp", "tuned_hk"),
    )
    tuned_nm: Number = Field(
        default=None,
        alias="tunedNm",
        validation_alias=AliasChoices("tunedNm", "overrideNm", "tuned_nm"),
    )
    logo: Optional[dict[str, Any]] = None
    aktplus_visible: Optional[bool] = Field(
        default=None,
        alias="aktplusVisible",
        validation_alias=AliasChoices("aktplusVisible", "showAktPlus", "aktplus_visible"),
    )

    @property
    def key(self) -> OverrideKey:
        return OverrideKey(
            reseller_id=self.reseller_id,
            brand=self.brand,
            model=self.model,
            year=self.year,
            engine=self.engine,
            stage_name=self.stage_name,
        )

    def to_document(self) -> dict[str, Any]:
        """Serialize for a ``createOrReplace`` mutation."""
        doc = self.model_dump(by_alias=True, exclude_none=True)
        doc["_type"] = "resellerOverride"
        return doc


class AddOnOverride(CatalogDocument):
    """A reseller's replacement title/description/price/gallery for one add-on."""

    id: Optional[str] = Field(default=None, alias="_id")
    reseller_id: str = Field(default="", alias="resellerId")
    addon_id: str = Field(default="", alias="aktPlusId")
    title: Any = None
    description: Any = None
    price: Number = None
    gallery: list[GalleryImage] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def flatten_reference(cls, data: Any) -> Any:
        # References arrive dereferenced as {"_id": ...} or raw as {"_ref": ...}
        if isinstance(data, dict) and isinstance(data.get("aktPlusId"), dict):
            ref = data["aktPlusId"]
            data = {**data, "aktPlusId": ref.get("_id") or ref.get("_ref") or ""}
        return data


class Banner(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled: bool = False
    title: Any = None
    text: Any = None
    link: Optional[str] = None
    image: Optional[dict[str, Any]] = None


class ResellerConfig(CatalogDocument):
    """Per-reseller display and branding settings.

    Consumed only by presentation; independent of the override mechanism.
    """

    reseller_id: str = Field(default="", alias="resellerId")
    currency: str = BASE_CURRENCY
    language: str = DEFAULT_LANGUAGE
    logo: Optional[dict[str, Any]] = None
    visible_sections: dict[str, bool] = Field(
        default_factory=dict, alias="visibleSections"
    )
    banner: Optional[Banner] = None
    exchange_rates: dict[str, float] = Field(
        default_factory=lambda: dict(EXCHANGE_RATES), alias="exchangeRates"
    )

    def section_visible(self, section: str) -> bool:
        """Sections are visible unless explicitly switched off."""
        return self.visible_sections.get(section, True)
