from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import BASE_CURRENCY
from .catalog import Brand, Engine, VehicleModel, YearRange


class VehiclePath(BaseModel):
    """URL path segments addressing one engine."""

    brand: str
    model: str
    year: str
    engine: str


class ResolvedEngine(BaseModel):
    """The chain of catalog nodes a ``VehiclePath`` resolved to."""

    brand: Brand
    model: VehicleModel
    year: YearRange
    engine: Engine


class NavItem(BaseModel):
    name: str
    slug: str
    path: str


class StageSummary(BaseModel):
    """One stage as listed on an engine page, priced in the reseller's currency."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    anchor: str
    price: Optional[float] = None
    display_price: Optional[float] = Field(default=None, alias="displayPrice")
    description_text: str = Field(default="", alias="descriptionText")


class EngineDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    brand: str
    model: str
    year: str
    engine: Engine
    path: str
    currency: str = BASE_CURRENCY
    stage_summaries: list[StageSummary] = Field(
        default_factory=list, alias="stageSummaries"
    )
    logo: Optional[dict[str, Any]] = None
    aktplus_visible: bool = Field(default=True, alias="aktplusVisible")
    reseller_id: Optional[str] = Field(default=None, alias="resellerId")


class BulkOverrideRequest(BaseModel):
    """Prices per standard stage, entered in the reseller's currency."""

    model_config = ConfigDict(populate_by_name=True)

    brand: str
    model: str
    year: Optional[str] = None
    stage1_price: Any = Field(default=None, alias="stage1Price")
    stage2_price: Any = Field(default=None, alias="stage2Price")
    stage3_price: Any = Field(default=None, alias="stage3Price")
    stage4_price: Any = Field(default=None, alias="stage4Price")
    dsg_price: Any = Field(default=None, alias="dsgPrice")
    preview: bool = False

    def prices_by_stage(self) -> dict[str, Any]:
        return {
            "Steg 1": self.stage1_price,
            "Steg 2": self.stage2_price,
            "Steg 3": self.stage3_price,
            "Steg 4": self.stage4_price,
            "DSG": self.dsg_price,
        }


class BulkOverrideRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    brand: str
    model: str
    year: str
    engine: str
    stage_name: str = Field(alias="stageName")
    new_price: int = Field(alias="newPrice")
    current_price: Optional[float] = Field(default=None, alias="currentPrice")


class BulkOverrideResult(BaseModel):
    preview: bool
    brand: str
    model: str
    years: list[str]
    count: int
    items: list[BulkOverrideRow] = Field(default_factory=list)


class AddOnView(BaseModel):
    """An add-on as shown to a reseller's visitors, after reseller overrides."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Any
    description: Any
    price: float
    is_override: bool = Field(alias="isOverride")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    installation_time: Any = Field(default=None, alias="installationTime")


class StageDescriptionView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    stage_name: str = Field(alias="stageName")
    description: Any
    is_override: bool = Field(alias="isOverride")
