"""Catalog documents: brand → model → year range → engine → stage, plus add-ons.

Field aliases follow the content store's camelCase document keys so raw
documents validate directly; Python code uses the snake_case names.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from ..utils.converters import optional_number
from ..utils.portable_text import extract_plain_text

Number = Annotated[Optional[Union[int, float]], BeforeValidator(optional_number)]


def _flatten_slug(value: Any) -> Optional[str]:
    """Sanity slugs arrive as ``{"current": "bmw"}``; accept plain strings too."""
    if isinstance(value, dict):
        value = value.get("current")
    if isinstance(value, str) and value.strip():
        return value
    return None


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


Slug = Annotated[Optional[str], BeforeValidator(_flatten_slug)]


class CatalogDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """GROQ projections return null for missing arrays and fields."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class GalleryImage(CatalogDocument):
    key: Optional[str] = Field(default=None, alias="_key")
    alt: Optional[str] = None
    caption: Optional[str] = None
    asset: Optional[dict[str, Any]] = None

    @property
    def url(self) -> Optional[str]:
        return self.asset.get("url") if self.asset else None


class AddOnOption(CatalogDocument):
    """Optional upgrade sold alongside a tuning stage.

    ``is_universal`` (any fuel) and ``stage_compatibility`` (one stage only)
    are independent conditions; see ``services.addons``.
    """

    id: str = Field(default="", alias="_id")
    title: Any = ""
    price: Number = None
    is_universal: bool = Field(default=False, alias="isUniversal")
    applicable_fuel_types: list[str] = Field(
        default_factory=list, alias="applicableFuelTypes"
    )
    stage_compatibility: Annotated[Optional[str], BeforeValidator(_blank_to_none)] = (
        Field(default=None, alias="stageCompatibility")
    )
    description: Any = None
    gallery: list[GalleryImage] = Field(default_factory=list)
    installation_time: Any = Field(default=None, alias="installationTime")
    compatibility_notes: Any = Field(default=None, alias="compatibilityNotes")


class InlineDescription(BaseModel):
    """Rich text stored directly on the stage."""

    kind: Literal["inline"] = "inline"
    blocks: Any = None


class ReferencedDescription(BaseModel):
    """Shared description document keyed by stage name."""

    kind: Literal["reference"] = "reference"
    ref_id: Optional[str] = None
    stage_name: Optional[str] = None
    blocks: Any = None


StageDescription = Annotated[
    Union[InlineDescription, ReferencedDescription], Field(discriminator="kind")
]


class Stage(CatalogDocument):
    name: str = ""
    type: Optional[str] = None
    orig_hk: Number = Field(default=None, alias="origHk")
    tuned_hk: Number = Field(default=None, alias="tunedHk")
    orig_nm: Number = Field(default=None, alias="origNm")
    tuned_nm: Number = Field(default=None, alias="tunedNm")
    price: Number = None
    description: Optional[StageDescription] = None
    addons: list[AddOnOption] = Field(default_factory=list, alias="aktPlusOptions")

    @model_validator(mode="before")
    @classmethod
    def build_description(cls, data: Any) -> Any:
        """Fold ``description``/``descriptionRef`` into one tagged description.

        A referenced description wins whenever the reference resolved;
        the inline text is only used when it did not.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        ref = data.pop("descriptionRef", None)
        inline = data.get("description")
        if isinstance(inline, dict) and inline.get("kind") in ("inline", "reference"):
            return data
        if isinstance(ref, dict) and ref:
            data["description"] = {
                "kind": "reference",
                "ref_id": ref.get("_id"),
                "stage_name": ref.get("stageName"),
                "blocks": ref.get("description"),
            }
        elif inline:
            data["description"] = {"kind": "inline", "blocks": inline}
        else:
            data["description"] = None
        return data

    @property
    def description_text(self) -> str:
        if self.description is None:
            return ""
        blocks = self.description.blocks
        if isinstance(blocks, dict):
            # Localized description; plain-text view uses the first language
            blocks = next(iter(blocks.values()), None)
        if isinstance(blocks, str):
            return blocks.strip()
        return extract_plain_text(blocks)


class Engine(CatalogDocument):
    id: Optional[str] = Field(default=None, alias="_id")
    label: str = ""
    fuel: str = ""
    stages: list[Stage] = Field(default_factory=list)
    global_addons: list[AddOnOption] = Field(
        default_factory=list, alias="globalAktPlusOptions"
    )


class YearRange(CatalogDocument):
    label: str = Field(default="", alias="range")
    engines: list[Engine] = Field(default_factory=list)


class VehicleModel(CatalogDocument):
    name: str = ""
    slug: Slug = None
    years: list[YearRange] = Field(default_factory=list)


class Brand(CatalogDocument):
    id: Optional[str] = Field(default=None, alias="_id")
    name: str = ""
    slug: Slug = None
    logo: Optional[dict[str, Any]] = None
    models: list[VehicleModel] = Field(default_factory=list)


class StageDescriptionDoc(CatalogDocument):
    """Shared ``stageDescription`` document, or a reseller's replacement for one."""

    stage_name: str = Field(default="", alias="stageName")
    description: Any = None
    reseller_id: Optional[str] = Field(default=None, alias="resellerId")
