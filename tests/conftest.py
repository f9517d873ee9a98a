"""Shared catalog fixtures: a small BMW/VW forest, add-ons and reseller data."""

import pytest

from tuning_catalog.models.catalog import AddOnOption, Brand, StageDescriptionDoc
from tuning_catalog.models.reseller import AddOnOverride, ResellerConfig, ResellerOverride
from tuning_catalog.services.catalog_store import InMemoryCatalogStore

BRAND_DOCS = [
    {
        "_id": "brand-bmw",
        "name": "BMW",
        "slug": {"current": "bmw"},
        "logo": {"asset": {"url": "https://cdn.example/bmw.png"}},
        "models": [
            {
                "name": "M3",
                "slug": {"current": "m3"},
                "years": [
                    {
                        "range": "2012→2016",
                        "engines": [
                            {
                                "label": "S65 V8",
                                "fuel": "bensin",
                                "stages": [
                                    {
                                        "name": "Steg 1",
                                        "origHk": 420,
                                        "tunedHk": 450,
                                        "origNm": 400,
                                        "tunedNm": 440,
                                        "price": 39000,
                                        "description": [
                                            {
                                                "_type": "block",
                                                "children": [{"text": "Inline text"}],
                                            }
                                        ],
                                    },
                                    {
                                        "name": "Steg 2",
                                        "origHk": 420,
                                        "tunedHk": 480,
                                        "price": 52000,
                                    },
                                ],
                            },
                            {
                                "label": "S65 V8 Competition",
                                "fuel": "bensin",
                                "stages": [{"name": "Steg 1", "price": 41000}],
                            },
                        ],
                    },
                    {
                        "range": "2017-2020",
                        "engines": [
                            {
                                "label": "S55 3.0",
                                "fuel": "bensin",
                                "stages": [{"name": "Steg 1", "price": 35000}],
                            }
                        ],
                    },
                ],
            },
            {
                "name": "320d",
                "years": [
                    {
                        "range": "2015-2019",
                        "engines": [
                            {
                                "label": "B47 190hk",
                                "fuel": "diesel",
                                "stages": [
                                    {"name": "Steg 1", "tunedHk": 230, "price": 6990},
                                    {"name": "DSG", "price": 3990},
                                ],
                            }
                        ],
                    }
                ],
            },
        ],
    },
    {
        "_id": "brand-vw",
        "name": "Volkswagen",
        "slug": {"current": "vw"},
        "models": [
            {
                "name": "Golf GTI",
                "years": [
                    {
                        "range": "2013–2020",
                        "engines": [
                            {
                                "label": "2.0 TSI",
                                "fuel": "Petrol",
                                "stages": [{"name": "Steg 1", "price": 7990}],
                            }
                        ],
                    }
                ],
            }
        ],
    },
]

ADDON_DOCS = [
    {
        "_id": "addon-pops",
        "title": {"sv": "Pops & Bangs", "en": "Pops and bangs"},
        "price": 2500,
        "applicableFuelTypes": ["bensin"],
    },
    {
        "_id": "addon-egr",
        "title": "EGR off",
        "price": "1500",
        "applicableFuelTypes": ["diesel"],
        "stageCompatibility": "Steg 1",
    },
    {
        "_id": "addon-launch",
        "title": "Launch control",
        "price": 1990,
        "isUniversal": True,
        "stageCompatibility": "Steg 2",
    },
    {
        "_id": "addon-speed",
        "title": "Speed limiter off",
        "price": 990,
        "isUniversal": True,
        "gallery": [{"_key": "g1", "asset": {"url": "https://cdn.example/speed.jpg"}}],
    },
]

RESELLER = "r1"


def bmw_override(**fields):
    """Override document for BMW M3 2012→2016 S65 V8 Steg 1, reseller r1."""
    doc = {
        "resellerId": RESELLER,
        "brand": "BMW",
        "model": "M3",
        "year": "2012→2016",
        "engine": "S65 V8",
        "stageName": "Steg 1",
    }
    doc.update(fields)
    return ResellerOverride.model_validate(doc)


@pytest.fixture
def forest():
    return [Brand.model_validate(doc) for doc in BRAND_DOCS]


@pytest.fixture
def addon_options():
    return [AddOnOption.model_validate(doc) for doc in ADDON_DOCS]


@pytest.fixture
def overrides():
    return [bmw_override(price=45000)]


@pytest.fixture
def store(forest, addon_options, overrides):
    return InMemoryCatalogStore(
        brands=forest,
        addon_options=addon_options,
        overrides=overrides,
        configs=[
            ResellerConfig.model_validate(
                {"resellerId": "r-eur", "currency": "EUR", "language": "en"}
            )
        ],
        stage_descriptions=[
            StageDescriptionDoc.model_validate(
                {"stageName": "Steg 1", "description": "Default stage 1"}
            ),
            StageDescriptionDoc.model_validate(
                {"stageName": "Steg 2", "description": "Default stage 2"}
            ),
            StageDescriptionDoc.model_validate(
                {
                    "stageName": "Steg 2",
                    "description": "Our own stage 2",
                    "resellerId": RESELLER,
                }
            ),
        ],
        addon_overrides=[
            AddOnOverride.model_validate(
                {
                    "resellerId": RESELLER,
                    "aktPlusId": {"_ref": "addon-pops"},
                    "price": 2000,
                    "title": {"sv": "Smällar", "en": ""},
                }
            )
        ],
    )
