"""Tests for resolving URL segments to catalog nodes."""

import logging

import pytest

from tuning_catalog.core.exceptions import NotFoundError
from tuning_catalog.models.catalog import Brand
from tuning_catalog.models.views import VehiclePath
from tuning_catalog.services.resolver import (
    brand_slug,
    find_brand,
    find_duplicate_paths,
    find_engine,
    model_slug,
    resolve,
)


def _path(brand, model, year, engine):
    return VehiclePath(brand=brand, model=model, year=year, engine=engine)


# ---------------------------------------------------------------------------
# Successful resolution
# ---------------------------------------------------------------------------


class TestResolve:
    def test_bmw_m3_end_to_end(self, forest):
        resolved = resolve(forest, _path("bmw", "m3", "2012-2016", "s65-v8"))
        assert resolved.brand.name == "BMW"
        assert resolved.model.name == "M3"
        assert resolved.year.label == "2012→2016"
        assert resolved.engine.label == "S65 V8"
        assert resolved.engine.stages[0].name == "Steg 1"
        assert resolved.engine.stages[0].orig_hk == 420
        assert resolved.engine.stages[0].tuned_hk == 450

    def test_segments_are_normalized(self, forest):
        resolved = resolve(forest, _path("BMW", "M3", "2012→2016", "S65 V8"))
        assert resolved.engine.label == "S65 V8"

    def test_en_dash_year_matches_hyphen_segment(self, forest):
        resolved = resolve(forest, _path("vw", "golf-gti", "2013-2020", "20-tsi"))
        assert resolved.engine.label == "2.0 TSI"

    def test_brand_name_matches_when_slug_differs(self, forest):
        brand = find_brand(forest, "volkswagen")
        assert brand.name == "Volkswagen"

    def test_stored_slug_matches(self, forest):
        assert find_brand(forest, "vw").name == "Volkswagen"

    def test_model_without_slug_uses_name(self, forest):
        resolved = resolve(forest, _path("bmw", "320d", "2015-2019", "b47-190hk"))
        assert resolved.engine.fuel == "diesel"

    def test_non_ascii_name_without_stored_slug(self):
        citroen = Brand.model_validate(
            {
                "name": "Citroën",
                "models": [
                    {
                        "name": "C4",
                        "years": [
                            {
                                "range": "2010-2015",
                                "engines": [{"label": "1.6 HDi", "fuel": "diesel"}],
                            }
                        ],
                    }
                ],
            }
        )
        resolved = resolve([citroen], _path("citron", "c4", "2010-2015", "16-hdi"))
        assert resolved.brand.name == "Citroën"
        assert brand_slug(citroen) == "citron"

    def test_resolution_is_deterministic(self, forest):
        path = _path("bmw", "m3", "2012-2016", "s65-v8")
        assert resolve(forest, path) == resolve(forest, path)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestNotFound:
    @pytest.mark.parametrize(
        "path,level",
        [
            (("audi", "m3", "2012-2016", "s65-v8"), "brand"),
            (("bmw", "m5", "2012-2016", "s65-v8"), "model"),
            (("bmw", "m3", "1999-2001", "s65-v8"), "year"),
            (("bmw", "m3", "2012-2016", "s54"), "engine"),
        ],
    )
    def test_reports_failing_level(self, forest, path, level):
        with pytest.raises(NotFoundError) as exc:
            resolve(forest, _path(*path))
        assert exc.value.level == level
        assert exc.value.segment == path[["brand", "model", "year", "engine"].index(level)]

    def test_no_partial_matching(self, forest):
        # "s65" is a prefix of "s65-v8" but not equal to it
        with pytest.raises(NotFoundError):
            resolve(forest, _path("bmw", "m3", "2012-2016", "s65"))

    def test_empty_segment_is_not_found(self, forest):
        with pytest.raises(NotFoundError) as exc:
            resolve(forest, _path("bmw", "", "2012-2016", "s65-v8"))
        assert exc.value.level == "model"

    def test_not_found_is_logged(self, forest, caplog):
        with caplog.at_level(logging.DEBUG, logger="tuning_catalog"):
            with pytest.raises(NotFoundError):
                resolve(forest, _path("bmw", "m3", "2012-2016", "s54"))
        assert "NOT_FOUND level=engine segment='s54'" in caplog.text

    def test_empty_forest(self):
        with pytest.raises(NotFoundError) as exc:
            resolve([], _path("bmw", "m3", "2012-2016", "s65-v8"))
        assert exc.value.level == "brand"

    def test_error_payload(self, forest):
        with pytest.raises(NotFoundError) as exc:
            resolve(forest, _path("bmw", "m3", "2012-2016", "nope"))
        assert exc.value.to_dict() == {
            "error": "Engine not found",
            "level": "engine",
            "segment": "nope",
        }


# ---------------------------------------------------------------------------
# Duplicates
# ---------------------------------------------------------------------------


def _duplicate_engines():
    return Brand.model_validate(
        {
            "name": "Audi",
            "models": [
                {
                    "name": "A4",
                    "years": [
                        {
                            "range": "2016-2020",
                            "engines": [
                                {"label": "2.0 TDI", "fuel": "diesel"},
                                {"label": "20 TDI", "fuel": "petrol"},
                            ],
                        }
                    ],
                }
            ],
        }
    )


class TestDuplicates:
    def test_first_in_storage_order_wins(self):
        brand = _duplicate_engines()
        year = brand.models[0].years[0]
        assert find_engine(year, "20-tdi").fuel == "diesel"

    def test_duplicate_match_is_logged(self, caplog):
        year = _duplicate_engines().models[0].years[0]
        with caplog.at_level(logging.WARNING):
            find_engine(year, "20-tdi")
        assert "2 engine entries match" in caplog.text

    def test_find_duplicate_paths(self, forest):
        duplicates = find_duplicate_paths([*forest, _duplicate_engines()])
        assert duplicates == [("/audi/a4/2016-2020/20-tdi", 2)]

    def test_no_duplicates_in_clean_forest(self, forest):
        assert find_duplicate_paths(forest) == []


class TestSlugs:
    def test_brand_slug_prefers_stored(self, forest):
        assert brand_slug(forest[1]) == "vw"

    def test_model_slug_falls_back_to_name(self, forest):
        assert model_slug(forest[1].models[0]) == "golf-gti"
