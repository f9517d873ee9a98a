"""Tests for currency conversion and bulk override planning."""

import pytest

from conftest import RESELLER, bmw_override

from tuning_catalog.core.exceptions import NotFoundError
from tuning_catalog.models.views import BulkOverrideRequest
from tuning_catalog.services.bulk import override_document_id, plan_bulk_overrides
from tuning_catalog.services.pricing import convert_price, rate_for, to_base_currency
from tuning_catalog.utils.converters import optional_number, parse_price

# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------


class TestConverters:
    def test_parse_price_with_spaces_and_unit(self):
        assert parse_price("4 500 kr") == 4500.0

    def test_parse_price_empty(self):
        assert parse_price("") is None
        assert parse_price(None) is None
        assert parse_price("kr") is None

    def test_parse_price_number(self):
        assert parse_price(450) == 450.0

    def test_optional_number_keeps_integers(self):
        assert optional_number("450") == 450
        assert isinstance(optional_number("450"), int)
        assert optional_number(12.5) == 12.5

    def test_optional_number_invalid(self):
        assert optional_number("n/a") is None
        assert optional_number(True) is None
        assert optional_number(float("nan")) is None


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


class TestPricing:
    def test_rate_for_known(self):
        assert rate_for("EUR") == 0.1
        assert rate_for("usd") == 0.095

    def test_rate_for_unknown_is_one(self):
        assert rate_for("NOK") == 1.0
        assert rate_for(None) == 1.0

    def test_convert_for_display(self):
        assert convert_price(45000, "EUR") == 4500.0
        assert convert_price(None, "EUR") is None

    def test_to_base_currency(self):
        assert to_base_currency("450", "EUR") == 4500
        assert to_base_currency("4 500", "SEK") == 4500
        assert to_base_currency("", "EUR") is None

    def test_custom_rates(self):
        assert to_base_currency(100, "EUR", {"EUR": 0.08}) == 1250


# ---------------------------------------------------------------------------
# Bulk planning
# ---------------------------------------------------------------------------


def _request(**fields):
    return BulkOverrideRequest.model_validate({"brand": "BMW", "model": "M3", **fields})


class TestPlanBulkOverrides:
    def test_all_years_and_engines(self, forest):
        rows, docs = plan_bulk_overrides(
            forest, _request(stage1Price="40000"), RESELLER, [], "SEK"
        )
        assert [(r.year, r.engine) for r in rows] == [
            ("2012→2016", "S65 V8"),
            ("2012→2016", "S65 V8 Competition"),
            ("2017-2020", "S55 3.0"),
        ]
        assert {d.price for d in docs} == {40000}
        assert all(d.stage_name == "Steg 1" for d in docs)
        assert all(d.reseller_id == RESELLER for d in docs)

    def test_single_year(self, forest):
        rows, _ = plan_bulk_overrides(
            forest, _request(year="2017-2020", stage1Price=30000), RESELLER, [], "SEK"
        )
        assert [r.engine for r in rows] == ["S55 3.0"]

    def test_empty_prices_skipped(self, forest):
        rows, docs = plan_bulk_overrides(
            forest, _request(stage1Price="", stage2Price="50000"), RESELLER, [], "SEK"
        )
        assert {r.stage_name for r in rows} == {"Steg 2"}
        assert len(docs) == 3

    def test_currency_converted_to_sek(self, forest):
        rows, docs = plan_bulk_overrides(
            forest, _request(year="2017-2020", stage1Price="450"), RESELLER, [], "EUR"
        )
        assert rows[0].new_price == 4500
        assert docs[0].price == 4500

    def test_current_price_from_base_stage(self, forest):
        rows, _ = plan_bulk_overrides(
            forest, _request(stage1Price=1, stage3Price=1), RESELLER, [], "SEK"
        )
        by_key = {(r.engine, r.stage_name): r.current_price for r in rows}
        assert by_key[("S65 V8", "Steg 1")] == 39000
        assert by_key[("S65 V8", "Steg 3")] is None

    def test_tuned_figures_carried_over(self, forest):
        existing = [bmw_override(_id="override-existing", price=45000, tunedHk=470)]
        _, docs = plan_bulk_overrides(
            forest, _request(stage1Price=48000), RESELLER, existing, "SEK"
        )
        doc = docs[0]
        assert doc.id == "override-existing"
        assert doc.tuned_hk == 470
        # Not on the existing override, so taken from the base stage
        assert doc.tuned_nm == 440

    def test_deterministic_ids(self, forest):
        _, docs = plan_bulk_overrides(
            forest, _request(stage1Price=1), RESELLER, [], "SEK"
        )
        assert docs[0].id == "override-r1-bmw-m3-2012-2016-s65-v8-steg-1"
        assert docs[0].id == override_document_id(docs[0].key)

    def test_brand_and_model_match_loosely(self, forest):
        rows, _ = plan_bulk_overrides(
            forest,
            BulkOverrideRequest(brand=" bmw ", model="m 3", stage1_price=1),
            RESELLER,
            [],
            "SEK",
        )
        assert rows[0].brand == "BMW"
        assert rows[0].model == "M3"

    @pytest.mark.parametrize(
        "fields,level",
        [
            ({"brand": "Audi"}, "brand"),
            ({"model": "M5"}, "model"),
            ({"year": "1999"}, "year"),
        ],
    )
    def test_unknown_target(self, forest, fields, level):
        with pytest.raises(NotFoundError) as exc:
            plan_bulk_overrides(
                forest, _request(stage1Price=1, **fields), RESELLER, [], "SEK"
            )
        assert exc.value.level == level

    def test_dsg_price(self, forest):
        rows, _ = plan_bulk_overrides(
            forest,
            BulkOverrideRequest(brand="BMW", model="320d", dsg_price="3 500"),
            RESELLER,
            [],
            "SEK",
        )
        assert [(r.stage_name, r.new_price, r.current_price) for r in rows] == [
            ("DSG", 3500, 3990)
        ]
