"""
Tests for shaping raw provider payloads into per-country records.
"""

import pytest

from covid_refresh.data_shaper import (
    coerce_number,
    is_aggregate_record,
    pick_best_aggregate,
    shape_country_data,
)


class TestCoerceNumber:
    """Test cases for numeric coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [(5, 5.0), ("42", 42.0), (" 3.5 ", 3.5), (0, 0.0)],
    )
    def test_numbers_and_numeric_strings(self, value, expected):
        """Test that numbers and numeric strings become floats."""
        assert coerce_number(value) == expected

    @pytest.mark.parametrize("value", [None, "abc", "", float("nan"), float("inf"), True, {}, []])
    def test_unusable_values_are_none(self, value):
        """Test that absent, non-numeric and non-finite values become None."""
        assert coerce_number(value) is None


class TestPickBestAggregate:
    """Test cases for choosing the country-wide sub-record."""

    def test_prefers_all_region(self, totals_payload):
        """Test that the 'All' sub-record wins over larger regional totals."""
        totals_payload[1]["cases"]["total"] = 1
        assert pick_best_aggregate(totals_payload)["region"] == "All"

    def test_all_detected_in_province_or_state(self):
        """Test the aggregate label is read from province/state too, any case."""
        assert is_aggregate_record({"province": "ALL"})
        assert is_aggregate_record({"state": "all"})
        assert not is_aggregate_record({"region": "Alberta"})
        assert not is_aggregate_record("All")

    def test_largest_cases_total_without_aggregate(self):
        """Test fallback to the largest cases.total."""
        items = [
            {"region": "A", "cases": {"total": 10}},
            {"region": "B", "cases": {"total": "30"}},
            {"region": "C", "cases": {"total": 20}},
        ]
        assert pick_best_aggregate(items)["region"] == "B"

    def test_ties_go_to_first_seen(self):
        """Test that equal totals keep the first sub-record."""
        items = [
            {"region": "A", "cases": {"total": 30}},
            {"region": "B", "cases": {"total": 30}},
        ]
        assert pick_best_aggregate(items)["region"] == "A"

    def test_empty(self):
        """Test that no sub-records yields None."""
        assert pick_best_aggregate([]) is None
        assert pick_best_aggregate(None) is None


class TestShapeCountryData:
    """Test cases for the shaped record."""

    def test_shapes_aggregate_totals(self, totals_payload):
        """Test totals are taken from the aggregate sub-record."""
        shaped = shape_country_data("Canada", totals_payload)

        assert shaped == {
            "country": "Canada",
            "casesTotal": 1200.0,
            "deathsTotal": 30.0,
            "hasData": True,
        }

    def test_single_object_payload(self):
        """Test that a dict payload is used directly."""
        shaped = shape_country_data("Chile", {"cases": {"total": "77"}, "deaths": {}})

        assert shaped["casesTotal"] == 77.0
        assert shaped["deathsTotal"] is None
        assert shaped["hasData"] is True

    @pytest.mark.parametrize("payload", [[], None, {}])
    def test_empty_payload_has_no_data(self, payload):
        """Test that an empty response is a no-data record, not an error."""
        shaped = shape_country_data("Wakanda", payload)

        assert shaped == {
            "country": "Wakanda",
            "casesTotal": None,
            "deathsTotal": None,
            "hasData": False,
        }

    def test_record_without_totals_has_no_data(self):
        """Test hasData is false when neither total is usable."""
        shaped = shape_country_data("Nowhere", [{"region": "", "cases": {"total": "n/a"}}])

        assert shaped["casesTotal"] is None
        assert shaped["hasData"] is False
