"""
Tests for the SQLAlchemy country store and the store-backed readers.
"""

from datetime import datetime, timezone

import pytest

from covid_refresh.color_scale import value_to_color_hex
from covid_refresh.config.constants import DEFAULT_GREY_HEX
from covid_refresh.readers import get_batch_from_db, get_country_from_db, record_to_dto


class TestCountryStore:
    """Test cases for the persistence contract."""

    def test_upsert_creates_then_overwrites(self, store, regional_payload):
        """Test create-on-first-write and field overwrite afterwards."""
        created = store.upsert(
            "Canada", {"casesTotal": 100.0, "deathsTotal": 1.0, "hasData": True, "raw": regional_payload}
        )
        assert created["country"] == "Canada"
        assert created["lastError"] is None

        store.upsert("Canada", {"casesTotal": 150.0, "lastError": "boom"})
        record = store.find_by_key("Canada")

        assert record["casesTotal"] == 150.0
        assert record["deathsTotal"] == 1.0
        assert record["hasData"] is True
        assert record["lastError"] == "boom"
        assert record["raw"] == regional_payload
        assert isinstance(record["updatedAt"], datetime)
        assert isinstance(record["createdAt"], datetime)

    def test_one_record_per_country(self, store):
        """Test that repeated upserts never duplicate the key."""
        for total in (1.0, 2.0, 3.0):
            store.upsert("Peru", {"casesTotal": total})

        assert store.distinct_keys() == ["Peru"]
        assert store.status()["count"] == 1

    def test_find_by_key_missing(self, store):
        """Test that an unknown key returns None."""
        assert store.find_by_key("Atlantis") is None

    def test_find_many(self, store):
        """Test that only existing keys are returned."""
        store.upsert("Chile", {"casesTotal": 5.0})
        store.upsert("Peru", {"casesTotal": 6.0})
        store.upsert("Bolivia", {"casesTotal": 7.0})

        found = {record["country"] for record in store.find_many(["Chile", "Peru", "Atlantis"])}
        assert found == {"Chile", "Peru"}
        assert store.find_many([]) == []

    def test_raw_none_is_stored_as_null(self, store):
        """Test that a missing payload reads back as None."""
        store.upsert("Chile", {"raw": None})
        assert store.find_by_key("Chile")["raw"] is None

    def test_unknown_field_rejected(self, store):
        """Test that typos in field names are not silently dropped."""
        with pytest.raises(ValueError):
            store.upsert("Chile", {"cases_total": 5})

    def test_status(self, store):
        """Test count and latest refresh timestamp."""
        assert store.status() == {"count": 0, "lastUpdatedAt": None}

        store.upsert("Chile", {"casesTotal": 5.0})
        status = store.status()
        assert status["count"] == 1
        assert status["lastUpdatedAt"] is not None

    def test_timestamps_read_back_as_utc(self, store):
        """Test that stored timestamps come back timezone-aware in UTC."""
        written = store.upsert("Chile", {"casesTotal": 5.0})
        record = store.find_by_key("Chile")

        assert record["updatedAt"].tzinfo is not None
        assert record["updatedAt"].utcoffset().total_seconds() == 0
        assert record["createdAt"].tzinfo is not None
        assert record["updatedAt"] == written["updatedAt"]
        assert store.find_many(["Chile"])[0]["updatedAt"].tzinfo is not None
        assert store.status()["lastUpdatedAt"] == written["updatedAt"]

    def test_naive_timestamp_is_treated_as_utc(self, store):
        """Test that a naive updatedAt is stored and returned as UTC."""
        store.upsert("Chile", {"updatedAt": datetime(2024, 1, 2, 3, 4, 5)})

        assert store.find_by_key("Chile")["updatedAt"] == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


class TestReaders:
    """Test cases for single and batch reads."""

    def test_record_to_dto(self):
        """Test the response shape for stored and missing records."""
        dto = record_to_dto({"country": "Chile", "casesTotal": 5.0, "deathsTotal": None, "hasData": 1})
        assert dto == {
            "country": "Chile",
            "casesTotal": 5.0,
            "deathsTotal": None,
            "colorHex": DEFAULT_GREY_HEX,
            "hasData": True,
        }
        assert record_to_dto(None, "Atlantis")["country"] == "Atlantis"

    def test_get_country_never_fetched(self, store):
        """Test that an unknown country is a zero-value record."""
        assert get_country_from_db(store, "Atlantis") == {
            "country": "Atlantis",
            "casesTotal": None,
            "deathsTotal": None,
            "colorHex": DEFAULT_GREY_HEX,
            "hasData": False,
        }

    def test_get_country_stored(self, store):
        """Test that a stored record is returned."""
        store.upsert("Chile", {"casesTotal": 5.0, "deathsTotal": 1.0, "hasData": True})
        dto = get_country_from_db(store, "Chile")

        assert dto["casesTotal"] == 5.0
        assert dto["hasData"] is True

    def test_batch_unknown_country(self, store):
        """Test the batch response for a country that was never fetched."""
        assert get_batch_from_db(store, ["Wakanda"]) == {
            "maxValue": 0,
            "results": [
                {
                    "country": "Wakanda",
                    "casesTotal": None,
                    "deathsTotal": None,
                    "hasData": False,
                    "colorHex": "#B0B0B0",
                }
            ],
        }

    def test_batch_colors_relative_to_max(self, store):
        """Test the max value and that every color matches the mapper."""
        store.upsert("Chile", {"casesTotal": 1000.0, "hasData": True})
        store.upsert("Peru", {"casesTotal": 500.0, "hasData": True})
        store.upsert("Bolivia", {"casesTotal": None, "deathsTotal": 3.0, "hasData": True})

        batch = get_batch_from_db(store, ["Chile", "Peru", "Bolivia", "Atlantis", "Chile"])

        assert batch["maxValue"] == 1000.0
        assert [r["country"] for r in batch["results"]] == ["Chile", "Peru", "Bolivia", "Atlantis"]
        for result in batch["results"]:
            assert result["colorHex"] == value_to_color_hex(result["casesTotal"], batch["maxValue"])

        colors = {r["country"]: r["colorHex"] for r in batch["results"]}
        assert colors["Chile"] == "#8B0000"
        assert colors["Peru"] == "#FFFF00"
        assert colors["Bolivia"] == DEFAULT_GREY_HEX
        assert colors["Atlantis"] == DEFAULT_GREY_HEX

    def test_batch_all_zero_is_grey(self, store):
        """Test that a zero maximum colors everything grey."""
        store.upsert("Chile", {"casesTotal": 0.0, "hasData": True})
        batch = get_batch_from_db(store, ["Chile"])

        assert batch["maxValue"] == 0
        assert batch["results"][0]["colorHex"] == DEFAULT_GREY_HEX
