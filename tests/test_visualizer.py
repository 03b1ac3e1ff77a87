"""
Tests for the plotly figure builders.
"""

from covid_refresh.config.constants import DEFAULT_GREY_HEX
from covid_refresh.visualizer import (
    batch_to_frame,
    create_choropleth_figure,
    create_time_series_figure,
    series_to_frame,
)

BATCH = {
    "maxValue": 1000.0,
    "results": [
        {"country": "Chile", "casesTotal": 1000.0, "deathsTotal": 10.0, "hasData": True, "colorHex": "#8B0000"},
        {"country": "Peru", "casesTotal": None, "deathsTotal": None, "hasData": False, "colorHex": DEFAULT_GREY_HEX},
    ],
}

SERIES = {
    "country": "Chile",
    "series": {
        "cases": [
            {"date": "2023-01-01", "total": 10, "new": 10},
            {"date": "2023-01-02", "total": 15, "new": 5},
        ],
        "deaths": [{"date": "2023-01-02", "total": 1, "new": 1}],
    },
    "stats": None,
}


class TestChoropleth:
    """Test cases for the world map."""

    def test_batch_to_frame(self):
        """Test one row per country with its color."""
        df = batch_to_frame(BATCH)

        assert list(df["country"]) == ["Chile", "Peru"]
        assert list(df["colorHex"]) == ["#8B0000", DEFAULT_GREY_HEX]

    def test_one_trace_per_country(self):
        """Test that every country gets its own colored trace."""
        fig = create_choropleth_figure(BATCH)

        assert len(fig.data) == 2
        assert fig.layout.title.text == "COVID-19 Cases by Country"

    def test_empty_batch(self):
        """Test that an empty batch yields an empty map."""
        fig = create_choropleth_figure({"maxValue": 0, "results": []})
        assert len(fig.data) == 0


class TestTimeSeriesFigure:
    """Test cases for the time series chart."""

    def test_series_to_frame_joins_by_date(self):
        """Test the outer join of cases and deaths."""
        df = series_to_frame(SERIES)

        assert list(df["date"]) == ["2023-01-01", "2023-01-02"]
        assert list(df["total_cases"]) == [10, 15]
        assert df["total_deaths"].isna().iloc[0]
        assert df["new_deaths"].iloc[1] == 1

    def test_bars_and_lines_for_each_metric(self):
        """Test two traces per metric."""
        fig = create_time_series_figure(SERIES)

        assert len(fig.data) == 4
        assert [trace.name for trace in fig.data] == ["New cases", "Total cases", "New deaths", "Total deaths"]
        assert "Chile" in fig.layout.title.text

    def test_empty_series(self):
        """Test that missing history shows a note instead of traces."""
        fig = create_time_series_figure(
            {"country": "Chile", "series": {"cases": [], "deaths": []}, "stats": None}
        )

        assert len(fig.data) == 0
        assert fig.layout.annotations[-1].text == "No historical data available yet"
