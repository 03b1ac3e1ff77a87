"""
COVID-19 Data Visualization Module

Builds interactive plotly figures from the service responses: a world map
colored by the batch color scale and daily/cumulative charts for one
country's time series.
"""

from typing import Dict

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .config.constants import COLORS, DEFAULT_FIGURE_HEIGHT, DEFAULT_GREY_HEX
from .config.logging_config import get_logger

logger = get_logger(__name__)


def batch_to_frame(batch: Dict) -> pd.DataFrame:
    """
    Flatten a batch response into one row per country.

    Args:
        batch: ``{"maxValue", "results"}`` as returned by the service

    Returns:
        DataFrame with country, casesTotal, deathsTotal, hasData and colorHex
    """
    columns = ["country", "casesTotal", "deathsTotal", "hasData", "colorHex"]
    df = pd.DataFrame(batch.get("results") or [], columns=columns)
    df["colorHex"] = df["colorHex"].fillna(DEFAULT_GREY_HEX)
    return df


def create_choropleth_figure(batch: Dict, title: str = "COVID-19 Cases by Country") -> go.Figure:
    """
    Create a world map coloring each country with its precomputed ``colorHex``.

    Args:
        batch: Batch response from the service
        title: Figure title

    Returns:
        Plotly figure, one trace per country
    """
    df = batch_to_frame(batch)
    if df.empty:
        logger.warning("No countries to plot on the map")
        fig = go.Figure()
        fig.update_layout(title=title, height=DEFAULT_FIGURE_HEIGHT)
        return fig

    color_map = dict(zip(df["country"], df["colorHex"]))
    fig = px.choropleth(
        df,
        locations="country",
        locationmode="country names",
        color="country",
        color_discrete_map=color_map,
        hover_name="country",
        hover_data={"casesTotal": ":,.0f", "deathsTotal": ":,.0f", "country": False},
        labels={"casesTotal": "Total Cases", "deathsTotal": "Total Deaths"},
        title=title,
    )
    fig.update_layout(height=DEFAULT_FIGURE_HEIGHT, showlegend=False)

    logger.info(f"Created choropleth for {len(df)} countries (max={batch.get('maxValue')})")
    return fig


def series_to_frame(series_response: Dict) -> pd.DataFrame:
    """
    Join the cases and deaths series by date.

    Returns:
        DataFrame with date, total_cases, new_cases, total_deaths, new_deaths
        sorted by date
    """
    series = series_response.get("series") or {}
    frames = []
    for metric in ("cases", "deaths"):
        df = pd.DataFrame(series.get(metric) or [], columns=["date", "total", "new"])
        frames.append(
            df.rename(columns={"total": f"total_{metric}", "new": f"new_{metric}"}).set_index("date")
        )

    merged = frames[0].join(frames[1], how="outer").reset_index()
    return merged.sort_values("date").reset_index(drop=True)


def create_time_series_figure(series_response: Dict) -> go.Figure:
    """
    Create daily-new bars and cumulative-total lines for cases and deaths.

    Args:
        series_response: Time series response from the service

    Returns:
        Two-row plotly figure (cases on top, deaths below)
    """
    country = series_response.get("country", "")
    df = series_to_frame(series_response)

    fig = make_subplots(
        rows=2,
        cols=1,
        shared_xaxes=True,
        subplot_titles=("Cases", "Deaths"),
        specs=[[{"secondary_y": True}], [{"secondary_y": True}]],
    )

    if df.empty:
        fig.add_annotation(
            text="No historical data available yet",
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            showarrow=False,
        )
    else:
        dates = pd.to_datetime(df["date"])
        for row, metric in enumerate(("cases", "deaths"), start=1):
            color = COLORS[metric]
            fig.add_trace(
                go.Bar(x=dates, y=df[f"new_{metric}"], name=f"New {metric}", marker_color=color, opacity=0.5),
                row=row,
                col=1,
                secondary_y=False,
            )
            fig.add_trace(
                go.Scatter(x=dates, y=df[f"total_{metric}"], name=f"Total {metric}", line={"color": color}),
                row=row,
                col=1,
                secondary_y=True,
            )

    fig.update_layout(
        title=f"COVID-19 Time Series: {country}", height=DEFAULT_FIGURE_HEIGHT, hovermode="x unified"
    )
    return fig
