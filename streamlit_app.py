"""
COVID-19 Country Dashboard

Interactive Streamlit application over the country refresh service. Every view
answers from the local store and then queues a background refresh, so data
fills in on later reruns as the rate-limited worker fetches it.
"""

import logging
import os
import sys

import streamlit as st

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from covid_refresh.config.constants import DEFAULT_DASHBOARD_COUNTRIES, SCHEDULER_INTERVAL_SECONDS
from covid_refresh.config.logging_config import configure_logging
from covid_refresh.config.settings import Settings
from covid_refresh.service import CovidService
from covid_refresh.visualizer import (
    batch_to_frame,
    create_choropleth_figure,
    create_time_series_figure,
    series_to_frame,
)

# Configure page
st.set_page_config(
    page_title="COVID-19 Country Dashboard",
    page_icon="🦠",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_service() -> CovidService:
    """One service (and one refresh worker) per Streamlit server process."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logging.getLogger("streamlit").setLevel(logging.WARNING)

    service = CovidService.from_settings(settings)
    service.start_covid_scheduler(settings.scheduler_interval_seconds or SCHEDULER_INTERVAL_SECONDS)
    return service


def create_overview_metrics(service, batch):
    """Create overview metrics for the dashboard."""
    status = service.status()
    df = batch_to_frame(batch)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric(label="Countries Stored", value=f"{status['count']:,}")
    with col2:
        st.metric(label="Selected With Data", value=f"{int(df['hasData'].sum())} / {len(df)}")
    with col3:
        st.metric(label="Highest Total Cases", value=f"{batch['maxValue']:,.0f}")
    with col4:
        last = status["lastUpdatedAt"]
        st.metric(label="Last Refresh", value=last.strftime("%Y-%m-%d %H:%M") if last else "Never")


def create_legend(service, max_value):
    """Show the gradient stops used on the map."""
    legend = service.get_legend(max_value)
    cols = st.columns(len(legend["stops"]) + 1)
    for col, stop in zip(cols, legend["stops"]):
        col.markdown(
            f"<span style='color:{stop['color']}'>■</span> {stop['label']}",
            unsafe_allow_html=True,
        )
    cols[-1].markdown(
        f"<span style='color:{legend['defaultColor']}'>■</span> No data", unsafe_allow_html=True
    )


def create_time_series_section(service, country):
    """Charts and summary for one country."""
    response = service.get_country_time_series(country)
    service.refresh_countries([country])

    stats = response["stats"]
    if stats:
        col1, col2, col3 = st.columns(3)
        col1.metric("Total Cases", f"{stats['totalCases'] or 0:,.0f}")
        col2.metric("Total Deaths", f"{stats['totalDeaths'] or 0:,.0f}")
        col3.metric(
            "Peak Daily Cases",
            f"{stats['peakDailyCases'] or 0:,.0f}",
            help=f"On {stats['peakCasesDate']}" if stats["peakCasesDate"] else None,
        )
        st.caption(f"Coverage: {stats['startDate']} to {stats['endDate']}")
    else:
        st.info(f"No historical data stored for {response['country']} yet; a refresh has been queued.")

    st.plotly_chart(create_time_series_figure(response), use_container_width=True)

    with st.expander("📋 Raw series"):
        df = series_to_frame(response)
        st.dataframe(df, use_container_width=True)
        st.download_button(
            "Download CSV",
            df.to_csv(index=False),
            file_name=f"{response['country']}_time_series.csv",
            mime="text/csv",
        )


def main():
    """Main dashboard application."""
    st.title("🦠 COVID-19 Country Dashboard")
    service = get_service()

    st.sidebar.header("🔍 Countries")
    extra = st.sidebar.text_input("Add countries (comma separated):", "")
    requested = list(
        dict.fromkeys(DEFAULT_DASHBOARD_COUNTRIES + [name.strip() for name in extra.split(",") if name.strip()])
    )
    selected = st.sidebar.multiselect(
        "Countries on the map:",
        options=sorted(set(service.store.distinct_keys()) | set(requested)),
        default=requested,
    )

    if not selected:
        st.warning("Please select at least one country.")
        return

    batch = service.get_batch_from_db(selected)
    service.refresh_countries(selected)

    st.header("📈 Overview")
    create_overview_metrics(service, batch)

    tab1, tab2, tab3 = st.tabs(["🗺️ World Map", "📊 Time Series", "📋 Table"])

    with tab1:
        st.plotly_chart(create_choropleth_figure(batch), use_container_width=True)
        create_legend(service, batch["maxValue"])

    with tab2:
        country = st.selectbox("Country:", [r["country"] for r in batch["results"]])
        if country:
            create_time_series_section(service, country)

    with tab3:
        df = batch_to_frame(batch)
        st.dataframe(
            df.style.apply(
                lambda row: [f"background-color: {row['colorHex']}" if col == "colorHex" else "" for col in row.index],
                axis=1,
            ),
            use_container_width=True,
        )
        pending = service.queue.pending()
        if pending:
            st.caption(f"Waiting for refresh: {', '.join(sorted(pending))}")

    st.markdown("---")
    st.markdown(
        "**Data Source:** [API Ninjas COVID-19](https://api-ninjas.com/api/covid19). "
        "Countries refresh one at a time, two minutes apart."
    )


if __name__ == "__main__":
    main()
