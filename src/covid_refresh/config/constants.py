"""
COVID-19 Country Refresh - Configuration Constants

Centralized configuration and constants for the entire project.
This module contains all hardcoded values, mappings, and configuration
parameters used across different modules.
"""

# Upstream data provider
API_URL = "https://api.api-ninjas.com/v1/covid19"
API_KEY_HEADER = "X-Api-Key"
API_KEY_ENV_VAR = "API_NINJAS_KEY"

# Upstream request behaviour
REQUEST_TIMEOUT_SECONDS = 20
MAX_RETRIES = 3
RETRY_BASE_DELAY_SECONDS = 0.5
RETRY_BACKOFF_FACTOR = 3

# Refresh worker and scheduler
REFRESH_GAP_SECONDS = 2 * 60  # provider rate limit: one request per 2 minutes
SCHEDULER_INTERVAL_SECONDS = 30 * 60
SCHEDULER_INITIAL_DELAY_SECONDS = 5

# Persistence
DATABASE_URL_ENV_VAR = "COVID_DATABASE_URL"
DEFAULT_DATABASE_URL = "sqlite:///covid_data.db"
COUNTRY_TABLE_NAME = "covid_countries"

# Region labels marking the country-wide aggregate sub-record
AGGREGATE_REGION_LABEL = "all"
REGION_KEYS = ("region", "province", "state")

# Country name aliases: lower-cased user/map spelling -> provider name
COUNTRY_ALIASES = {
    "usa": "United States",
    "us": "United States",
    "u.s.a.": "United States",
    "u.s.": "United States",
    "united states of america": "United States",
    "uk": "United Kingdom",
    "south korea": "Korea, South",
    "north korea": "Korea, North",
    "russia": "Russia",
    "russian federation": "Russia",
    "uae": "United Arab Emirates",
    "vietnam": "Vietnam",
    "laos": "Lao People's Democratic Republic",
    "iran": "Iran",
    "syria": "Syria",
    "czechia": "Czechia",
    "czech republic": "Czechia",
    "slovakia": "Slovakia",
    "myanmar": "Myanmar",
    "burma": "Myanmar",
    "ivory coast": "Cote d'Ivoire",
    "cote d'ivoire": "Cote d'Ivoire",
    "côte d'ivoire": "Cote d'Ivoire",
    "congo (kinshasa)": "Congo (Kinshasa)",
    "congo (brazzaville)": "Congo (Brazzaville)",
    "democratic republic of the congo": "Congo (Kinshasa)",
    "republic of the congo": "Congo (Brazzaville)",
    "dem. rep. congo": "Congo (Kinshasa)",
    "dominican rep.": "Dominican Republic",
    "dominican republic": "Dominican Republic",
    "eq. guinea": "Equatorial Guinea",
    "equatorial guinea": "Equatorial Guinea",
    "w. sahara": "Western Sahara",
    "falkland is.": "Falkland Islands",
    "falkland islands": "Falkland Islands",
    "fr. s. antarctic lands": "French Southern Territories",
    "timor-leste": "Timor-Leste",
    "palestine": "Palestine",
    "s. sudan": "South Sudan",
}

# Color scale for choropleth mapping (light blue -> yellow -> dark red)
DEFAULT_GREY_HEX = "#B0B0B0"
LOW_COLOR = (173, 216, 230)
MID_COLOR = (255, 255, 0)
HIGH_COLOR = (139, 0, 0)

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL = "INFO"
LOG_LEVEL_ENV_VAR = "LOG_LEVEL"

# Dashboard defaults
DEFAULT_DASHBOARD_COUNTRIES = [
    "United States",
    "United Kingdom",
    "India",
    "Brazil",
    "France",
    "Germany",
    "Italy",
    "Japan",
    "Korea, South",
    "South Africa",
]
DEFAULT_FIGURE_HEIGHT = 550
COLORS = {
    "cases": "#2E86AB",
    "deaths": "#C73E1D",
}
