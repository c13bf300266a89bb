"""Shared utilities for the GDP chart tools."""

# HTTP utilities
from utils.http import (
    RetryStrategy,
    SessionManager,
    fetch_json,
)

# Output formatting
from utils.formatting import (
    format_gdp,
    format_iso_date,
    format_year,
    format_tick,
    format_tooltip,
    format_px,
    format_number,
)

# Configuration
from utils.config import (
    GDP_DATA_URL,
    Config,
    ChartConfig,
    AppConfig,
)

__all__ = [
    # HTTP
    "RetryStrategy",
    "SessionManager",
    "fetch_json",
    # Formatting
    "format_gdp",
    "format_iso_date",
    "format_year",
    "format_tick",
    "format_tooltip",
    "format_px",
    "format_number",
    # Config
    "GDP_DATA_URL",
    "Config",
    "ChartConfig",
    "AppConfig",
]
