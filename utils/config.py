"""Configuration management utilities for the GDP chart tools.

Provides:
- A small ``Config`` base class with dict/JSON round-tripping
- ``ChartConfig``: canvas geometry, captions and tooltip offsets
- ``AppConfig``: application settings loaded from environment variables
"""

from pathlib import Path
from typing import Dict, Optional, Any
import json
import os as _os


GDP_DATA_URL = (
    "https://raw.githubusercontent.com/freeCodeCamp/"
    "ProjectReferenceData/master/GDP-data.json"
)


class Config:
    """Base configuration class for organizing application settings."""

    def __init__(self):
        """Initialize configuration with default values."""
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary.

        Returns:
            Dictionary of all config attributes
        """
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance with values from dictionary
        """
        config = cls()
        for key, value in data.items():
            setattr(config, key, value)
        return config

    def save_json(self, path: Path) -> None:
        """Save configuration to JSON file.

        Args:
            path: Path to save configuration file
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_json(cls, path: Path) -> "Config":
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)


class ChartConfig(Config):
    """Geometry and text of the rendered bar chart."""

    def __init__(self, width: int = 800, height: int = 500, padding: int = 100):
        super().__init__()
        self.width = width
        self.height = height
        self.padding = padding
        self.title = "United States GDP"
        self.x_caption = "Year"
        self.y_caption = "GDP (Billion USD)"
        # Tooltip placement relative to the pointer, in pixels
        self.tooltip_offset_top = -50
        self.tooltip_offset_left = 10

    def validate(self) -> None:
        """Raise ValueError if the plot area would be empty."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Chart size must be positive, got {self.width}x{self.height}"
            )
        if self.padding < 0:
            raise ValueError(f"Padding must be non-negative, got {self.padding}")
        if 2 * self.padding >= min(self.width, self.height):
            raise ValueError(
                f"Padding {self.padding} leaves no plot area in a "
                f"{self.width}x{self.height} chart"
            )


def _optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    return float(raw)


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box without any configuration.

    Environment variables:
        APP_PORT: API server port (default: 8000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        GDP_DATA_URL: Source of the GDP JSON document
        GDP_FETCH_TIMEOUT: Request timeout in seconds (default: unset, no timeout)
        GDP_FETCH_RETRIES: Retry attempts on connection errors/5xx (default: 0)
        CHART_WIDTH / CHART_HEIGHT / CHART_PADDING: Canvas geometry in pixels
        APP_PRELOAD: Fetch and draw during startup instead of on the first
            request (default: 1)
    """

    def __init__(self) -> None:
        super().__init__()
        self.api_port = int(_os.getenv("APP_PORT", "8000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        self.data_url = _os.getenv("GDP_DATA_URL", GDP_DATA_URL)
        self.fetch_timeout: Optional[float] = _optional_float(
            _os.getenv("GDP_FETCH_TIMEOUT")
        )
        self.fetch_retries = int(_os.getenv("GDP_FETCH_RETRIES", "0"))
        self.chart_width = int(_os.getenv("CHART_WIDTH", "800"))
        self.chart_height = int(_os.getenv("CHART_HEIGHT", "500"))
        self.chart_padding = int(_os.getenv("CHART_PADDING", "100"))
        self.preload = _os.getenv("APP_PRELOAD", "1").strip().lower() not in (
            "0", "false", "no", "off",
        )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()

    def chart_config(self) -> ChartConfig:
        """Build the validated ChartConfig for these settings."""
        chart = ChartConfig(
            width=self.chart_width,
            height=self.chart_height,
            padding=self.chart_padding,
        )
        chart.validate()
        return chart
