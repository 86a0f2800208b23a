"""Configuration package."""

from tour_pricing.config.logging import configure_logging, get_logger
from tour_pricing.config.settings import Settings, settings

__all__ = ["settings", "Settings", "configure_logging", "get_logger"]
