"""Application settings and configuration management."""
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

ROUNDING_MODES = {
    "ROUND_HALF_UP": ROUND_HALF_UP,
    "ROUND_HALF_EVEN": ROUND_HALF_EVEN,
}


class PricingSettings(BaseSettings):
    """Pricing presentation and lookup configuration."""

    money_places: int = 2  # Decimal places used when rendering results
    rounding: Literal["ROUND_HALF_UP", "ROUND_HALF_EVEN"] = "ROUND_HALF_UP"

    # Markup tiers offered by the quotation screen
    standard_markup: int = 10
    premium_markup: int = 20
    luxury_markup: int = 30

    # Use a room rate with another meal plan when no exact meal-plan row exists
    meal_plan_fallback: bool = False

    # Per-room supplements for meals the room's meal plan does not cover
    breakfast_price: Decimal = Decimal("350")
    lunch_price: Decimal = Decimal("500")
    dinner_price: Decimal = Decimal("550")

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    @property
    def rounding_mode(self) -> str:
        """Get the decimal module rounding constant."""
        return ROUNDING_MODES[self.rounding]


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    environment: Literal["dev", "staging", "prod"] = "dev"
    debug: bool = False

    # Sub-settings
    pricing: PricingSettings = PricingSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
