"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from food_resolver.services.plausibility import PlausibilityLimits

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_data_types: str | None = None
    spoonacular_api_key: str | None = None
    spoonacular_base_url: str = "https://api.spoonacular.com"
    external_timeout_seconds: float = 10.0
    external_max_results: int = 10
    search_cache_ttl_seconds: int = 3600
    resolve_max_concurrency: int = 4
    max_calories_per_100g: float = 900.0
    max_macro_grams_per_100g: float = 100.0
    max_calorie_divergence: float = 0.3
    divergence_min_calories: float = 50.0
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def plausibility_limits(self) -> PlausibilityLimits:
        """Return the plausibility thresholds configured for this environment."""
        return PlausibilityLimits(
            max_calories=self.max_calories_per_100g,
            max_macro_grams=self.max_macro_grams_per_100g,
            max_calorie_divergence=self.max_calorie_divergence,
            divergence_min_calories=self.divergence_min_calories,
        )


def parse_data_types(raw: str | None) -> tuple[str, ...]:
    """Parse a comma separated list of FDC data types from env."""
    if raw is None:
        return ()
    return tuple(chunk.strip() for chunk in raw.split(",") if chunk.strip())
