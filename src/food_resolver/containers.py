"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_resolver.adapters.fdc_client import HttpxFdcClient
from food_resolver.adapters.spoonacular_client import HttpxSpoonacularClient
from food_resolver.adapters.supabase_food_catalog_repository import (
    SupabaseFoodCatalogRepository,
)
from food_resolver.config import Settings, parse_data_types
from food_resolver.services.cache import InMemoryCache
from food_resolver.services.corrections import CorrectionLearner
from food_resolver.services.external_catalog import (
    ExternalCatalogClient,
    FallbackCatalog,
    ProviderCatalog,
    map_fdc_search,
    map_spoonacular_search,
)
from food_resolver.services.food_catalog import FoodCatalogService
from food_resolver.services.resolution import FoodResolutionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_catalog_service: FoodCatalogService
    external_catalog: ExternalCatalogClient
    resolution_service: FoodResolutionService
    correction_learner: CorrectionLearner
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    limits = resolved_settings.plausibility_limits()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_catalog_service = FoodCatalogService(
        SupabaseFoodCatalogRepository(supabase_client), limits=limits
    )

    cache = InMemoryCache()
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.external_timeout_seconds,
        data_types=parse_data_types(resolved_settings.fdc_data_types),
    )
    catalogs: list[ExternalCatalogClient] = [
        ProviderCatalog(
            provider="fdc",
            fetch=fdc_client.search_foods,
            mapper=map_fdc_search,
            cache=cache,
            cache_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
            debug=resolved_settings.debug,
        )
    ]
    spoonacular_client: HttpxSpoonacularClient | None = None
    if resolved_settings.spoonacular_api_key:
        spoonacular_client = HttpxSpoonacularClient.create(
            api_key=resolved_settings.spoonacular_api_key,
            base_url=resolved_settings.spoonacular_base_url,
            timeout_seconds=resolved_settings.external_timeout_seconds,
        )
        catalogs.append(
            ProviderCatalog(
                provider="spoonacular",
                fetch=spoonacular_client.search_recipes,
                mapper=map_spoonacular_search,
                cache=cache,
                cache_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
                debug=resolved_settings.debug,
            )
        )
    external_catalog = FallbackCatalog(catalogs)

    resolution_service = FoodResolutionService(
        catalog=food_catalog_service,
        external_catalog=external_catalog,
        limits=limits,
        max_results=resolved_settings.external_max_results,
        search_timeout_seconds=resolved_settings.external_timeout_seconds * 1.5,
        max_concurrency=resolved_settings.resolve_max_concurrency,
    )
    correction_learner = CorrectionLearner(food_catalog_service, limits=limits)

    async def close_resources() -> None:
        await fdc_client.close()
        if spoonacular_client is not None:
            await spoonacular_client.close()

    return AppContainer(
        settings=resolved_settings,
        food_catalog_service=food_catalog_service,
        external_catalog=external_catalog,
        resolution_service=resolution_service,
        correction_learner=correction_learner,
        close_resources=close_resources,
    )
