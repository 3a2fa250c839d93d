"""External nutrition catalogs mapped to canonical candidates."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

from food_resolver.domain.errors import ExternalUnavailable
from food_resolver.domain.foods import NutrientProfile, RawCandidate, normalize_name
from food_resolver.services.cache import Cache, InMemoryCache

_logger = logging.getLogger(__name__)

# FDC nutrient ids, with a priority per canonical field (lower wins).
_FDC_NUTRIENT_IDS: dict[int, tuple[str, int]] = {
    1008: ("calories", 0),
    2048: ("calories", 1),
    2047: ("calories", 2),
    1003: ("protein", 0),
    1005: ("carbs", 0),
    1004: ("fat", 0),
    1079: ("fiber", 0),
    2000: ("sugar", 0),
    1093: ("sodium", 0),
}

# Label fragments for payloads without nutrient ids; first match wins.
_FDC_NUTRIENT_LABELS: list[tuple[str, str]] = [
    ("energy", "calories"),
    ("protein", "protein"),
    ("carbohydrate", "carbs"),
    ("total lipid", "fat"),
    ("fat, total", "fat"),
    ("total fat", "fat"),
    ("fiber", "fiber"),
    ("sugars, total", "sugar"),
    ("total sugars", "sugar"),
    ("sodium", "sodium"),
]
_LABEL_PRIORITY = 5

_FDC_STANDARDIZED_TYPES = {"survey (fndds)", "foundation", "sr legacy"}

_SPOONACULAR_NUTRIENTS = {
    "calories": "calories",
    "protein": "protein",
    "carbohydrates": "carbs",
    "fat": "fat",
    "fiber": "fiber",
    "sugar": "sugar",
    "sodium": "sodium",
}


class ExternalCatalogClient(Protocol):
    """Interface for searching third-party nutrition catalogs."""

    async def search(self, query: str, max_results: int = 10) -> list[RawCandidate]:
        """Return candidates for a free-text query.

        Raises ExternalUnavailable when the catalog cannot be used.
        """


SearchFetcher = Callable[[str, int], Awaitable[dict[str, object]]]
PayloadMapper = Callable[[dict[str, object]], list[RawCandidate]]


@dataclass
class ProviderCatalog(ExternalCatalogClient):
    """One provider: a raw search call plus the mapper for its payload shape."""

    provider: str
    fetch: SearchFetcher
    mapper: PayloadMapper
    cache: Cache = field(default_factory=InMemoryCache)
    cache_ttl_seconds: int = 3600
    debug: bool = False

    async def search(self, query: str, max_results: int = 10) -> list[RawCandidate]:
        """Search the provider, caching non-empty results."""
        cache_key = f"{self.provider}:search:{normalize_name(query)}:{max_results}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return list(cached)

        payload = await self.fetch(query, max_results)
        try:
            candidates = self.mapper(payload)[:max_results]
        except (AttributeError, TypeError, ValueError) as exc:
            raise ExternalUnavailable(self.provider, "malformed response") from exc
        if candidates:
            self.cache.set(
                cache_key, list(candidates), ttl_seconds=self.cache_ttl_seconds
            )
        if self.debug:
            _logger.info(
                "Catalog search %s: query=%s results=%s",
                self.provider,
                query,
                len(candidates),
            )
        return candidates


@dataclass
class FallbackCatalog(ExternalCatalogClient):
    """Queries catalogs in order and returns the first non-empty result."""

    catalogs: list[ExternalCatalogClient]

    async def search(self, query: str, max_results: int = 10) -> list[RawCandidate]:
        """Search each catalog until one returns candidates.

        Raises the last outage when no catalog returned candidates and at least
        one of them was unavailable.
        """
        outages: list[ExternalUnavailable] = []
        for catalog in self.catalogs:
            try:
                candidates = await catalog.search(query, max_results)
            except ExternalUnavailable as exc:
                _logger.warning("Skipping unavailable catalog: %s", exc)
                outages.append(exc)
                continue
            if candidates:
                return candidates
        if outages:
            raise outages[-1]
        return []


def map_fdc_search(payload: dict[str, object]) -> list[RawCandidate]:
    """Map a FoodData Central search payload to candidates."""
    foods = payload.get("foods") or []
    candidates = []
    for food in foods:
        data_type = food.get("dataType")
        candidates.append(
            RawCandidate(
                external_id=str(food.get("fdcId", "")),
                name=str(food.get("description", "")),
                nutrients=_map_fdc_nutrients(food.get("foodNutrients") or []),
                provider="fdc",
                brand=food.get("brandOwner") or food.get("brandName"),
                category=data_type,
                standardized=str(data_type or "").lower() in _FDC_STANDARDIZED_TYPES,
            )
        )
    return candidates


def map_spoonacular_search(payload: dict[str, object]) -> list[RawCandidate]:
    """Map a Spoonacular recipe search payload to per-serving candidates."""
    results = payload.get("results") or []
    candidates = []
    for recipe in results:
        nutrition = recipe.get("nutrition") or {}
        values: dict[str, object] = {}
        for nutrient in nutrition.get("nutrients") or []:
            canonical = _SPOONACULAR_NUTRIENTS.get(str(nutrient.get("name", "")).lower())
            if canonical and canonical not in values:
                values[canonical] = nutrient.get("amount")
        candidates.append(
            RawCandidate(
                external_id=str(recipe.get("id", "")),
                name=str(recipe.get("title", "")),
                nutrients=NutrientProfile.from_mapping(values),
                provider="spoonacular",
                category="recipe",
            )
        )
    return candidates


def _map_fdc_nutrients(food_nutrients: list[dict[str, object]]) -> NutrientProfile:
    """Pick canonical nutrient values out of FDC nutrient entries."""
    chosen: dict[str, tuple[int, float]] = {}
    for nutrient in food_nutrients:
        info = nutrient.get("nutrient") or {}
        nutrient_id = nutrient.get("nutrientId") or info.get("id")
        label = str(nutrient.get("nutrientName") or info.get("name") or "").lower()
        unit = str(nutrient.get("unitName") or info.get("unitName") or "").lower()
        amount = nutrient.get("value", nutrient.get("amount"))
        if amount is None:
            continue

        mapped = _FDC_NUTRIENT_IDS.get(nutrient_id)
        if mapped is None:
            mapped = _label_field(label)
        if mapped is None:
            continue
        canonical, priority = mapped
        if canonical == "calories" and unit == "kj":
            continue
        current = chosen.get(canonical)
        if current is None or priority < current[0]:
            chosen[canonical] = (priority, float(amount))

    return NutrientProfile.from_mapping(
        {canonical: value for canonical, (_, value) in chosen.items()}
    )


def _label_field(label: str) -> tuple[str, int] | None:
    for fragment, canonical in _FDC_NUTRIENT_LABELS:
        if fragment in label:
            return canonical, _LABEL_PRIORITY
    return None
