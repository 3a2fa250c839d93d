"""Resolution of food names into nutrient records.

Lookups go to the local catalog first. On a miss, the external catalog is
searched with a fixed sequence of name variants, the best plausible candidate is
written through to the local catalog, and the stored record is returned. An
external outage ends the resolution with no result so callers can fall back to
manual entry; local storage failures propagate.
"""

import asyncio
import logging
from dataclasses import dataclass

from food_resolver.domain.errors import ExternalUnavailable
from food_resolver.domain.foods import NutrientRecord, RawCandidate, normalize_name
from food_resolver.services.external_catalog import ExternalCatalogClient
from food_resolver.services.food_catalog import FoodCatalogService
from food_resolver.services.plausibility import (
    DEFAULT_LIMITS,
    PlausibilityLimits,
    verify,
)
from food_resolver.services.scoring import pick_best

_logger = logging.getLogger(__name__)


def name_variants(name: str) -> list[str]:
    """Return the external search variants for a food name, in retry order."""
    singular = name[:-1] if name.lower().endswith("s") else name
    return [name, f"{name} raw", f"{name} cooked", singular]


@dataclass
class FoodResolutionService:
    """Resolves food names using the local catalog with external fallback."""

    catalog: FoodCatalogService
    external_catalog: ExternalCatalogClient
    limits: PlausibilityLimits = DEFAULT_LIMITS
    max_results: int = 10
    search_timeout_seconds: float = 15.0
    max_concurrency: int = 4

    async def resolve(
        self, food_name: str, detected_by_ai: bool = False
    ) -> NutrientRecord | None:
        """Return the best nutrient record for a food name, or None if not found."""
        name = food_name.strip()
        if not normalize_name(name):
            return None

        local = self.catalog.find(name)
        if local is not None:
            _logger.info("Local catalog hit: query=%s food=%s", name, local.name)
            return self.catalog.record_use(local).served_locally()

        fallback: RawCandidate | None = None
        for variant in name_variants(name):
            try:
                candidates = await self._search(variant)
            except ExternalUnavailable as exc:
                _logger.warning("External lookup aborted for %s: %s", name, exc)
                return None

            plausible = [c for c in candidates if verify(c.nutrients, self.limits)]
            if plausible:
                best = pick_best(plausible, variant)
                _logger.info(
                    "External match: query=%s variant=%s food=%s",
                    name,
                    variant,
                    best.name,
                )
                record = NutrientRecord.from_candidate(
                    best, detected_by_ai=detected_by_ai
                )
                return self.catalog.upsert(record)
            if candidates and fallback is None:
                fallback = pick_best(candidates, variant)

        if fallback is not None:
            _logger.warning(
                "Only implausible candidates for %s; returning %s unsaved",
                name,
                fallback.name,
            )
            return NutrientRecord.from_candidate(
                fallback, detected_by_ai=detected_by_ai
            ).flagged_low_confidence()
        _logger.info("No nutrition data found for %s", name)
        return None

    async def resolve_many(
        self, food_names: list[str], detected_by_ai: bool = False
    ) -> dict[str, NutrientRecord | None]:
        """Resolve several names concurrently, e.g. the ingredients of a recipe."""
        names = list(dict.fromkeys(food_names))
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def resolve_one(name: str) -> NutrientRecord | None:
            async with semaphore:
                return await self.resolve(name, detected_by_ai=detected_by_ai)

        results = await asyncio.gather(*(resolve_one(name) for name in names))
        return dict(zip(names, results, strict=True))

    async def _search(self, query: str) -> list[RawCandidate]:
        try:
            return await asyncio.wait_for(
                self.external_catalog.search(query, self.max_results),
                timeout=self.search_timeout_seconds,
            )
        except TimeoutError as exc:
            raise ExternalUnavailable("external", "search timed out") from exc
