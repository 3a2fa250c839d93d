"""Local food catalog: previously resolved foods keyed by normalized name."""

import logging
from dataclasses import dataclass
from typing import Protocol

from food_resolver.domain.foods import (
    FoodSource,
    NutrientProfile,
    NutrientRecord,
    normalize_name,
)
from food_resolver.services.plausibility import (
    DEFAULT_LIMITS,
    PlausibilityLimits,
    verify,
)

_logger = logging.getLogger(__name__)

_TIER_EXACT_NAME = 0
_TIER_EXACT_ALIAS = 1
_TIER_NAME_CONTAINS = 2
_TIER_ALIAS_CONTAINS = 3


class FoodCatalogRepository(Protocol):
    """Persistence interface for the local food catalog."""

    def get_food(self, name_normalized: str) -> NutrientRecord | None:
        """Return the food stored under an exact normalized name."""

    def get_foods(self, names_normalized: list[str]) -> list[NutrientRecord]:
        """Return foods stored under any of the given normalized names."""

    def search_foods(self, pattern: str, limit: int) -> list[NutrientRecord]:
        """Return foods whose normalized name contains the pattern, most used first."""

    def search_aliases(self, pattern: str, limit: int) -> list[tuple[str, str]]:
        """Return (alias, name_normalized) pairs whose alias contains the pattern."""

    def upsert_food(self, payload: dict[str, object], overwrite: bool) -> NutrientRecord:
        """Insert a food, or atomically increment its usage if it already exists."""

    def add_alias(self, alias_normalized: str, name_normalized: str) -> None:
        """Point an alias at a stored food."""

    def list_popular(self, limit: int) -> list[NutrientRecord]:
        """Return foods ordered by usage, most used first."""


@dataclass
class FoodCatalogService:
    """Application service for local catalog lookups and writes."""

    repository: FoodCatalogRepository
    limits: PlausibilityLimits = DEFAULT_LIMITS
    search_limit: int = 20

    def find(self, name_query: str) -> NutrientRecord | None:
        """Return the best local match for a name, or None."""
        normalized = normalize_name(name_query)
        if not normalized:
            return None
        exact = self.repository.get_food(normalized)
        if exact is not None:
            return exact

        ranked: dict[str, tuple[int, NutrientRecord]] = {}
        for food in self.repository.search_foods(normalized, self.search_limit):
            tier = (
                _TIER_EXACT_NAME
                if food.name_normalized == normalized
                else _TIER_NAME_CONTAINS
            )
            _keep_best_tier(ranked, tier, food)

        aliases = self.repository.search_aliases(normalized, self.search_limit)
        if aliases:
            targets = {
                food.name_normalized: food
                for food in self.repository.get_foods(
                    sorted({target for _, target in aliases})
                )
            }
            for alias, target in aliases:
                food = targets.get(target)
                if food is None:
                    continue
                tier = _TIER_EXACT_ALIAS if alias == normalized else _TIER_ALIAS_CONTAINS
                _keep_best_tier(ranked, tier, food)

        if not ranked:
            return None
        # Stable sort: equal tier and usage keep storage order.
        matches = sorted(
            ranked.values(), key=lambda match: (match[0], -match[1].times_used)
        )
        return matches[0][1]

    def upsert(self, record: NutrientRecord, overwrite: bool = False) -> NutrientRecord:
        """Store a record, incrementing usage when its name already exists."""
        return self.repository.upsert_food(_record_payload(record), overwrite=overwrite)

    def record_use(self, record: NutrientRecord) -> NutrientRecord:
        """Increment the usage counter of a stored record."""
        return self.repository.upsert_food(_record_payload(record), overwrite=False)

    def most_popular(self, limit: int = 10) -> list[NutrientRecord]:
        """Return the most used foods for quick-add suggestions."""
        return self.repository.list_popular(limit)

    def add_alias(self, alias: str, record: NutrientRecord) -> None:
        """Make a record reachable under an alternate name."""
        alias_normalized = normalize_name(alias)
        if not alias_normalized or alias_normalized == record.name_normalized:
            return
        self.repository.add_alias(alias_normalized, record.name_normalized)

    def save_manual(
        self, name: str, nutrients: NutrientProfile, brand: str | None = None
    ) -> NutrientRecord:
        """Store a manually entered food, replacing any stored values."""
        record = NutrientRecord.create(
            name, nutrients, FoodSource.MANUAL_ENTRY, brand=brand
        )
        if not verify(nutrients, self.limits):
            _logger.warning("Manual entry failed plausibility check: %s", name)
            return record.flagged_low_confidence()
        return self.upsert(record, overwrite=True)


def _keep_best_tier(
    ranked: dict[str, tuple[int, NutrientRecord]], tier: int, food: NutrientRecord
) -> None:
    """Remember a food under its best (lowest) match tier."""
    current = ranked.get(food.name_normalized)
    if current is None or tier < current[0]:
        ranked[food.name_normalized] = (tier, food)


def _record_payload(record: NutrientRecord) -> dict[str, object]:
    """Build the storage payload for a record."""
    source = record.origin or record.source
    return {
        "name": record.name,
        "name_normalized": record.name_normalized,
        **record.nutrients.as_dict(),
        "source": source.value,
        "external_id": record.external_id,
        "brand": record.brand,
        "detected_by_ai": record.detected_by_ai,
    }
