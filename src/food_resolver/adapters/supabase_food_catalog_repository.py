"""Supabase implementation of the local food catalog."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from food_resolver.domain.errors import StorageError
from food_resolver.domain.foods import FoodSource, NutrientProfile, NutrientRecord
from food_resolver.services.food_catalog import FoodCatalogRepository

FOODS_TABLE = "food_database"
ALIASES_TABLE = "food_aliases"
UPSERT_FUNCTION = "upsert_food_record"

# Rows written before sources were normalized.
_LEGACY_SOURCES = {"usda": FoodSource.EXTERNAL_CATALOG, "local": FoodSource.LOCAL_CATALOG}


@dataclass
class SupabaseFoodCatalogRepository(FoodCatalogRepository):
    """Supabase-backed repository for the shared food catalog."""

    client: Client

    def get_food(self, name_normalized: str) -> NutrientRecord | None:
        """Return the food stored under an exact normalized name."""
        response = _execute(
            self.client.table(FOODS_TABLE)
            .select("*")
            .eq("name_normalized", name_normalized)
            .limit(1),
            action="get_food",
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])

    def get_foods(self, names_normalized: list[str]) -> list[NutrientRecord]:
        """Return foods stored under any of the given normalized names."""
        if not names_normalized:
            return []
        response = _execute(
            self.client.table(FOODS_TABLE)
            .select("*")
            .in_("name_normalized", names_normalized),
            action="get_foods",
        )
        return [_parse_food(row) for row in response.data or []]

    def search_foods(self, pattern: str, limit: int) -> list[NutrientRecord]:
        """Return foods whose normalized name contains the pattern."""
        response = _execute(
            self.client.table(FOODS_TABLE)
            .select("*")
            .ilike("name_normalized", _contains_pattern(pattern))
            .order("times_used", desc=True)
            .limit(limit),
            action="search_foods",
        )
        return [_parse_food(row) for row in response.data or []]

    def search_aliases(self, pattern: str, limit: int) -> list[tuple[str, str]]:
        """Return aliases containing the pattern with the foods they point at."""
        response = _execute(
            self.client.table(ALIASES_TABLE)
            .select("alias_normalized, name_normalized")
            .ilike("alias_normalized", _contains_pattern(pattern))
            .limit(limit),
            action="search_aliases",
        )
        return [
            (str(row["alias_normalized"]), str(row["name_normalized"]))
            for row in response.data or []
        ]

    def upsert_food(self, payload: dict[str, object], overwrite: bool) -> NutrientRecord:
        """Insert or increment a food in a single database statement."""
        response = _execute(
            self.client.rpc(
                UPSERT_FUNCTION, {"p_food": payload, "p_overwrite": overwrite}
            ),
            action="upsert_food",
        )
        data = response.data
        row = data[0] if isinstance(data, list) and data else data
        if not isinstance(row, dict):
            raise StorageError(f"Failed to upsert food {payload.get('name_normalized')}")
        return _parse_food(row)

    def add_alias(self, alias_normalized: str, name_normalized: str) -> None:
        """Point an alias at a food, replacing any earlier target."""
        _execute(
            self.client.table(ALIASES_TABLE).upsert(
                {
                    "alias_normalized": alias_normalized,
                    "name_normalized": name_normalized,
                },
                on_conflict="alias_normalized",
            ),
            action="add_alias",
        )

    def list_popular(self, limit: int) -> list[NutrientRecord]:
        """Return the most used foods."""
        response = _execute(
            self.client.table(FOODS_TABLE)
            .select("*")
            .order("times_used", desc=True)
            .limit(limit),
            action="list_popular",
        )
        return [_parse_food(row) for row in response.data or []]


def _execute(query, *, action: str):  # type: ignore[no-untyped-def]
    """Execute a PostgREST query, converting backend failures to StorageError."""
    try:
        return query.execute()
    except (APIError, httpx.HTTPError) as exc:
        raise StorageError(f"Food catalog {action} failed: {exc}") from exc


def _contains_pattern(text: str) -> str:
    """Build an ILIKE pattern matching text anywhere, with wildcards escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_source(raw: object) -> FoodSource:
    value = str(raw or "")
    if value in _LEGACY_SOURCES:
        return _LEGACY_SOURCES[value]
    try:
        return FoodSource(value)
    except ValueError:
        return FoodSource.EXTERNAL_CATALOG


def _parse_food(row: dict[str, object]) -> NutrientRecord:
    """Parse a food_database row into a domain model."""
    source = _parse_source(row.get("source"))
    external_id = row.get("external_id")
    return NutrientRecord(
        id=UUID(str(row["id"])) if row.get("id") else None,
        name=str(row.get("name", "")),
        name_normalized=str(row.get("name_normalized", "")),
        nutrients=NutrientProfile.from_mapping(row),
        source=source,
        origin=source,
        times_used=int(row.get("times_used") or 1),
        detected_by_ai=bool(row.get("detected_by_ai", False)),
        external_id=str(external_id) if external_id is not None else None,
        brand=row.get("brand"),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
