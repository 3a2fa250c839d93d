"""Food catalog domain models."""

import re
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from uuid import UUID

_WHITESPACE = re.compile(r"\s+")

ATWATER_PROTEIN = 4.0
ATWATER_CARBS = 4.0
ATWATER_FAT = 9.0


class FoodSource(str, Enum):
    """Provenance of a nutrient record."""

    LOCAL_CATALOG = "local_catalog"
    EXTERNAL_CATALOG = "external_catalog"
    USER_CORRECTION = "user_correction"
    MANUAL_ENTRY = "manual_entry"


def normalize_name(name: str) -> str:
    """Lowercase, trim and collapse inner whitespace of a food name."""
    return _WHITESPACE.sub(" ", name.strip().lower())


@dataclass(frozen=True)
class NutrientProfile:
    """Canonical nutrient amounts; sodium in mg, everything else in g or kcal."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0

    def macro_calories(self) -> float:
        """Estimate energy from macros using Atwater factors."""
        return (
            self.protein * ATWATER_PROTEIN
            + self.carbs * ATWATER_CARBS
            + self.fat * ATWATER_FAT
        )

    def as_dict(self) -> dict[str, float]:
        """Return nutrient values keyed by canonical field name."""
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "fiber": self.fiber,
            "sugar": self.sugar,
            "sodium": self.sodium,
        }

    @classmethod
    def from_mapping(cls, values: dict[str, object]) -> "NutrientProfile":
        """Build a profile from a loosely typed mapping, treating gaps as zero."""
        return cls(
            **{
                key: float(values.get(key) or 0.0)
                for key in cls.__dataclass_fields__
            }
        )


@dataclass(frozen=True)
class RawCandidate:
    """A nutrition entry returned by an external catalog, mapped to canonical fields."""

    external_id: str
    name: str
    nutrients: NutrientProfile
    provider: str
    brand: str | None = None
    category: str | None = None
    standardized: bool = False


@dataclass(frozen=True)
class NutrientRecord:
    """A resolved food with nutrition facts and provenance."""

    name: str
    name_normalized: str
    nutrients: NutrientProfile
    source: FoodSource
    times_used: int = 1
    detected_by_ai: bool = False
    external_id: str | None = None
    brand: str | None = None
    origin: FoodSource | None = None
    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    low_confidence: bool = False

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        name: str,
        nutrients: NutrientProfile,
        source: FoodSource,
        *,
        detected_by_ai: bool = False,
        external_id: str | None = None,
        brand: str | None = None,
    ) -> "NutrientRecord":
        """Create a new, not yet persisted record."""
        clean_name = name.strip()
        return cls(
            name=clean_name,
            name_normalized=normalize_name(clean_name),
            nutrients=nutrients,
            source=source,
            detected_by_ai=detected_by_ai,
            external_id=external_id,
            brand=brand,
            origin=source,
        )

    @classmethod
    def from_candidate(
        cls, candidate: RawCandidate, *, detected_by_ai: bool = False
    ) -> "NutrientRecord":
        """Create a record from an external catalog candidate."""
        return cls.create(
            candidate.name,
            candidate.nutrients,
            FoodSource.EXTERNAL_CATALOG,
            detected_by_ai=detected_by_ai,
            external_id=candidate.external_id,
            brand=candidate.brand,
        )

    def flagged_low_confidence(self) -> "NutrientRecord":
        """Return a copy marked as failing the plausibility check."""
        return replace(self, low_confidence=True)

    def served_locally(self) -> "NutrientRecord":
        """Return a copy reported as a local catalog hit."""
        return replace(
            self,
            source=FoodSource.LOCAL_CATALOG,
            origin=self.origin or self.source,
        )

    def to_payload(self) -> dict[str, object]:
        """Serialize for API responses."""
        return {
            "id": str(self.id) if self.id else None,
            "name": self.name,
            "name_normalized": self.name_normalized,
            **self.nutrients.as_dict(),
            "source": self.source.value,
            "origin": self.origin.value if self.origin else None,
            "external_id": self.external_id,
            "brand": self.brand,
            "times_used": self.times_used,
            "detected_by_ai": self.detected_by_ai,
            "low_confidence": self.low_confidence,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
