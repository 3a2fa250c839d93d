"""Pydantic models for food API payloads."""

from pydantic import BaseModel, Field

from food_resolver.domain.foods import NutrientProfile


class NutritionPayload(BaseModel):
    """Nutrient amounts confirmed or entered by a user."""

    calories: float = Field(ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float = Field(default=0.0, ge=0)
    sugar: float = Field(default=0.0, ge=0)
    sodium: float = Field(default=0.0, ge=0)

    def to_profile(self) -> NutrientProfile:
        """Convert to the domain nutrient profile."""
        return NutrientProfile(**self.model_dump())


class ResolveBatchRequest(BaseModel):
    """Several food names to resolve at once."""

    names: list[str] = Field(min_length=1, max_length=50)
    detected_by_ai: bool = False


class CorrectionRequest(BaseModel):
    """A user's fix to an AI-detected food."""

    ai_detected_name: str = Field(min_length=1)
    user_corrected_name: str = Field(min_length=1)
    nutrition: NutritionPayload


class ManualFoodRequest(BaseModel):
    """A food entered by hand."""

    name: str = Field(min_length=1)
    brand: str | None = None
    nutrition: NutritionPayload
