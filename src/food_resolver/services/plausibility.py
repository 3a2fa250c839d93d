"""Plausibility checks for nutrient data before it is trusted."""

import logging
from dataclasses import dataclass

from food_resolver.domain.foods import NutrientProfile

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlausibilityLimits:
    """Tunable bounds for the plausibility check, per 100 g."""

    max_calories: float = 900.0
    max_macro_grams: float = 100.0
    max_calorie_divergence: float = 0.3
    divergence_min_calories: float = 50.0


DEFAULT_LIMITS = PlausibilityLimits()


def verify(
    nutrients: NutrientProfile, limits: PlausibilityLimits = DEFAULT_LIMITS
) -> bool:
    """Return True when nutrient values look like real food composition data."""
    if any(value < 0 for value in nutrients.as_dict().values()):
        return False
    if nutrients.calories > limits.max_calories:
        return False
    for grams in (nutrients.protein, nutrients.carbs, nutrients.fat):
        if grams > limits.max_macro_grams:
            return False
    if nutrients.calories > limits.divergence_min_calories:
        difference = abs(nutrients.calories - nutrients.macro_calories())
        if difference > nutrients.calories * limits.max_calorie_divergence:
            _logger.debug(
                "Macro/calorie mismatch: calories=%s macro_estimate=%s",
                nutrients.calories,
                nutrients.macro_calories(),
            )
            return False
    return True
