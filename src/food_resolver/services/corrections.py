"""Learning from user corrections of AI-detected foods."""

import logging
from dataclasses import dataclass

from food_resolver.domain.foods import FoodSource, NutrientProfile, NutrientRecord
from food_resolver.services.food_catalog import FoodCatalogService
from food_resolver.services.plausibility import (
    DEFAULT_LIMITS,
    PlausibilityLimits,
    verify,
)

_logger = logging.getLogger(__name__)


@dataclass
class CorrectionLearner:
    """Stores user corrections so later lookups of either name resolve locally."""

    catalog: FoodCatalogService
    limits: PlausibilityLimits = DEFAULT_LIMITS

    def learn(
        self,
        ai_detected_name: str,
        user_corrected_name: str,
        confirmed_nutrition: NutrientProfile,
    ) -> NutrientRecord:
        """Record the corrected food and alias the AI-detected name to it."""
        record = NutrientRecord.create(
            user_corrected_name,
            confirmed_nutrition,
            FoodSource.USER_CORRECTION,
            detected_by_ai=True,
        )
        if not verify(confirmed_nutrition, self.limits):
            _logger.warning(
                "Correction %r -> %r failed plausibility check; not stored",
                ai_detected_name,
                user_corrected_name,
            )
            return record.flagged_low_confidence()

        stored = self.catalog.upsert(record, overwrite=True)
        self.catalog.add_alias(ai_detected_name, stored)
        _logger.info("Learned correction: %r -> %r", ai_detected_name, stored.name)
        return stored
