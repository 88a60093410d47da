"""Meal logging pipeline."""

import logging
from dataclasses import dataclass

from meal_ledger.domain.errors import EmptyMealDescriptionError
from meal_ledger.domain.ledger import LoggedMeal
from meal_ledger.services.analysis import AnalysisService
from meal_ledger.services.ledger import Ledger

_logger = logging.getLogger(__name__)


@dataclass
class MealLogService:
    """Analyze a described meal and record it in the ledger."""

    analysis_service: AnalysisService
    ledger: Ledger

    async def log_meal(self, description: str) -> LoggedMeal:
        """Analyze ``description`` and append the result to the ledger.

        The ledger is left untouched when analysis fails.
        """
        cleaned = description.strip()
        if not cleaned:
            raise EmptyMealDescriptionError("Please enter a meal description.")
        analysis = await self.analysis_service.analyze(cleaned)
        meal = LoggedMeal(description=cleaned, analysis=analysis)
        self.ledger.add_meal(meal)
        _logger.info(
            "Logged meal: %s (%s items, %.0f kcal)",
            cleaned,
            len(analysis.items),
            analysis.summary.total_calories,
        )
        return meal
