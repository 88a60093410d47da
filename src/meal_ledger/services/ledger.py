"""In-memory meal ledger with derived totals."""

import logging
import math
import re
from dataclasses import dataclass, field

from meal_ledger.domain.errors import LedgerError, LedgerErrorKind
from meal_ledger.domain.ledger import (
    DEFAULT_CALORIE_GOAL,
    AggregateTotals,
    DashboardSnapshot,
    GoalPolicy,
    GoalProgress,
    LoggedMeal,
)

_LEADING_INT = re.compile(r"[+-]?\d+")

_logger = logging.getLogger(__name__)


@dataclass
class Ledger:
    """Ordered meal log plus the daily calorie goal.

    Not thread-safe: callers must serialize mutations.
    """

    calorie_goal: int = DEFAULT_CALORIE_GOAL
    goal_policy: GoalPolicy = GoalPolicy.PERMISSIVE
    _meals: list[LoggedMeal] = field(default_factory=list, init=False, repr=False)

    @property
    def meals(self) -> tuple[LoggedMeal, ...]:
        """Return the logged meals in insertion order."""
        return tuple(self._meals)

    def __len__(self) -> int:
        return len(self._meals)

    def add_meal(self, meal: LoggedMeal) -> None:
        """Append a meal to the end of the log."""
        self._meals.append(meal)
        _logger.debug("Logged meal #%s: %s", len(self._meals) - 1, meal.description)

    def remove_meal(self, index: int) -> LoggedMeal:
        """Remove and return the meal at ``index``."""
        if isinstance(index, bool) or not 0 <= index < len(self._meals):
            raise LedgerError(
                LedgerErrorKind.INDEX_OUT_OF_RANGE,
                f"No meal at index {index} (log has {len(self._meals)} meals)",
            )
        removed = self._meals.pop(index)
        _logger.debug("Removed meal #%s: %s", index, removed.description)
        return removed

    def clear(self) -> None:
        """Remove every meal from the log."""
        count = len(self._meals)
        self._meals.clear()
        _logger.info("Cleared meal log (%s meals)", count)

    def set_goal(self, value: object) -> int:
        """Set the calorie goal from raw input and return the stored value."""
        goal = coerce_goal(value)
        if goal is None:
            if self.goal_policy is GoalPolicy.STRICT:
                raise LedgerError(
                    LedgerErrorKind.INVALID_GOAL,
                    f"Calorie goal must be a non-negative integer, got {value!r}",
                )
            goal = 0
        self.calorie_goal = goal
        return goal

    def compute_totals(self) -> AggregateTotals:
        """Sum calories and macros across the meals currently logged."""
        calories = protein_g = carbs_g = fat_g = 0.0
        for meal in self._meals:
            summary = meal.analysis.summary
            calories += summary.total_calories
            protein_g += summary.total_protein_g
            carbs_g += summary.total_carbs_g
            fat_g += summary.total_fat_g
        return AggregateTotals(
            calories=calories, protein_g=protein_g, carbs_g=carbs_g, fat_g=fat_g
        )

    def compute_progress(self) -> GoalProgress:
        """Return calorie progress against the goal."""
        return _progress(self.compute_totals(), self.calorie_goal)

    def snapshot(self) -> DashboardSnapshot:
        """Return meals, totals and progress read at the same moment."""
        totals = self.compute_totals()
        return DashboardSnapshot(
            meals=self.meals,
            totals=totals,
            calorie_goal=self.calorie_goal,
            progress=_progress(totals, self.calorie_goal),
        )


def coerce_goal(value: object) -> int | None:
    """Read a calorie goal the way a form field is read.

    Integers pass through, floats truncate and strings use their leading
    integer, so ``"1800kcal"`` reads as 1800. Returns None when nothing
    usable is found or the result is negative.
    """
    if isinstance(value, bool):
        return None
    goal: int | None = None
    if isinstance(value, int):
        goal = value
    elif isinstance(value, float):
        goal = int(value) if math.isfinite(value) else None
    elif isinstance(value, str):
        match = _LEADING_INT.match(value.strip())
        goal = int(match.group()) if match else None
    if goal is None or goal < 0:
        return None
    return goal


def _progress(totals: AggregateTotals, calorie_goal: int) -> GoalProgress:
    if calorie_goal > 0:
        percent = min(100.0, 100.0 * totals.calories / calorie_goal)
    else:
        percent = 0.0
    return GoalProgress(percent=percent, over_goal=totals.calories > calorie_goal)
