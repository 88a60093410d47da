"""Domain models for the daily meal ledger."""

from dataclasses import dataclass
from enum import StrEnum

from meal_ledger.domain.nutrition import NutritionBreakdown

DEFAULT_CALORIE_GOAL = 2000


class GoalPolicy(StrEnum):
    """How unreadable calorie goal input is handled."""

    PERMISSIVE = "permissive"
    STRICT = "strict"


@dataclass(frozen=True)
class LoggedMeal:
    """A described meal together with its analysis."""

    description: str
    analysis: NutritionBreakdown


@dataclass(frozen=True)
class AggregateTotals:
    """Totals across all meals currently in the ledger."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


@dataclass(frozen=True)
class GoalProgress:
    """Calorie progress against the goal."""

    percent: float
    over_goal: bool


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything a caller needs to render the ledger at one point in time."""

    meals: tuple[LoggedMeal, ...]
    totals: AggregateTotals
    calorie_goal: int
    progress: GoalProgress
