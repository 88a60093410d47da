"""Request and response models for the HTTP API."""

from typing import Any

from pydantic import BaseModel

from meal_ledger.domain.ledger import DashboardSnapshot, LoggedMeal
from meal_ledger.domain.nutrition import NutritionBreakdown


class LogMealRequest(BaseModel):
    """Body of a meal logging request."""

    description: str


class SetGoalRequest(BaseModel):
    """Body of a calorie goal update; the raw form value is accepted."""

    goal: Any = None


class MealOut(BaseModel):
    """Logged meal with its position in the ledger."""

    index: int
    description: str
    analysis: NutritionBreakdown


class TotalsOut(BaseModel):
    """Aggregate totals across the ledger."""

    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float


class ProgressOut(BaseModel):
    """Calorie progress against the goal."""

    percent: float
    over_goal: bool


class GoalOut(BaseModel):
    """Stored calorie goal and the resulting progress."""

    calorie_goal: int
    progress: ProgressOut


class DashboardOut(BaseModel):
    """Full ledger state for rendering."""

    meals: list[MealOut]
    totals: TotalsOut
    calorie_goal: int
    progress: ProgressOut


def meal_out(index: int, meal: LoggedMeal) -> MealOut:
    """Convert a logged meal to its API shape."""
    return MealOut(index=index, description=meal.description, analysis=meal.analysis)


def dashboard_out(snapshot: DashboardSnapshot) -> DashboardOut:
    """Convert a ledger snapshot to its API shape."""
    return DashboardOut(
        meals=[meal_out(index, meal) for index, meal in enumerate(snapshot.meals)],
        totals=TotalsOut(
            calories=snapshot.totals.calories,
            protein_g=snapshot.totals.protein_g,
            carbs_g=snapshot.totals.carbs_g,
            fat_g=snapshot.totals.fat_g,
        ),
        calorie_goal=snapshot.calorie_goal,
        progress=ProgressOut(
            percent=snapshot.progress.percent,
            over_goal=snapshot.progress.over_goal,
        ),
    )
