"""Models for structured nutrition estimates."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MealSummary(BaseModel):
    """Whole-meal calorie and macro totals."""

    model_config = ConfigDict(frozen=True)

    total_calories: float = Field(ge=0)
    total_protein_g: float = Field(ge=0)
    total_carbs_g: float = Field(ge=0)
    total_fat_g: float = Field(ge=0)


class FoodItem(BaseModel):
    """Single food identified in a meal description."""

    model_config = ConfigDict(frozen=True)

    name: str
    quantity: str
    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)


class NutritionBreakdown(BaseModel):
    """Structured output of a meal analysis.

    On the wire the summary and items are named ``meal_summary`` and
    ``food_items``; both names are accepted when constructing the model.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    summary: MealSummary = Field(alias="meal_summary")
    items: tuple[FoodItem, ...] = Field(alias="food_items")

    @model_validator(mode="after")
    def check_items_present(self) -> "NutritionBreakdown":
        if self.items:
            return self
        summary = self.summary
        if any(
            (
                summary.total_calories,
                summary.total_protein_g,
                summary.total_carbs_g,
                summary.total_fat_g,
            )
        ):
            raise ValueError("food_items is empty but meal_summary is not zero")
        return self
