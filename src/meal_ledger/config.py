"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_ledger.domain.ledger import DEFAULT_CALORIE_GOAL, GoalPolicy

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    gemini_api_key: str
    gemini_model: str = "gemini-2.5-flash-preview-05-20"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 30
    analysis_max_attempts: int = Field(default=5, ge=1)
    analysis_base_delay_seconds: float = Field(default=1.0, ge=0)
    analysis_max_jitter_seconds: float = Field(default=1.0, ge=0)
    default_calorie_goal: int = Field(default=DEFAULT_CALORIE_GOAL, ge=0)
    goal_policy: GoalPolicy = GoalPolicy.PERMISSIVE
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
