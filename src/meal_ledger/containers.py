"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from meal_ledger.adapters.gemini_client import HttpxGeminiClient
from meal_ledger.config import Settings
from meal_ledger.services.analysis import AnalysisService
from meal_ledger.services.ledger import Ledger
from meal_ledger.services.meals import MealLogService
from meal_ledger.services.retry import BackoffPolicy


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    analysis_service: AnalysisService
    ledger: Ledger
    meal_log_service: MealLogService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    gemini_client = HttpxGeminiClient.create(
        api_key=resolved_settings.gemini_api_key,
        model=resolved_settings.gemini_model,
        base_url=resolved_settings.gemini_base_url,
        timeout_seconds=resolved_settings.gemini_timeout_seconds,
    )
    analysis_service = AnalysisService(
        client=gemini_client,
        policy=BackoffPolicy(
            max_attempts=resolved_settings.analysis_max_attempts,
            base_delay_seconds=resolved_settings.analysis_base_delay_seconds,
            max_jitter_seconds=resolved_settings.analysis_max_jitter_seconds,
        ),
    )
    ledger = Ledger(
        calorie_goal=resolved_settings.default_calorie_goal,
        goal_policy=resolved_settings.goal_policy,
    )
    meal_log_service = MealLogService(analysis_service=analysis_service, ledger=ledger)

    async def close_resources() -> None:
        await gemini_client.close()

    return AppContainer(
        settings=resolved_settings,
        analysis_service=analysis_service,
        ledger=ledger,
        meal_log_service=meal_log_service,
        close_resources=close_resources,
    )
