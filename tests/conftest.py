"""Shared test fixtures."""

import json
from dataclasses import dataclass, field

import httpx
import pytest

from meal_ledger.adapters.gemini_client import HttpxGeminiClient
from meal_ledger.config import Settings
from meal_ledger.containers import AppContainer
from meal_ledger.domain.ledger import LoggedMeal
from meal_ledger.domain.nutrition import NutritionBreakdown
from meal_ledger.services.analysis import AnalysisService
from meal_ledger.services.ledger import Ledger
from meal_ledger.services.meals import MealLogService
from meal_ledger.services.retry import BackoffPolicy


def breakdown_payload(
    calories: float = 140,
    protein_g: float = 12,
    carbs_g: float = 1,
    fat_g: float = 10,
    items: list[dict[str, object]] | None = None,
) -> dict[str, object]:
    """Return a breakdown as the model would emit it."""
    if items is None:
        items = [
            {
                "name": "Egg",
                "quantity": "2 large",
                "calories": calories,
                "protein_g": protein_g,
                "carbs_g": carbs_g,
                "fat_g": fat_g,
            }
        ]
    return {
        "meal_summary": {
            "total_calories": calories,
            "total_protein_g": protein_g,
            "total_carbs_g": carbs_g,
            "total_fat_g": fat_g,
        },
        "food_items": items,
    }


def gemini_envelope(payload: dict[str, object] | str) -> dict[str, object]:
    """Wrap generated text the way generateContent returns it."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {
        "candidates": [
            {"content": {"parts": [{"text": text}], "role": "model"}},
        ]
    }


def make_meal(description: str, calories: float, **macros: float) -> LoggedMeal:
    """Build a logged meal with the given totals."""
    return LoggedMeal(
        description=description,
        analysis=NutritionBreakdown.model_validate(
            breakdown_payload(calories=calories, **macros)
        ),
    )


@dataclass
class ScriptedGemini:
    """Serves a fixed sequence of responses and records requests."""

    responses: list[httpx.Response | Exception]
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses[len(self.requests) - 1]
        if isinstance(response, Exception):
            raise response
        return response

    def client(self) -> HttpxGeminiClient:
        return HttpxGeminiClient(
            api_key="gemini-key",
            model="gemini-test",
            base_url="https://gemini.test/v1beta",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(self.handler)),
        )


def ok(payload: dict[str, object] | None = None) -> httpx.Response:
    """Successful generateContent response."""
    return httpx.Response(200, json=gemini_envelope(payload or breakdown_payload()))


@dataclass
class RecordingSleep:
    """Records requested delays instead of sleeping."""

    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def fixed_jitter(value: float = 0.5):  # type: ignore[no-untyped-def]
    """Return a jitter source that always yields ``value``."""

    def _jitter(low: float, high: float) -> float:
        assert low <= value <= high
        return value

    return _jitter


def make_analysis_service(
    gemini: ScriptedGemini, sleep: RecordingSleep, jitter: float = 0.5
) -> AnalysisService:
    return AnalysisService(
        client=gemini.client(),
        policy=BackoffPolicy(),
        sleep=sleep,
        jitter=fixed_jitter(jitter),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="gemini-key")


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def gemini() -> ScriptedGemini:
    return ScriptedGemini(responses=[])


@pytest.fixture
def container(
    settings: Settings, gemini: ScriptedGemini, sleep: RecordingSleep
) -> AppContainer:
    client = gemini.client()
    analysis_service = AnalysisService(
        client=client,
        policy=BackoffPolicy(),
        sleep=sleep,
        jitter=fixed_jitter(),
    )
    ledger = Ledger(
        calorie_goal=settings.default_calorie_goal,
        goal_policy=settings.goal_policy,
    )

    async def close_resources() -> None:
        await client.close()

    return AppContainer(
        settings=settings,
        analysis_service=analysis_service,
        ledger=ledger,
        meal_log_service=MealLogService(
            analysis_service=analysis_service, ledger=ledger
        ),
        close_resources=close_resources,
    )
