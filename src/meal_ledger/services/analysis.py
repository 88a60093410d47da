"""Meal analysis service backed by a structured-output LLM."""

import asyncio
import json
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from http import HTTPStatus

import httpx
from pydantic import ValidationError

from meal_ledger.adapters.gemini_client import GenerationClient
from meal_ledger.domain.errors import AnalysisError, AnalysisErrorKind
from meal_ledger.domain.nutrition import NutritionBreakdown
from meal_ledger.services.retry import BackoffPolicy, RetryState

SYSTEM_PROMPT = (
    "You are an expert nutrition analysis AI. Analyze the user's meal "
    "description and provide a detailed nutritional breakdown for each food "
    "item. Return the data as a valid JSON object that adheres to the provided "
    "schema. Estimate quantities if they are not specified. Calculate the total "
    "nutrition for the entire meal."
)

NUTRITION_SCHEMA: dict[str, object] = {
    "type": "OBJECT",
    "properties": {
        "meal_summary": {
            "type": "OBJECT",
            "properties": {
                "total_calories": {"type": "NUMBER"},
                "total_protein_g": {"type": "NUMBER"},
                "total_carbs_g": {"type": "NUMBER"},
                "total_fat_g": {"type": "NUMBER"},
            },
            "required": [
                "total_calories",
                "total_protein_g",
                "total_carbs_g",
                "total_fat_g",
            ],
        },
        "food_items": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {
                        "type": "STRING",
                        "description": "Name of the food item",
                    },
                    "quantity": {
                        "type": "STRING",
                        "description": (
                            "Estimated quantity, e.g., '2 slices' or '1 cup'"
                        ),
                    },
                    "calories": {"type": "NUMBER"},
                    "protein_g": {"type": "NUMBER"},
                    "carbs_g": {"type": "NUMBER"},
                    "fat_g": {"type": "NUMBER"},
                },
                "required": [
                    "name",
                    "quantity",
                    "calories",
                    "protein_g",
                    "carbs_g",
                    "fat_g",
                ],
            },
        },
    },
    "required": ["meal_summary", "food_items"],
}

_logger = logging.getLogger(__name__)


@dataclass
class AnalysisService:
    """Turns free-text meal descriptions into nutrition breakdowns.

    Holds no per-call state, so one instance can serve concurrent callers.
    """

    client: GenerationClient
    policy: BackoffPolicy = field(default_factory=BackoffPolicy)
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    jitter: Callable[[float, float], float] = random.uniform

    async def analyze(self, description: str) -> NutritionBreakdown:
        """Analyze a non-empty meal description."""
        payload = build_request(description)
        envelope = await self._call_with_retry(payload)
        text = extract_text(envelope)
        return parse_breakdown(text)

    async def _call_with_retry(self, payload: dict[str, object]) -> object:
        """Send the request, backing off on throttling and server faults."""
        state = RetryState(self.policy)
        while True:
            state.begin_attempt()
            try:
                envelope = await self.client.generate_content(payload)
            except httpx.HTTPStatusError as exc:
                status_code = exc.response.status_code
                if not is_transient_status(status_code):
                    state.fail()
                    _logger.warning(
                        "Meal analysis rejected (attempt %s, status=%s)",
                        state.attempts,
                        status_code,
                    )
                    raise AnalysisError(
                        AnalysisErrorKind.CLIENT_REJECTED,
                        f"Analysis request rejected with status {status_code}",
                        status_code=status_code,
                        attempts=state.attempts,
                    ) from exc
                last_error: Exception = exc
                last_status: int | None = status_code
            except httpx.TransportError as exc:
                last_error = exc
                last_status = None
            except AnalysisError as exc:
                state.fail()
                exc.attempts = state.attempts
                raise
            else:
                state.succeed()
                return envelope

            delay = state.record_transient_failure(
                self.jitter(0, self.policy.max_jitter_seconds)
            )
            if delay is None:
                _logger.warning(
                    "Meal analysis gave up after %s attempts (last status=%s)",
                    state.attempts,
                    last_status or "n/a",
                )
                raise AnalysisError(
                    AnalysisErrorKind.EXHAUSTED_RETRIES,
                    f"Analysis request failed after {state.attempts} attempts",
                    status_code=last_status,
                    attempts=state.attempts,
                ) from last_error
            _logger.warning(
                "Meal analysis failed (attempt %s/%s, status=%s): %s; "
                "retrying in %.2fs",
                state.attempts,
                self.policy.max_attempts,
                last_status or "n/a",
                last_error,
                delay,
            )
            await self.sleep(delay)


def is_transient_status(status_code: int) -> bool:
    """Return True for throttling and server-side faults."""
    return (
        status_code == HTTPStatus.TOO_MANY_REQUESTS
        or status_code >= HTTPStatus.INTERNAL_SERVER_ERROR
    )


def build_request(description: str) -> dict[str, object]:
    """Build the generateContent payload for a meal description."""
    return {
        "contents": [{"parts": [{"text": f'Analyze this meal: "{description}"'}]}],
        "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": NUTRITION_SCHEMA,
        },
    }


def extract_text(envelope: object) -> str:
    """Return the generated text from a generateContent response."""
    try:
        candidate = envelope["candidates"][0]  # type: ignore[index]
        text = candidate["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        _logger.error("Unexpected analysis response structure: %s", _shape(envelope))
        raise AnalysisError(
            AnalysisErrorKind.MALFORMED_ENVELOPE,
            "Analysis response has no generated text",
        ) from exc
    if not isinstance(text, str) or not text:
        _logger.error("Analysis response text is empty or not a string")
        raise AnalysisError(
            AnalysisErrorKind.MALFORMED_ENVELOPE,
            "Analysis response has no generated text",
        )
    return text


def parse_breakdown(text: str) -> NutritionBreakdown:
    """Parse generated JSON text into a nutrition breakdown."""
    try:
        return NutritionBreakdown.model_validate(json.loads(text))
    except (ValueError, ValidationError, RecursionError) as exc:
        _logger.error("Could not parse nutrition breakdown: %s", exc)
        raise AnalysisError(
            AnalysisErrorKind.MALFORMED_PAYLOAD,
            "Could not parse the nutritional data from the analysis response",
        ) from exc


def _shape(value: object) -> object:
    """Describe a JSON value by its keys only, for logging."""
    if isinstance(value, dict):
        return {key: _shape(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_shape(item) for item in value[:1]]
    return type(value).__name__
