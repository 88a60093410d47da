"""Google Gemini generateContent API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from meal_ledger.domain.errors import AnalysisError, AnalysisErrorKind


class GenerationClient(Protocol):
    """Interface for structured text generation calls."""

    async def generate_content(self, payload: dict[str, object]) -> object:
        """Send a generation request and return the decoded JSON body.

        Non-2xx responses raise ``httpx.HTTPStatusError``.
        """


@dataclass
class HttpxGeminiClient(GenerationClient):
    """HTTPX-backed Gemini client."""

    api_key: str
    model: str
    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 30

    @classmethod
    def create(
        cls, api_key: str, model: str, base_url: str, timeout_seconds: float = 30
    ) -> "HttpxGeminiClient":
        """Create a Gemini client with a managed httpx session."""
        return cls(
            api_key=api_key,
            model=model,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def generate_content(self, payload: dict[str, object]) -> object:
        """Call the model's generateContent endpoint."""
        url = f"{self.base_url}/models/{self.model}:generateContent"
        try:
            response = await self.http_client.post(
                url,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout_seconds,
            )
        except httpx.DecodingError as exc:
            raise AnalysisError(
                AnalysisErrorKind.MALFORMED_ENVELOPE,
                "Gemini returned a response body that could not be decoded",
            ) from exc
        response.raise_for_status()
        try:
            return response.json()
        except (ValueError, RecursionError) as exc:
            raise AnalysisError(
                AnalysisErrorKind.MALFORMED_ENVELOPE,
                "Gemini returned a response body that is not JSON",
                status_code=response.status_code,
            ) from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
