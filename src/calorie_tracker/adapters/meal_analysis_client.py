"""HTTP client for the meal analysis endpoint."""

from dataclasses import dataclass
from typing import Any

import httpx

from calorie_tracker.domain.analysis import MealAnalysisRequest
from calorie_tracker.errors import MealAnalysisError
from calorie_tracker.services.analysis import MealAnalysisClient


@dataclass
class HttpxMealAnalysisClient(MealAnalysisClient):
    """HTTPX-backed meal analysis client."""

    url: str
    http_client: httpx.AsyncClient
    timeout: float = 60.0

    @classmethod
    def create(cls, url: str, timeout: float = 60.0) -> "HttpxMealAnalysisClient":
        """Create a client with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def analyze(self, request: MealAnalysisRequest) -> dict[str, Any]:
        """Post a request and return the decoded JSON body."""
        try:
            response = await self.http_client.post(
                self.url,
                json=request.model_dump(),
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise MealAnalysisError("Request timeout", MealAnalysisError.NETWORK) from exc
        except httpx.HTTPError as exc:
            raise MealAnalysisError(str(exc), MealAnalysisError.NETWORK) from exc

        if response.is_error:
            raise MealAnalysisError(
                f"Server error: {response.status_code}", MealAnalysisError.SERVER
            )
        if not response.text:
            raise MealAnalysisError(
                "Empty response from server", MealAnalysisError.DECODE
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise MealAnalysisError(
                "Invalid JSON response", MealAnalysisError.DECODE
            ) from exc
        if not isinstance(data, dict):
            raise MealAnalysisError(
                "Invalid response structure", MealAnalysisError.DECODE
            )
        return data

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
