"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from calorie_tracker.adapters.meal_analysis_client import HttpxMealAnalysisClient
from calorie_tracker.domain.analysis import MealAnalysisRequest
from calorie_tracker.errors import MealAnalysisError

URL = "https://analysis.test/calories"


def _client(handler) -> HttpxMealAnalysisClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    async_client = httpx.AsyncClient(transport=transport)
    return HttpxMealAnalysisClient(url=URL, http_client=async_client, timeout=5)


def test_analysis_client_posts_request() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == URL
        seen.append(json.loads(request.content.decode()))
        return httpx.Response(
            200, json={"title": "Salad", "health": 8, "ingredients": []}
        )

    client = _client(handler)
    result = asyncio.run(
        client.analyze(MealAnalysisRequest(text="salad", locale="en_US"))
    )

    assert result["title"] == "Salad"
    assert seen == [
        {"text": "salad", "image": None, "previous": None, "locale": "en_US"}
    ]


def test_analysis_client_server_error() -> None:
    client = _client(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(MealAnalysisError) as exc_info:
        asyncio.run(client.analyze(MealAnalysisRequest(text="x", locale="en_US")))

    assert exc_info.value.code == MealAnalysisError.SERVER
    assert str(exc_info.value) == "Server error: 503"


def test_analysis_client_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = _client(handler)

    with pytest.raises(MealAnalysisError) as exc_info:
        asyncio.run(client.analyze(MealAnalysisRequest(text="x", locale="en_US")))

    assert exc_info.value.code == MealAnalysisError.NETWORK
    assert str(exc_info.value) == "Request timeout"


def test_analysis_client_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)

    with pytest.raises(MealAnalysisError) as exc_info:
        asyncio.run(client.analyze(MealAnalysisRequest(text="x", locale="en_US")))

    assert exc_info.value.code == MealAnalysisError.NETWORK


@pytest.mark.parametrize("body", ["", "not json", "[1, 2]"])
def test_analysis_client_decode_errors(body: str) -> None:
    client = _client(lambda request: httpx.Response(200, text=body))

    with pytest.raises(MealAnalysisError) as exc_info:
        asyncio.run(client.analyze(MealAnalysisRequest(text="x", locale="en_US")))

    assert exc_info.value.code == MealAnalysisError.DECODE


def test_analysis_client_close() -> None:
    client = _client(lambda request: httpx.Response(200, json={}))

    asyncio.run(client.close())

    assert client.http_client.is_closed
