"""Shared helpers for catalog and state-machine tests."""

from __future__ import annotations

import asyncio
from collections import deque
from typing import Any, Deque, Dict, List

import httpx

from movie_explorer.models import DetailRecord, ResultItem, ResultPage, SearchQuery

CATALOG_URL = "https://www.omdbapi.com/"


def search_rows(count: int, *, title: str = "The Matrix") -> List[Dict[str, Any]]:
    """Catalog-shaped search rows; odd rows carry the "N/A" poster sentinel."""
    return [
        {
            "Title": f"{title} {i}",
            "Year": "1999",
            "imdbID": f"tt{i:07d}",
            "Type": "movie",
            "Poster": "N/A" if i % 2 else f"https://img.example.com/{i}.jpg",
        }
        for i in range(count)
    ]


def result_page(count: int, total: int, page: int = 1) -> ResultPage:
    items = [ResultItem.model_validate(row) for row in search_rows(count)]
    return ResultPage(items=items, total_count=total, page_index=page)


def detail_record(external_id: str = "tt0133093", **overrides: Any) -> DetailRecord:
    payload: Dict[str, Any] = {
        "Title": "The Matrix",
        "Year": "1999",
        "imdbID": external_id,
        "Type": "movie",
        "Poster": "https://img.example.com/matrix.jpg",
        "Plot": "A hacker learns the truth about reality.",
        "Actors": "Keanu Reeves, Laurence Fishburne",
        "Director": "Lana Wachowski, Lilly Wachowski",
        "Genre": "Action, Sci-Fi",
        "Runtime": "136 min",
        "Released": "31 Mar 1999",
        "imdbRating": "8.7",
        "imdbVotes": "2,000,000",
    }
    payload.update(overrides)
    return DetailRecord.model_validate(payload)


class Pending:
    """A catalog answer held back until release() is called."""

    def __init__(self, value: Any) -> None:
        self.value = value
        self.event = asyncio.Event()

    def release(self) -> None:
        self.event.set()


class FakeCatalog:
    """In-memory stand-in for OMDbClient that records every call."""

    def __init__(self) -> None:
        self.search_calls: List[SearchQuery] = []
        self.detail_calls: List[str] = []
        self.search_results: Deque[Any] = deque()
        self.detail_results: Deque[Any] = deque()

    async def search(self, query: SearchQuery) -> ResultPage:
        self.search_calls.append(query)
        return await self._answer(self.search_results)

    async def get_detail(self, external_id: str) -> DetailRecord:
        self.detail_calls.append(external_id)
        return await self._answer(self.detail_results)

    async def _answer(self, queue: Deque[Any]) -> Any:
        if not queue:
            raise RuntimeError("No stub answers configured")
        answer = queue.popleft()
        if isinstance(answer, Pending):
            await answer.event.wait()
            answer = answer.value
        if isinstance(answer, Exception):
            raise answer
        return answer


async def settle() -> None:
    """Let freshly created tasks run up to their first real suspension."""
    for _ in range(5):
        await asyncio.sleep(0)


def build_response(*, status: int = 200, json_data: Any | None = None, text: str | None = None) -> httpx.Response:
    request = httpx.Request("GET", CATALOG_URL)
    if text is not None:
        return httpx.Response(status_code=status, text=text, request=request)
    return httpx.Response(status_code=status, json=json_data if json_data is not None else {}, request=request)


def make_async_client(responses: Deque[Any], call_log: List[Dict[str, Any]]) -> type:
    """httpx.AsyncClient replacement that replays `responses` (or raises queued exceptions)."""

    class DummyAsyncClient:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            self.kwargs = kwargs

        async def __aenter__(self) -> "DummyAsyncClient":
            return self

        async def __aexit__(self, *args: Any) -> bool:
            return False

        async def get(self, url: str, **kwargs: Any) -> httpx.Response:
            call_log.append({"url": url, "params": dict(kwargs.get("params") or {})})
            if not responses:
                raise RuntimeError("No stub responses configured")
            answer = responses.popleft()
            if isinstance(answer, Exception):
                raise answer
            return answer

    return DummyAsyncClient
