"""Shared pytest fixtures: configured settings and a fake catalog."""

from __future__ import annotations

import pytest

from movie_explorer.config import settings
from tests.utils import FakeCatalog


@pytest.fixture(autouse=True)
def _configured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "omdb_api_key", "test-key")
    monkeypatch.setattr(settings, "catalog_api_base", "https://www.omdbapi.com/")
    monkeypatch.setattr(settings, "request_timeout_s", None)
    monkeypatch.setattr(settings, "retry_attempts", 1)


@pytest.fixture()
def catalog() -> FakeCatalog:
    return FakeCatalog()
