"""Detail channel: opening, failure surfacing, closing and stale fetches."""

from __future__ import annotations

import asyncio

import pytest

from movie_explorer.exceptions import CatalogError
from movie_explorer.models import DetailStatus
from movie_explorer.services.detail_loader import DetailLoader
from movie_explorer.services.error_banner import ErrorBanner
from tests.utils import FakeCatalog, Pending, detail_record, settle


def _loader(catalog: FakeCatalog) -> DetailLoader:
    return DetailLoader(catalog, ErrorBanner())  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_select_opens_then_becomes_ready(catalog: FakeCatalog) -> None:
    pending = Pending(detail_record("tt0133093"))
    catalog.detail_results.append(pending)
    loader = _loader(catalog)

    task = asyncio.create_task(loader.select("tt0133093"))
    await settle()
    assert loader.status is DetailStatus.OPENING
    assert loader.modal_open and loader.loading

    pending.release()
    await task

    assert loader.status is DetailStatus.READY
    assert loader.record is not None and loader.record.external_id == "tt0133093"
    assert not loader.loading
    assert catalog.detail_calls == ["tt0133093"]


@pytest.mark.asyncio
async def test_new_selection_drops_previous_record_immediately(catalog: FakeCatalog) -> None:
    pending = Pending(detail_record("tt0234215"))
    catalog.detail_results.extend([detail_record("tt0133093"), pending])
    loader = _loader(catalog)
    await loader.select("tt0133093")

    task = asyncio.create_task(loader.select("tt0234215"))
    await settle()
    assert loader.record is None
    assert loader.status is DetailStatus.OPENING

    pending.release()
    await task
    assert loader.record is not None and loader.record.external_id == "tt0234215"


@pytest.mark.asyncio
async def test_failure_keeps_modal_open_and_reports_to_banner(catalog: FakeCatalog) -> None:
    catalog.detail_results.append(CatalogError("Incorrect IMDb ID."))
    loader = _loader(catalog)

    await loader.select("tt-bad")

    assert loader.status is DetailStatus.OPEN_FAILED
    assert loader.modal_open
    assert loader.record is None
    assert loader.banner.message == "Incorrect IMDb ID."


@pytest.mark.asyncio
async def test_close_from_ready(catalog: FakeCatalog) -> None:
    catalog.detail_results.append(detail_record())
    loader = _loader(catalog)
    await loader.select("tt0133093")

    loader.close()

    assert loader.status is DetailStatus.CLOSED
    assert loader.record is None
    assert not loader.modal_open


@pytest.mark.asyncio
async def test_close_from_open_failed(catalog: FakeCatalog) -> None:
    catalog.detail_results.append(CatalogError("Incorrect IMDb ID."))
    loader = _loader(catalog)
    await loader.select("tt-bad")

    loader.close()

    assert loader.status is DetailStatus.CLOSED
    assert loader.record is None


@pytest.mark.asyncio
async def test_close_while_opening_discards_late_response(catalog: FakeCatalog) -> None:
    pending = Pending(detail_record())
    catalog.detail_results.append(pending)
    loader = _loader(catalog)

    task = asyncio.create_task(loader.select("tt0133093"))
    await settle()
    loader.close()
    pending.release()
    await task

    assert loader.status is DetailStatus.CLOSED
    assert loader.record is None


@pytest.mark.asyncio
async def test_stale_detail_does_not_replace_newer_selection(catalog: FakeCatalog) -> None:
    slow = Pending(detail_record("tt0133093"))
    catalog.detail_results.extend([slow, detail_record("tt0234215")])
    loader = _loader(catalog)

    first = asyncio.create_task(loader.select("tt0133093"))
    await settle()
    await loader.select("tt0234215")
    slow.release()
    await first

    assert loader.record is not None and loader.record.external_id == "tt0234215"
    assert loader.status is DetailStatus.READY


@pytest.mark.asyncio
async def test_escape_closes_open_modal(catalog: FakeCatalog) -> None:
    catalog.detail_results.append(detail_record())
    loader = _loader(catalog)
    await loader.select("tt0133093")

    assert loader.handle_key("Enter") is False
    assert loader.status is DetailStatus.READY
    assert loader.handle_key("Escape") is True
    assert loader.status is DetailStatus.CLOSED


def test_escape_ignored_when_closed(catalog: FakeCatalog) -> None:
    loader = _loader(catalog)

    assert loader.handle_key("Escape") is False
