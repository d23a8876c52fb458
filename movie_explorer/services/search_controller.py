"""
Search/pagination state machine.

IDLE -> LOADING -> LOADED | EMPTY | FAILED, re-entering LOADING on every
submit or page change. Form edits never fetch; page changes reuse the filters
locked in at the last submit.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from ..clients.omdb import OMDbClient
from ..exceptions import CatalogClientError, ValidationError
from ..models import ListStatus, PaginationControls, ResultPage, SearchForm, SearchQuery
from .error_banner import ErrorBanner
from .pagination import build_controls

SEARCH_FAILED: str = "An error occurred while searching"


@dataclass
class ListState:
    form: SearchForm = field(default_factory=SearchForm)
    submitted: Optional[SearchQuery] = None
    current_page: int = 1
    result_page: Optional[ResultPage] = None
    status: ListStatus = ListStatus.IDLE
    error: Optional[str] = None
    seq: int = 0  # id of the latest issued search; older responses are dropped


class SearchController:
    """
    Owns the list channel: pending form, submitted query, current result page.
    """

    def __init__(self, client: OMDbClient, banner: Optional[ErrorBanner] = None) -> None:
        self.client = client
        self.banner = banner or ErrorBanner()
        self.state = ListState()

    # read-only view

    @property
    def status(self) -> ListStatus:
        return self.state.status

    @property
    def loading(self) -> bool:
        return self.state.status is ListStatus.LOADING

    @property
    def total_count(self) -> int:
        return self.state.result_page.total_count if self.state.result_page else 0

    @property
    def total_pages(self) -> int:
        return self.state.result_page.total_pages if self.state.result_page else 0

    def pagination(self) -> PaginationControls:
        return build_controls(self.state.current_page, self.total_pages, self.loading)

    # form edits

    def set_text(self, text: str) -> None:
        self._edit(text=text)

    def set_content_type(self, content_type: Optional[str]) -> None:
        self._edit(content_type=content_type)

    def set_year(self, year: Optional[str]) -> None:
        self._edit(year=year)

    def _edit(self, **changes: Any) -> None:
        values = self.state.form.model_dump()
        values.update(changes)
        try:
            self.state.form = SearchForm(**values)
        except PydanticValidationError as pe:
            raise ValidationError(pe.errors()[0]["msg"]) from pe

    # transitions

    async def submit(self) -> bool:
        """
        Search page 1 with the current form. Blank text is a no-op (returns False).
        """
        if not self.state.form.is_submittable:
            logger.debug("[Search] blank query ignored")
            return False
        query: SearchQuery = self.state.form.to_query(page=1)
        self.state.submitted = query
        self.state.current_page = 1
        await self._run(query)
        return True

    async def change_page(self, page: int) -> bool:
        """
        Re-run the submitted query at `page`. Out-of-range pages are ignored.
        """
        if self.state.submitted is None or not 1 <= page <= self.total_pages:
            logger.debug(f"[Search] page {page} rejected (total {self.total_pages})")
            return False
        await self._run(self.state.submitted.at_page(page))
        return True

    async def _run(self, query: SearchQuery) -> None:
        self.state.seq += 1
        seq: int = self.state.seq
        self.state.status = ListStatus.LOADING
        self.state.error = None
        self.banner.dismiss()
        logger.info(f"[Search] #{seq} '{query.text}' page={query.page}")

        try:
            page: ResultPage = await self.client.search(query)
        except CatalogClientError as e:
            if seq != self.state.seq:
                logger.debug(f"[Search] dropping stale failure #{seq}")
                return
            self._fail(e.message or SEARCH_FAILED)
            return

        if seq != self.state.seq:
            logger.debug(f"[Search] dropping stale response #{seq}")
            return
        self.state.result_page = page
        self.state.current_page = query.page
        self.state.status = ListStatus.LOADED if page.items else ListStatus.EMPTY

    def _fail(self, message: str) -> None:
        self.state.status = ListStatus.FAILED
        self.state.error = message
        self.state.result_page = None
        self.banner.publish(message)
