from __future__ import annotations
from typing import List, Optional

from ..clients.omdb import OMDbClient
from ..models import ViewState
from ..views import CardProps, DetailProps, card_props, detail_props
from .detail_loader import DetailLoader
from .error_banner import ErrorBanner
from .search_controller import SearchController


class ExplorerSession:
    """
    One user's search screen: list channel, detail channel and the shared banner.
    """

    def __init__(self, client: OMDbClient) -> None:
        self.banner: ErrorBanner = ErrorBanner()
        self.search: SearchController = SearchController(client, self.banner)
        self.detail: DetailLoader = DetailLoader(client, self.banner)

    def view_state(self) -> ViewState:
        s = self.search.state
        return ViewState(
            form=s.form,
            submitted_query=s.submitted,
            current_page=s.current_page,
            result_page=s.result_page,
            list_status=s.status,
            list_error=s.error,
            list_loading=self.search.loading,
            selected_detail=self.detail.record,
            detail_status=self.detail.status,
            detail_loading=self.detail.loading,
            modal_open=self.detail.modal_open,
            error=self.banner.message,
            pagination=self.search.pagination(),
        )

    def cards(self) -> List[CardProps]:
        page = self.search.state.result_page
        return [card_props(item) for item in page.items] if page else []

    def detail_props(self) -> Optional[DetailProps]:
        record = self.detail.record
        return detail_props(record) if record else None

    def dismiss_error(self) -> None:
        self.banner.dismiss()
