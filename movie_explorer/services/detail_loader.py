from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from loguru import logger

from ..clients.omdb import OMDbClient
from ..exceptions import CatalogClientError
from ..models import DetailRecord, DetailStatus
from .error_banner import ErrorBanner

DETAIL_FAILED: str = "Failed to load movie details"
CLOSE_KEYS = {"Escape"}


@dataclass
class DetailState:
    status: DetailStatus = DetailStatus.CLOSED
    external_id: Optional[str] = None
    record: Optional[DetailRecord] = None
    seq: int = 0


class DetailLoader:
    """
    Detail channel: CLOSED -> OPENING -> READY | OPEN_FAILED, back to CLOSED on close().
    Independent of the list channel; errors go to the shared banner.
    """

    def __init__(self, client: OMDbClient, banner: Optional[ErrorBanner] = None) -> None:
        self.client = client
        self.banner = banner or ErrorBanner()
        self.state = DetailState()

    @property
    def status(self) -> DetailStatus:
        return self.state.status

    @property
    def record(self) -> Optional[DetailRecord]:
        return self.state.record

    @property
    def modal_open(self) -> bool:
        return self.state.status is not DetailStatus.CLOSED

    @property
    def loading(self) -> bool:
        return self.state.status is DetailStatus.OPENING

    async def select(self, external_id: str) -> None:
        """
        Open the modal and fetch the record; the previous record is dropped first.
        """
        self.state.seq += 1
        seq: int = self.state.seq
        self.state.status = DetailStatus.OPENING
        self.state.external_id = external_id
        self.state.record = None
        logger.info(f"[Detail] #{seq} {external_id}")

        try:
            record: DetailRecord = await self.client.get_detail(external_id)
        except CatalogClientError as e:
            if seq != self.state.seq:
                return
            self.state.status = DetailStatus.OPEN_FAILED
            self.banner.publish(e.message or DETAIL_FAILED)
            return

        if seq != self.state.seq:
            logger.debug(f"[Detail] dropping stale response #{seq}")
            return
        self.state.record = record
        self.state.status = DetailStatus.READY

    def close(self) -> None:
        # bumping seq orphans any fetch still in flight
        self.state.seq += 1
        self.state.status = DetailStatus.CLOSED
        self.state.external_id = None
        self.state.record = None

    def handle_key(self, key: str) -> bool:
        """Escape closes an open modal. Returns True when the key was consumed."""
        if key in CLOSE_KEYS and self.modal_open:
            self.close()
            return True
        return False
