from __future__ import annotations
from typing import Any, Dict, List, Optional
import httpx
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter
from ..config import settings
from ..exceptions import CatalogError, TransportError, ValidationError
from ..models import DetailRecord, ResultItem, ResultPage, SearchQuery

GENERIC_ERROR: str = "Unknown error occurred"

def _total_count(raw: Any) -> int:
    """
    totalResults arrives string-encoded; anything unparsable counts as zero.
    """
    try:
        return max(0, int(str(raw).strip()))
    except (TypeError, ValueError):
        return 0

def _redact(params: Dict[str, str]) -> Dict[str, str]:
    return {k: ("***" if k == "apikey" else v) for k, v in params.items()}

class OMDbClient:
    """
    Minimal typed adapter for the OMDb catalog (key as query param).
    """

    def __init__(self, api_key: Optional[str] = None, base: Optional[str] = None) -> None:
        self.base: str = base or settings.catalog_api_base
        self.api_key: str = (api_key or "").strip() or settings.require_api_key()
        self.timeout: httpx.Timeout = httpx.Timeout(settings.request_timeout_s)
        self.attempts: int = max(1, settings.retry_attempts)

    def _headers(self) -> Dict[str, str]:
        """
        The catalog answers JSON; say so on every call.
        """
        return {"Accept": "application/json"}

    def _params(self) -> Dict[str, str]:
        """
        OMDb takes its key as a query parameter, not a header.
        """
        return {"apikey": self.api_key}

    async def search(self, query: SearchQuery) -> ResultPage:
        """
        Paged text search. Filters the query leaves unset are not sent at all.
        """
        if not query.text.strip():
            raise ValidationError("Search text must not be empty")
        payload: Dict[str, Any] = await self._get(query.to_params())
        rows: List[Dict[str, Any]] = payload.get("Search") or []
        try:
            items: List[ResultItem] = [ResultItem.model_validate(row) for row in rows]
        except PydanticValidationError as pe:
            raise TransportError(f"Malformed search result: {pe.error_count()} invalid field(s)") from pe
        return ResultPage(items=items, total_count=_total_count(payload.get("totalResults")), page_index=query.page)

    async def get_detail(self, external_id: str) -> DetailRecord:
        """
        Full-length record for one title.
        """
        ident: str = (external_id or "").strip()
        if not ident:
            raise ValidationError("External identifier must not be empty")
        payload: Dict[str, Any] = await self._get({"i": ident, "plot": "full"})
        try:
            return DetailRecord.model_validate(payload)
        except PydanticValidationError as pe:
            raise TransportError(f"Malformed detail record: {pe.error_count()} invalid field(s)") from pe

    async def _get(self, query: Dict[str, str]) -> Dict[str, Any]:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential_jitter(0.1, 0.6),
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        ):
            with attempt:
                return await self._fetch(query)
        raise TransportError("Catalog request was not attempted")

    async def _fetch(self, query: Dict[str, str]) -> Dict[str, Any]:
        params: Dict[str, str] = dict(query)
        params.update(self._params())
        logger.debug(f"[OMDb] GET {self.base} {_redact(params)}")
        async with httpx.AsyncClient(timeout=self.timeout, headers=self._headers()) as client:
            try:
                r: httpx.Response = await client.get(self.base, params=params)
            except httpx.HTTPError as he:
                logger.warning(f"[OMDb] transport failure: {he}")
                raise TransportError(f"Network error: {he}") from he
        if not 200 <= r.status_code < 300:
            logger.warning(f"[OMDb] HTTP {r.status_code} for {_redact(params)}")
            raise TransportError(f"HTTP error! status: {r.status_code}", status_code=r.status_code)
        try:
            payload: Any = r.json()
        except ValueError as ve:
            raise TransportError("Catalog returned a non-JSON body", status_code=r.status_code) from ve
        if not isinstance(payload, dict):
            raise TransportError("Catalog returned an unexpected body", status_code=r.status_code)

        if payload.get("Response") == "False":
            message: str = payload.get("Error") or GENERIC_ERROR
            logger.info(f"[OMDb] catalog reported: {message}")
            raise CatalogError(message)
        payload.pop("Response", None)
        payload.pop("Error", None)
        return payload
