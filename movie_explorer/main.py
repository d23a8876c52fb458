from __future__ import annotations
import sys
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Path, Query
from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .clients.omdb import OMDbClient
from .config import settings
from .exceptions import CatalogClientError, CatalogError, ConfigurationError, TransportError, ValidationError
from .models import ContentType, DetailRecord, ResultPage, SearchQuery, ViewState
from .services.explorer import ExplorerSession
from .views import CardProps, DetailProps

_session: Optional[ExplorerSession] = None

def configure_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())

def get_session() -> ExplorerSession:
    """
    Process-wide session, built on first use. Fails closed without an API key.

    There is exactly one session per process, so the /session endpoints serve a
    single user: two browsers driving them share and overwrite the same
    search and detail state. The stateless /search and /titles endpoints are
    safe for any number of callers.
    """
    global _session
    if _session is None:
        _session = ExplorerSession(OMDbClient())
    return _session

def _http_error(e: CatalogClientError) -> HTTPException:
    """
    Map the error taxonomy onto HTTP status codes.
    """
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail=e.message)
    if isinstance(e, CatalogError):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=503, detail=e.message)
    if isinstance(e, TransportError):
        return HTTPException(status_code=502, detail=e.message)
    return HTTPException(status_code=500, detail=e.message)

def current_session() -> ExplorerSession:
    """Request dependency: the session, or 503 when the app is unconfigured."""
    try:
        return get_session()
    except ConfigurationError as e:
        raise _http_error(e) from e

def current_client(session: Annotated[ExplorerSession, Depends(current_session)]) -> OMDbClient:
    return session.search.client

@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    get_session()  # refuse to start without configuration
    logger.info(f"[App] {settings.app_name} ready, catalog at {settings.catalog_api_base}")
    yield

app: FastAPI = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

class SessionView(BaseModel):
    """
    Everything a front-end needs after any transition.
    """
    state: ViewState
    cards: List[CardProps]
    detail: Optional[DetailProps] = None

class FormPatch(BaseModel):
    text: Optional[str] = None
    content_type: Optional[str] = None
    year: Optional[str] = None

def _view(session: ExplorerSession) -> SessionView:
    return SessionView(state=session.view_state(), cards=session.cards(), detail=session.detail_props())

SessionDep = Annotated[ExplorerSession, Depends(current_session)]
ClientDep = Annotated[OMDbClient, Depends(current_client)]
ExternalId = Annotated[str, Path(..., pattern=r"^[\w-]{1,32}$", description="Catalog identifier (e.g. 'tt0133093')")]

@app.get("/health")
def health() -> Dict[str, str]:
    """Liveness check."""
    return {"status": "ok"}

# stateless passthrough

@app.get("/search", response_model=ResultPage)
async def search(
    client: ClientDep,
    s: Annotated[str, Query(..., min_length=1, max_length=200, description="Title text to search for")],
    content_type: Annotated[Optional[ContentType], Query(alias="type")] = None,
    y: Annotated[Optional[str], Query(pattern=r"^\d{4}$")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
) -> ResultPage:
    """
    One page of catalog results for `s`, filtered by type/year when given.
    """
    try:
        query = SearchQuery(text=s, content_type=content_type, year=y, page=page)
    except PydanticValidationError as pe:
        raise HTTPException(status_code=422, detail=pe.errors()[0]["msg"]) from pe
    try:
        return await client.search(query)
    except CatalogClientError as e:
        raise _http_error(e) from e

@app.get("/titles/{external_id}", response_model=DetailRecord)
async def title_detail(client: ClientDep, external_id: ExternalId) -> DetailRecord:
    """Full record for one title."""
    try:
        return await client.get_detail(external_id)
    except CatalogClientError as e:
        raise _http_error(e) from e

# session: the search screen's state machines

@app.get("/session", response_model=SessionView)
def session_state(session: SessionDep) -> SessionView:
    return _view(session)

@app.patch("/session/form", response_model=SessionView)
def edit_form(session: SessionDep, patch: FormPatch) -> SessionView:
    """
    Edit pending text/filters. Never fetches; fields left out are untouched.
    """
    try:
        if "text" in patch.model_fields_set:
            session.search.set_text(patch.text or "")
        if "content_type" in patch.model_fields_set:
            session.search.set_content_type(patch.content_type)
        if "year" in patch.model_fields_set:
            session.search.set_year(patch.year)
    except ValidationError as e:
        raise _http_error(e) from e
    return _view(session)

@app.post("/session/submit", response_model=SessionView)
async def submit(session: SessionDep) -> SessionView:
    await session.search.submit()
    return _view(session)

@app.post("/session/page/{page}", response_model=SessionView)
async def change_page(session: SessionDep, page: int) -> SessionView:
    await session.search.change_page(page)
    return _view(session)

@app.post("/session/detail/close", response_model=SessionView)
def close_detail(session: SessionDep) -> SessionView:
    session.detail.close()
    return _view(session)

@app.post("/session/detail/{external_id}", response_model=SessionView)
async def open_detail(session: SessionDep, external_id: ExternalId) -> SessionView:
    await session.detail.select(external_id)
    return _view(session)

@app.post("/session/keys/{key}", response_model=SessionView)
def key_press(session: SessionDep, key: str) -> SessionView:
    session.detail.handle_key(key)
    return _view(session)

@app.post("/session/error/dismiss", response_model=SessionView)
def dismiss_error(session: SessionDep) -> SessionView:
    session.dismiss_error()
    return _view(session)
