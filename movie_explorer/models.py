from __future__ import annotations
import math
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from pydantic import AliasChoices, BaseModel, Field, computed_field, field_validator

from .exceptions import ValidationError

NOT_AVAILABLE: str = "N/A"           # catalog sentinel for "field not provided"
PAGE_SIZE: int = 10                  # the catalog always pages by ten
ELLIPSIS: str = "..."
_YEAR_RE = re.compile(r"^\d{4}$")
_MISSING_POSTERS = {"", NOT_AVAILABLE, "undefined"}

def is_provided(value: Any) -> bool:
    """
    True when a catalog field carries a real value (not None, blank or "N/A").
    """
    if value is None:
        return False
    text: str = str(value).strip()
    return bool(text) and text != NOT_AVAILABLE

def check_year(value: Any) -> Optional[str]:
    """
    Normalize a year filter: blank means unset, otherwise exactly four digits.
    """
    if value is None:
        return None
    text: str = str(value).strip()
    if not text:
        return None
    if not _YEAR_RE.match(text):
        raise ValueError(f"year must be a 4-digit number, got {text!r}")
    return text

def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class ContentType(str, Enum):
    MOVIE = "movie"
    SERIES = "series"


class ListStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    FAILED = "failed"


class DetailStatus(str, Enum):
    CLOSED = "closed"
    OPENING = "opening"
    READY = "ready"
    OPEN_FAILED = "open_failed"


class SearchForm(BaseModel):
    """
    Pending, user-editable search fields. Editing never triggers a fetch.
    """
    text: str = ""
    content_type: Optional[ContentType] = None
    year: Optional[str] = None

    @field_validator("content_type", mode="before")
    @classmethod
    def _blank_type(cls, v: Any) -> Any:
        return None if v in ("", None) else v

    @field_validator("year", mode="before")
    @classmethod
    def _year(cls, v: Any) -> Optional[str]:
        return check_year(v)

    @property
    def is_submittable(self) -> bool:
        return bool(self.text.strip())

    def to_query(self, page: int = 1) -> SearchQuery:
        """
        Lock the form into a submittable query. Blank text is rejected here.
        """
        if not self.is_submittable:
            raise ValidationError("Search text must not be empty")
        return SearchQuery(text=self.text, content_type=self.content_type, year=self.year, page=page)


class SearchQuery(BaseModel):
    """
    A submitted query: trimmed non-empty text, optional filters, 1-based page.
    """
    text: str
    content_type: Optional[ContentType] = None
    year: Optional[str] = None
    page: int = Field(default=1, ge=1)

    model_config: Dict[str, Any] = {"frozen": True}

    @field_validator("text")
    @classmethod
    def _text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("search text must not be empty")
        return v

    @field_validator("content_type", mode="before")
    @classmethod
    def _blank_type(cls, v: Any) -> Any:
        return None if v in ("", None) else v

    @field_validator("year", mode="before")
    @classmethod
    def _year(cls, v: Any) -> Optional[str]:
        return check_year(v)

    def at_page(self, page: int) -> SearchQuery:
        """Same text and filters, different page."""
        return SearchQuery(text=self.text, content_type=self.content_type, year=self.year, page=page)

    def to_params(self) -> Dict[str, str]:
        """
        Catalog query parameters; unset filters are left out entirely.
        """
        params: Dict[str, str] = {"s": self.text}
        if self.content_type is not None:
            params["type"] = self.content_type.value
        if self.year is not None:
            params["y"] = self.year
        params["page"] = str(self.page)
        return params


class ResultItem(BaseModel):
    """
    One search hit, in the catalog's own terms.
    """
    external_id: str = Field(validation_alias=_alias("imdbID", "external_id"))
    title: str = Field(validation_alias=_alias("Title", "title"))
    release_year: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Year", "release_year"))
    content_type: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Type", "content_type"))
    poster: Optional[str] = Field(default=None, validation_alias=_alias("Poster", "poster"))

    @property
    def poster_url(self) -> Optional[str]:
        """Poster link, or None when the catalog has no image for this title."""
        if self.poster is None or self.poster.strip() in _MISSING_POSTERS:
            return None
        return self.poster.strip()


class Rating(BaseModel):
    source: str = Field(validation_alias=_alias("Source", "source"))
    value: str = Field(validation_alias=_alias("Value", "value"))


class DetailRecord(ResultItem):
    """
    Full record for one title. "N/A" is kept verbatim; use is_provided() to test.
    """
    plot: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Plot", "plot"))
    actors: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Actors", "actors"))
    director: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Director", "director"))
    writer: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Writer", "writer"))
    genre: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Genre", "genre"))
    runtime: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Runtime", "runtime"))
    rated: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Rated", "rated"))
    released: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Released", "released"))
    language: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Language", "language"))
    country: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Country", "country"))
    awards: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("Awards", "awards"))
    imdb_rating: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("imdbRating", "imdb_rating"))
    imdb_votes: str = Field(default=NOT_AVAILABLE, validation_alias=_alias("imdbVotes", "imdb_votes"))
    ratings: List[Rating] = Field(default_factory=list, validation_alias=_alias("Ratings", "ratings"))

    # Metascore, BoxOffice, totalSeasons, ... pass through untouched
    model_config: Dict[str, Any] = {"extra": "allow"}


class ResultPage(BaseModel):
    """
    One page of search results, replaced wholesale on every search.
    """
    items: List[ResultItem] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    page_index: int = Field(default=1, ge=1)

    @computed_field  # type: ignore[misc]
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / PAGE_SIZE)


class PaginationControls(BaseModel):
    """
    What the page bar shows and which of its buttons are usable.
    """
    pages: List[Union[int, str]] = Field(default_factory=list)
    current_page: int = 1
    total_pages: int = 0
    visible: bool = False
    prev_disabled: bool = True
    next_disabled: bool = True
    pages_disabled: bool = False


class ViewState(BaseModel):
    """
    Snapshot of everything the view layer needs to render.
    """
    form: SearchForm
    submitted_query: Optional[SearchQuery] = None
    current_page: int = 1
    result_page: Optional[ResultPage] = None
    list_status: ListStatus = ListStatus.IDLE
    list_error: Optional[str] = None
    list_loading: bool = False
    selected_detail: Optional[DetailRecord] = None
    detail_status: DetailStatus = DetailStatus.CLOSED
    detail_loading: bool = False
    modal_open: bool = False
    error: Optional[str] = None
    pagination: PaginationControls = Field(default_factory=PaginationControls)
