"""
Display props for the result grid and the detail modal.

Catalog records keep "N/A" verbatim; the props built here resolve every such
field to None so a renderer only has to check for presence.
"""

from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field

from .models import DetailRecord, ResultItem, is_provided


def _shown(value: Optional[str]) -> Optional[str]:
    return value.strip() if is_provided(value) else None


class CardProps(BaseModel):
    external_id: str
    title: str
    year: Optional[str] = None
    content_type: Optional[str] = None
    poster_url: Optional[str] = None


class DetailProps(BaseModel):
    external_id: str
    title: str
    poster_url: Optional[str] = None
    rating: Optional[str] = None
    votes: Optional[str] = None
    year: Optional[str] = None
    released: Optional[str] = None
    runtime: Optional[str] = None
    content_type: Optional[str] = None
    genres: List[str] = Field(default_factory=list)
    plot: Optional[str] = None
    actors: Optional[str] = None
    director: Optional[str] = None


def card_props(item: ResultItem) -> CardProps:
    return CardProps(
        external_id=item.external_id,
        title=item.title,
        year=_shown(item.release_year),
        content_type=_shown(item.content_type),
        poster_url=item.poster_url,
    )


def detail_props(record: DetailRecord) -> DetailProps:
    rating: Optional[str] = _shown(record.imdb_rating)
    genre: Optional[str] = _shown(record.genre)
    return DetailProps(
        external_id=record.external_id,
        title=record.title,
        poster_url=record.poster_url,
        rating=rating,
        # vote count is only meaningful next to a rating
        votes=_shown(record.imdb_votes) if rating else None,
        year=_shown(record.release_year),
        released=_shown(record.released),
        runtime=_shown(record.runtime),
        content_type=_shown(record.content_type),
        genres=[g.strip() for g in genre.split(",") if g.strip()] if genre else [],
        plot=_shown(record.plot),
        actors=_shown(record.actors),
        director=_shown(record.director),
    )
