from __future__ import annotations
from typing import List, Union
from ..models import ELLIPSIS, PaginationControls

WINDOW: int = 2  # pages shown on each side of the current one

def visible_pages(current: int, total: int) -> List[Union[int, str]]:
    """
    Page bar entries: first and last page always, a window around `current`
    clipped to [2, total-1], and one ELLIPSIS for each gap wider than a page.
    """
    if total <= 0:
        return []
    if total == 1:
        return [1]
    window: List[int] = list(range(max(2, current - WINDOW), min(total - 1, current + WINDOW) + 1))
    pages: List[Union[int, str]] = [1]
    if current - WINDOW > 2:
        pages.append(ELLIPSIS)
    pages.extend(window)
    if current + WINDOW < total - 1:
        pages.append(ELLIPSIS)
    pages.append(total)
    return pages

def build_controls(current: int, total: int, loading: bool) -> PaginationControls:
    """Page bar plus the enabled/disabled state of every control."""
    return PaginationControls(
        pages=visible_pages(current, total),
        current_page=current,
        total_pages=total,
        visible=total > 1,
        prev_disabled=loading or current <= 1,
        next_disabled=loading or current >= total,
        pages_disabled=loading,
    )
