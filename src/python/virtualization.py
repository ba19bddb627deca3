"""
Virtualization: which slice of the axis is worth rendering.

`visible_range` is O(1) and stateless so it can be called on every frame.
The buffer keeps markers just outside the viewport mounted before they
scroll into view.
"""

from typing import Iterable

from custom_types import Marker, VisibleRange
from year_coordinates import YEAR_MAX, YEAR_MIN, pixel_to_year

BUFFER = 5


def visible_range(
    scroll_left: float,
    viewport_width: float,
    px_per_year: float,
    buffer: int = BUFFER,
) -> VisibleRange:
    """Inclusive year range covering the viewport plus `buffer` years each side."""
    raw_start = pixel_to_year(scroll_left, px_per_year) - buffer
    raw_end = pixel_to_year(scroll_left + viewport_width, px_per_year) + buffer
    return VisibleRange(
        start_year=max(YEAR_MIN, raw_start),
        end_year=min(YEAR_MAX, raw_end),
    )


def marker_year(marker: Marker) -> int | float | None:
    """Year of a mapping-style or attribute-style marker."""
    if isinstance(marker, dict) or hasattr(marker, "keys"):
        return marker.get("year")
    return getattr(marker, "year", None)


def marker_id(marker: Marker) -> object:
    if isinstance(marker, dict) or hasattr(marker, "keys"):
        return marker.get("id")
    return getattr(marker, "id", None)


def visible_markers(markers: Iterable[Marker], visible: VisibleRange) -> list[Marker]:
    """Markers whose year falls inside `visible`, in input order."""
    return [m for m in markers if marker_year(m) in visible]
