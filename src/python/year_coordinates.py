"""
Year coordinates: the year <-> pixel transform and year-label formatting.

The axis is one contiguous integer line with no year zero. Internal year
``Y`` is astronomical year ``Y + 1``: ``-1`` is 1 BC, ``0`` is 1 AD. Pixel
offsets are measured from the left edge of year ``YEAR_MIN`` at a given
scale (pixels per year).

All functions here are pure. ``format_year`` and ``parse_year`` are the
only places where the astronomical offset is applied.
"""

import logging
import math
import re
from typing import Iterable

import numpy as np

from custom_types import PixelArray, YearArray
from enums import YearNotation, ZoomBand

logger = logging.getLogger(__name__)

YEAR_MIN = -4000
YEAR_MAX = 2025
TOTAL_YEARS = YEAR_MAX - YEAR_MIN + 1

MIN_PX_PER_YEAR = 1.0
MAX_PX_PER_YEAR = 500.0
LOG_MIN_PX_PER_YEAR = math.log(MIN_PX_PER_YEAR)
LOG_MAX_PX_PER_YEAR = math.log(MAX_PX_PER_YEAR)

HIJRA_YEAR = 622
HIJRI_RATIO = 1.030684

# Absorbs the last-ulp error of (year * scale) / scale before flooring
_FLOOR_SLACK = 1e-9

# (min pxPerYear, band, label interval, tick interval), densest first
BAND_TABLE: tuple[tuple[float, ZoomBand, int, int], ...] = (
    (100.0, ZoomBand.YEARS, 1, 1),
    (10.0, ZoomBand.DECADES, 10, 5),
    (1.0, ZoomBand.CENTURIES, 100, 50),
    (0.0, ZoomBand.OVERVIEW, 1000, 500),
)

_YEAR_TEXT = re.compile(r"^([+-]?\d+)\s*(BCE|BC|CE|AD|AH|BH)?$")


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)


def clamp_year(year: float) -> float:
    """Clamp a (possibly fractional) year into [YEAR_MIN, YEAR_MAX]."""
    return max(YEAR_MIN, min(YEAR_MAX, year))


def clamp_scale(px_per_year: float) -> float:
    """Clamp a scale into [MIN_PX_PER_YEAR, MAX_PX_PER_YEAR]."""
    return max(MIN_PX_PER_YEAR, min(MAX_PX_PER_YEAR, px_per_year))


def clamp_log_scale(log_scale: float) -> float:
    """Clamp a natural-log scale into the log of the zoom bounds."""
    return max(LOG_MIN_PX_PER_YEAR, min(LOG_MAX_PX_PER_YEAR, log_scale))


def scale_from_log(log_scale: float) -> float:
    """Inverse of ln(scale); the zoom bounds come back exactly."""
    if log_scale >= LOG_MAX_PX_PER_YEAR:
        return MAX_PX_PER_YEAR
    if log_scale <= LOG_MIN_PX_PER_YEAR:
        return MIN_PX_PER_YEAR
    return clamp_scale(math.exp(log_scale))


def year_to_pixel(year: float, px_per_year: float) -> float:
    """Pixel offset of the left edge of `year`."""
    return (year - YEAR_MIN) * px_per_year


def pixel_to_year(px: float, px_per_year: float) -> int:
    """Discrete year containing pixel offset `px`."""
    return math.floor(px / px_per_year + _FLOOR_SLACK) + YEAR_MIN


def pixel_to_year_continuous(px: float, px_per_year: float) -> float:
    """Fractional year at pixel offset `px`; floor it only for display."""
    return px / px_per_year + YEAR_MIN


def total_width(px_per_year: float) -> float:
    """Width of the whole axis in pixels."""
    return TOTAL_YEARS * px_per_year


def years_to_pixels(years: Iterable[float] | np.ndarray, px_per_year: float) -> PixelArray:
    """Vectorised `year_to_pixel` for an array of years."""
    arr = np.asarray(years, dtype=np.float64)
    return (arr - YEAR_MIN) * px_per_year


def center_year_for(scroll_left: float, viewport_width: float, px_per_year: float) -> int:
    """Year under the viewport center."""
    return pixel_to_year(scroll_left + viewport_width / 2, px_per_year)


def hovered_year(scroll_left: float, pointer_x: float | None, px_per_year: float) -> int | None:
    """Year under a viewport-relative pointer, or None when there is no pointer."""
    if pointer_x is None:
        return None
    return int(clamp_year(pixel_to_year(scroll_left + pointer_x, px_per_year)))


# ----------------------------------------------------------------------------
# Density bands
# ----------------------------------------------------------------------------

def _band_row(px_per_year: float) -> tuple[float, ZoomBand, int, int]:
    for row in BAND_TABLE:
        if px_per_year >= row[0]:
            return row
    return BAND_TABLE[-1]


def zoom_band(px_per_year: float) -> ZoomBand:
    """Density band for a scale."""
    return _band_row(px_per_year)[1]


def label_interval(px_per_year: float) -> int:
    """Years between labelled ticks."""
    return _band_row(px_per_year)[2]


def tick_interval(px_per_year: float) -> int:
    """Years between ticks (minor ticks included)."""
    return _band_row(px_per_year)[3]


def is_label_year(year: int, px_per_year: float) -> bool:
    return year % label_interval(px_per_year) == 0


def tick_years(start_year: int, end_year: int, px_per_year: float) -> YearArray:
    """Tick-aligned years inside the inclusive range [start_year, end_year]."""
    if end_year < start_year:
        return np.empty(0, dtype=np.int64)
    step = tick_interval(px_per_year)
    first = math.ceil(start_year / step) * step
    return np.arange(first, end_year + 1, step, dtype=np.int64)


def dot_radius(px_per_year: float) -> int:
    """Marker dot radius in pixels for the current scale."""
    if px_per_year >= 100:
        return 5
    if px_per_year >= 15:
        return 3
    return 2


# ----------------------------------------------------------------------------
# Labels
# ----------------------------------------------------------------------------

def astronomical_year(year: int) -> int:
    """Astronomical year number (1 BC is 0) for an internal year."""
    return year + 1


def to_hijri(year: int) -> tuple[int, str]:
    """Approximate Hijri year and era suffix ("AH" or "BH")."""
    astro = astronomical_year(year)
    if astro >= HIJRA_YEAR:
        return round_half_up((astro - HIJRA_YEAR) * HIJRI_RATIO) + 1, "AH"
    return max(1, round_half_up((HIJRA_YEAR - astro) * HIJRI_RATIO)), "BH"


def format_year(year: int, notation: YearNotation | str = YearNotation.BC_AD) -> str:
    """Render an internal year under one of the three notations.

    year < 0  -> "|year| BC"  (or BCE)
    year >= 0 -> "(year+1) AD" (or CE)
    """
    notation = YearNotation(notation)
    year = int(year)
    if notation is YearNotation.BH_AH:
        value, era = to_hijri(year)
        return f"{value} {era}"
    before, after = ("BCE", "CE") if notation is YearNotation.BCE_CE else ("BC", "AD")
    if year < 0:
        return f"{abs(year)} {before}"
    return f"{year + 1} {after}"


def parse_year(text: str) -> int | None:
    """Parse a user-typed year label into an internal year.

    Accepts "500 BC", "500 BCE", "1066 AD", "1066 CE", "1445 AH", "10 BH"
    and bare integers (positive is AD, negative is BC). Returns None for
    anything unparseable; the result is clamped to the axis.
    """
    if not isinstance(text, str):
        return None
    match = _YEAR_TEXT.match(text.strip().upper())
    if match is None:
        logger.debug("Unparseable year text: %r", text)
        return None

    num = int(match.group(1))
    era = match.group(2)

    if era in ("BC", "BCE"):
        if num <= 0:
            return None
        year = -num
    elif era in ("AD", "CE"):
        if num <= 0:
            return None
        year = num - 1
    elif era in ("AH", "BH"):
        if num <= 0:
            return None
        if era == "AH":
            ce = round_half_up(HIJRA_YEAR + (num - 1) / HIJRI_RATIO)
        else:
            ce = round_half_up(HIJRA_YEAR - num / HIJRI_RATIO)
        year = ce - 1 if ce >= 1 else ce
    else:
        if num == 0:
            return None
        year = num - 1 if num > 0 else num

    return int(clamp_year(year))
