"""
Enumerations for the timeline engine using Python 3.11+ StrEnum.

This module defines string-based enumerations for the constants shared
across the coordinate transform, the zoom engine and the controller.
"""

from enum import StrEnum


class YearNotation(StrEnum):
    """Textual notations for rendering an internal year.

    Attributes:
        BC_AD: "500 BC" / "1066 AD"
        BCE_CE: "500 BCE" / "1066 CE"
        BH_AH: Hijri-derived "10 BH" / "1445 AH"
    """
    BC_AD = "BC/AD"
    BCE_CE = "BCE/CE"
    BH_AH = "BH/AH"


class ZoomBand(StrEnum):
    """Discrete density bands derived from pxPerYear.

    Bands are never stored; they only pick tick/label density and
    marker sizes for the current scale.

    Attributes:
        OVERVIEW: below 1 px/yr, labels every 1000 years
        CENTURIES: 1-10 px/yr, labels every 100 years
        DECADES: 10-100 px/yr, labels every 10 years
        YEARS: 100 px/yr and above, every year labelled
    """
    OVERVIEW = "overview"
    CENTURIES = "centuries"
    DECADES = "decades"
    YEARS = "years"


class EngineMode(StrEnum):
    """Which writer currently owns the viewport."""
    IDLE = "idle"
    WHEEL_MOMENTUM = "wheel-momentum"
    PINCH_ZOOM = "pinch-zoom"
    LANDING = "landing"
