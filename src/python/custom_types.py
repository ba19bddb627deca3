"""
Type definitions for the timeline engine.

This module defines the small value types passed between the coordinate
transform, the virtualization and clustering helpers, the state store and
the zoom engine, plus TypedDicts describing configuration sections.
"""

import numbers
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Protocol, TypedDict

import numpy as np
import numpy.typing as npt

# NumPy array type aliases
YearArray = npt.NDArray[np.int64]      # Tick / bucket years
PixelArray = npt.NDArray[np.float64]   # Pixel offsets from the axis origin

# Frame callbacks receive a monotonic timestamp in milliseconds
FrameCallback = Callable[[float], None]


class MarkerLike(Protocol):
    """Anything carrying an id and a year (events and notes)."""
    id: Any
    year: int


# A marker is either an attribute-bearing record or a mapping with
# "id" and "year" keys; the engine never reads anything else.
Marker = MarkerLike | Mapping[str, Any]


@dataclass(frozen=True)
class VisibleRange:
    """Inclusive year range worth rendering."""
    start_year: int
    end_year: int

    def __contains__(self, year: object) -> bool:
        return isinstance(year, numbers.Real) and self.start_year <= year <= self.end_year

    @property
    def span(self) -> int:
        return self.end_year - self.start_year + 1


@dataclass(frozen=True)
class Cluster:
    """A run of markers merged for display.

    Attributes:
        center_year: round((first.year + last.year) / 2) over the members
        members: Markers in ascending year order
    """
    center_year: int
    members: tuple[Marker, ...] = field(default_factory=tuple)

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def is_cluster(self) -> bool:
        """True when more than one marker was merged."""
        return len(self.members) > 1


@dataclass(frozen=True)
class Column:
    """A fixed-width bucket of markers stacked at one x position."""
    bucket_year: int
    members: tuple[Marker, ...]
    center_px: float


@dataclass(frozen=True)
class NavRequest:
    """One-shot "animate to center `year` at scale `zoom`" command."""
    year: int
    zoom: float


@dataclass(frozen=True)
class ActiveInterval:
    """Highlighted sub-interval of the axis, start <= end."""
    start: int
    end: int

    def __contains__(self, year: object) -> bool:
        return isinstance(year, numbers.Real) and self.start <= year <= self.end


@dataclass(frozen=True)
class ViewportSnapshot:
    """Consistent read of the live viewport."""
    scroll_left: float
    viewport_width: float
    px_per_year: float
    center_year: int


# Configuration TypedDict definitions
class ZoomConfig(TypedDict, total=False):
    """Zoom engine configuration section."""
    initialPxPerYear: float
    lerpFactor: float
    logEpsilon: float
    wheelZoomSpeed: float
    landingOffsetPx: float
    landingDurationMs: float
    presets: dict[str, float]


class LoggingConfig(TypedDict, total=False):
    """Logging configuration section."""
    level: str
    file: str
    maxBytes: int
    backupCount: int
    console: bool
    consoleLevel: str
