"""
Event Clusterer - Groups dated markers that sit too close on screen.

This module provides the EventClusterer class which merges markers whose
pixel separation at the current scale falls below a fixed threshold, plus
the column bucketing and same-year stacking used for dense tracks.
"""

import logging
import math
from collections import defaultdict
from typing import Iterable, Sequence

from custom_types import Cluster, Column, Marker
from error_handler import is_finite_number
from virtualization import marker_id, marker_year
from year_coordinates import dot_radius, round_half_up, year_to_pixel

logger = logging.getLogger(__name__)

# Minimum screen-space gap (px) between adjacent cluster dots.
# ~30-year buckets at 5 px/yr, ~3-year buckets at 50 px/yr, none at 500 px/yr.
MIN_CLUSTER_PX = 150.0


def _dated(markers: Iterable[Marker]) -> list[Marker]:
    """Drop markers without a usable year; stable-sort the rest by year."""
    dated = []
    for marker in markers:
        year = marker_year(marker)
        if not is_finite_number(year):
            logger.debug("Skipping marker %r without a usable year", marker_id(marker))
            continue
        dated.append(marker)
    return sorted(dated, key=marker_year)


def _to_cluster(group: Sequence[Marker]) -> Cluster:
    first = marker_year(group[0])
    last = marker_year(group[-1])
    return Cluster(center_year=round_half_up((first + last) / 2), members=tuple(group))


def cluster_markers(
    markers: Iterable[Marker],
    px_per_year: float,
    min_cluster_px: float = MIN_CLUSTER_PX,
) -> list[Cluster]:
    """Greedy left-to-right grouping of markers.

    A marker joins the open group when its distance to the group's *last*
    member is at most ``min_cluster_px / px_per_year`` years; otherwise the
    group closes and a new one starts. Comparing against the last member
    keeps clusters contiguous on screen instead of fixed-width buckets.

    Args:
        markers: Records with ``id`` and ``year`` (mappings or objects)
        px_per_year: Current scale
        min_cluster_px: Minimum on-screen separation between dots

    Returns:
        list[Cluster]: Clusters in ascending year order
    """
    ordered = _dated(markers)
    if not ordered:
        return []
    if not is_finite_number(px_per_year) or px_per_year <= 0:
        logger.debug("Invalid scale %r, no clustering", px_per_year)
        return [_to_cluster([m]) for m in ordered]

    year_gap = min_cluster_px / px_per_year

    clusters: list[Cluster] = []
    group: list[Marker] = [ordered[0]]
    for marker in ordered[1:]:
        if marker_year(marker) - marker_year(group[-1]) <= year_gap:
            group.append(marker)
        else:
            clusters.append(_to_cluster(group))
            group = [marker]
    clusters.append(_to_cluster(group))

    return clusters


def column_buckets(markers: Iterable[Marker], px_per_year: float) -> list[Column]:
    """Bucket markers into columns at least one dot diameter wide.

    Returns:
        list[Column]: One column per non-empty bucket, ordered by year, each
        centered in the middle of its bucket.
    """
    bucket_years = max(1, math.ceil(dot_radius(px_per_year) * 2 / px_per_year))

    buckets: dict[int, list[Marker]] = defaultdict(list)
    for marker in _dated(markers):
        bucket = math.floor(marker_year(marker) / bucket_years) * bucket_years
        buckets[bucket].append(marker)

    return [
        Column(
            bucket_year=bucket,
            members=tuple(members),
            center_px=year_to_pixel(bucket, px_per_year) + bucket_years * px_per_year / 2,
        )
        for bucket, members in sorted(buckets.items())
    ]


def stack_indices(markers: Iterable[Marker]) -> dict[object, int]:
    """Position of each marker among those sharing its year, in input order."""
    seen: dict[object, int] = defaultdict(int)
    indices: dict[object, int] = {}
    for marker in markers:
        year = marker_year(marker)
        indices[marker_id(marker)] = seen[year]
        seen[year] += 1
    return indices


class EventClusterer:
    """
    Caches the cluster list for one marker set at one scale.

    Clusters are a pure derivation; the cache only avoids regrouping when
    neither the marker set nor the scale changed between frames.
    """

    def __init__(self, min_cluster_px: float = MIN_CLUSTER_PX):
        """
        Initialize the event clusterer.

        Args:
            min_cluster_px (float): Minimum on-screen gap between cluster dots
        """
        self.min_cluster_px = min_cluster_px
        self._key = None
        self._clusters: list[Cluster] = []
        self._markers: list = []

    def set_min_cluster_px(self, px):
        self.min_cluster_px = float(px)
        self._key = None

    def cluster(self, markers, px_per_year):
        """
        Cluster `markers` at `px_per_year`, reusing the last result if possible.

        Args:
            markers (Iterable): Marker records
            px_per_year (float): Current scale

        Returns:
            list[Cluster]: Clusters in ascending year order
        """
        markers = list(markers)
        # Identity as well as year so an edited record is never served stale
        key = (tuple(map(id, markers)), tuple(marker_year(m) for m in markers), px_per_year)
        if key != self._key:
            self._clusters = cluster_markers(markers, px_per_year, self.min_cluster_px)
            self._key = key
            self._markers = markers
        return self._clusters

    def get_cluster_summary(self, cluster):
        """
        Get a summary string for a cluster.

        Args:
            cluster (Cluster): Cluster to describe

        Returns:
            str: e.g. "3 markers over 20 years"
        """
        if cluster is None or not cluster.members:
            return "Empty cluster"
        if cluster.count == 1:
            return "1 marker"
        span = marker_year(cluster.members[-1]) - marker_year(cluster.members[0])
        if span == 0:
            return f"{cluster.count} markers"
        unit = "year" if span == 1 else "years"
        return f"{cluster.count} markers over {span} {unit}"
