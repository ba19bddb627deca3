"""
Tests for marker clustering, column bucketing and same-year stacking.
"""
from types import SimpleNamespace

import numpy as np
import pytest

from event_clusterer import (
    MIN_CLUSTER_PX,
    EventClusterer,
    cluster_markers,
    column_buckets,
    stack_indices,
)


def make_markers(years):
    return [{"id": i, "year": year} for i, year in enumerate(years)]


def member_years(cluster):
    return [m["year"] for m in cluster.members]


class TestClusterMarkers:
    """Greedy left-to-right grouping."""

    def test_default_threshold(self):
        assert MIN_CLUSTER_PX == 150

    def test_reference_scenario(self):
        # gap = 150 / 10 = 15 years
        clusters = cluster_markers(make_markers([-500, -495, -480, 100]), 10)
        assert len(clusters) == 2
        assert member_years(clusters[0]) == [-500, -495, -480]
        assert clusters[0].center_year == -490
        assert clusters[0].is_cluster
        assert member_years(clusters[1]) == [100]
        assert clusters[1].center_year == 100
        assert not clusters[1].is_cluster

    def test_gap_boundary_is_inclusive(self):
        clusters = cluster_markers(make_markers([0, 15]), 10)
        assert len(clusters) == 1

    def test_one_year_past_boundary_splits(self):
        clusters = cluster_markers(make_markers([0, 16]), 10)
        assert [c.count for c in clusters] == [1, 1]

    def test_gap_measured_from_last_member(self):
        # Span 30 exceeds the 15-year gap, but each step is within it
        clusters = cluster_markers(make_markers([0, 10, 20, 30]), 10)
        assert len(clusters) == 1
        assert clusters[0].center_year == 15

    def test_uniform_spacing_just_over_gap_splits_every_marker(self):
        clusters = cluster_markers(make_markers([0, 16, 32, 48]), 10)
        assert len(clusters) == 4

    def test_decreasing_spacing_merges_progressively(self):
        clusters = cluster_markers(make_markers([0, 20, 35, 45]), 10)
        assert [member_years(c) for c in clusters] == [[0], [20, 35, 45]]

    def test_unsorted_input_is_sorted(self):
        clusters = cluster_markers(make_markers([100, -480, -500, -495]), 10)
        assert member_years(clusters[0]) == [-500, -495, -480]

    def test_ties_keep_input_order(self):
        markers = [{"id": "b", "year": 5}, {"id": "a", "year": 5}, {"id": "c", "year": 5}]
        clusters = cluster_markers(markers, 10)
        assert len(clusters) == 1
        assert [m["id"] for m in clusters[0].members] == ["b", "a", "c"]

    def test_empty_input(self):
        assert cluster_markers([], 10) == []

    def test_single_marker(self):
        clusters = cluster_markers(make_markers([42]), 10)
        assert len(clusters) == 1
        assert clusters[0].count == 1
        assert clusters[0].center_year == 42

    def test_all_identical_years(self):
        clusters = cluster_markers(make_markers([7] * 25), 500)
        assert len(clusters) == 1
        assert clusters[0].count == 25

    def test_center_rounds_half_up(self):
        # (-500 + -485) / 2 = -492.5 rounds towards +infinity
        clusters = cluster_markers(make_markers([-500, -485]), 10)
        assert clusters[0].center_year == -492

    def test_attribute_markers(self):
        markers = [SimpleNamespace(id=i, year=y) for i, y in enumerate([1, 2, 500])]
        clusters = cluster_markers(markers, 10)
        assert [c.count for c in clusters] == [2, 1]

    def test_undated_markers_skipped(self):
        markers = make_markers([0, float("nan"), 5]) + [{"id": 99}]
        clusters = cluster_markers(markers, 10)
        assert len(clusters) == 1
        assert member_years(clusters[0]) == [0, 5]

    @pytest.mark.parametrize("scale", [0, -1, float("nan")])
    def test_invalid_scale_leaves_markers_unclustered(self, scale):
        clusters = cluster_markers(make_markers([0, 1, 2]), scale)
        assert [c.count for c in clusters] == [1, 1, 1]

    def test_custom_threshold(self):
        assert len(cluster_markers(make_markers([0, 15]), 10, min_cluster_px=100)) == 2


class TestClusteringIdempotence:
    """Re-clustering cluster centers at the same scale changes nothing."""

    def test_reference_centers(self):
        first = cluster_markers(make_markers([-500, -495, -480, 100]), 10)
        centers = [c.center_year for c in first]
        second = cluster_markers(make_markers(centers), 10)
        assert [c.center_year for c in second] == centers
        assert all(c.count == 1 for c in second)

    @pytest.mark.parametrize("seed,scale", [(0, 1.0), (1, 5.0), (2, 37.5), (3, 500.0)])
    def test_random_marker_sets(self, seed, scale):
        rng = np.random.default_rng(seed)
        years = rng.integers(-4000, 2026, size=300).tolist()
        first = cluster_markers(make_markers(years), scale)
        centers = [c.center_year for c in first]
        second = cluster_markers(make_markers(centers), scale)
        assert [c.center_year for c in second] == centers


class TestColumnBuckets:

    def test_bucket_width_grows_when_zoomed_out(self):
        # radius 2 at 1 px/yr -> 4 px diameter -> 4-year buckets
        columns = column_buckets(make_markers([0, 1, 3, 4, -1]), 1)
        assert [c.bucket_year for c in columns] == [-4, 0, 4]
        assert [len(c.members) for c in columns] == [1, 3, 1]
        assert columns[1].center_px == pytest.approx(4002.0)

    def test_one_year_buckets_when_zoomed_in(self):
        columns = column_buckets(make_markers([10, 10, 11]), 100)
        assert [c.bucket_year for c in columns] == [10, 11]
        assert columns[0].center_px == pytest.approx((10 + 4000) * 100 + 50)

    def test_empty(self):
        assert column_buckets([], 5) == []


class TestStackIndices:

    def test_positions_within_same_year(self):
        markers = [
            {"id": 1, "year": 5},
            {"id": 2, "year": 5},
            {"id": 3, "year": 6},
            {"id": 4, "year": 5},
        ]
        assert stack_indices(markers) == {1: 0, 2: 1, 3: 0, 4: 2}


class TestEventClusterer:

    def test_reuses_result_for_same_inputs(self):
        clusterer = EventClusterer()
        markers = make_markers([0, 5, 500])
        first = clusterer.cluster(markers, 10)
        assert clusterer.cluster(markers, 10) is first

    def test_replaced_records_are_not_served_stale(self):
        clusterer = EventClusterer()
        clusterer.cluster([{"id": 1, "year": 100, "title": "old"}], 10)
        clusters = clusterer.cluster([{"id": 1, "year": 100, "title": "new"}], 10)
        assert clusters[0].members[0]["title"] == "new"

    def test_accepts_one_shot_iterable(self):
        clusterer = EventClusterer()
        clusters = clusterer.cluster(iter(make_markers([0, 5, 500])), 10)
        assert [c.count for c in clusters] == [2, 1]

    def test_recomputes_on_scale_change(self):
        clusterer = EventClusterer()
        markers = make_markers([0, 100])
        assert len(clusterer.cluster(markers, 10)) == 2
        assert len(clusterer.cluster(markers, 1)) == 1

    def test_recomputes_on_year_change(self):
        clusterer = EventClusterer()
        assert len(clusterer.cluster(make_markers([0, 100]), 10)) == 2
        assert len(clusterer.cluster(make_markers([0, 10]), 10)) == 1

    def test_threshold_change_invalidates_cache(self):
        clusterer = EventClusterer()
        markers = make_markers([0, 15])
        assert len(clusterer.cluster(markers, 10)) == 1
        clusterer.set_min_cluster_px(100)
        assert len(clusterer.cluster(markers, 10)) == 2

    def test_cluster_summary(self):
        clusterer = EventClusterer()
        clusters = clusterer.cluster(make_markers([-500, -495, -480, 100]), 10)
        assert clusterer.get_cluster_summary(clusters[0]) == "3 markers over 20 years"
        assert clusterer.get_cluster_summary(clusters[1]) == "1 marker"
        assert clusterer.get_cluster_summary(None) == "Empty cluster"
