"""Tests for reveal timing and layout helpers."""

import pytest

from quest_map.core.map_node import MapNode, PathSegment
from quest_map.core.point import Point
from quest_map.core.timeline import (
    RevealTimeline, distance, lerp, node_center, segment_progress
)


class TestRevealTimeline:
    """Test mapping elapsed time to steps."""

    def test_start_of_reveal(self):
        """Test the first frame."""
        frame = RevealTimeline(3).frame_at(0)
        assert frame.step == 0
        assert frame.progress == 0
        assert frame.alpha == 0
        assert not frame.finished

    def test_nodes_fade_in_at_end_of_step(self):
        """Test alpha ramps up during the last fade window of a step."""
        timeline = RevealTimeline(3, ms_per_step=1000, node_fade_ms=250)

        assert timeline.frame_at(500).alpha == 0
        assert timeline.frame_at(750).alpha == 0
        assert timeline.frame_at(900).alpha == pytest.approx(0.6)
        assert timeline.frame_at(1900).alpha == pytest.approx(0.6)

    def test_step_and_progress(self):
        """Test step index and progress within a step."""
        frame = RevealTimeline(3, ms_per_step=1000).frame_at(1250)
        assert frame.step == 1
        assert frame.progress == pytest.approx(0.25)

    def test_finished(self):
        """Test the timeline finishes after the last step."""
        timeline = RevealTimeline(3, ms_per_step=1000)
        assert timeline.total_ms == 3000
        assert not timeline.frame_at(2999).finished
        frame = timeline.frame_at(3000)
        assert frame.finished
        assert frame.step == 3
        assert timeline.frame_at(10000).step == 3

    def test_negative_time_clamped(self):
        """Test time before the start counts as the start."""
        assert RevealTimeline(2).frame_at(-50).step == 0

    def test_invalid_timings(self):
        """Test bad timing parameters are rejected."""
        with pytest.raises(ValueError):
            RevealTimeline(2, ms_per_step=0)
        with pytest.raises(ValueError):
            RevealTimeline(2, ms_per_step=100, node_fade_ms=200)

    def test_steps_to_commit(self):
        """Test which finished steps become permanent."""
        assert RevealTimeline.steps_to_commit(-1, 3) == [0, 1, 2]
        assert RevealTimeline.steps_to_commit(2, 3) == []


class TestLayout:
    """Test pixel layout helpers."""

    def test_lerp_and_distance(self):
        """Test interpolation and distance."""
        assert lerp(0, 10, 0.5) == 5
        assert lerp(4, 4, 0.3) == 4
        assert distance(0, 0, 3, 4) == 5

    def test_node_center(self):
        """Test grid coordinates map to cell centres below the header."""
        assert node_center(Point(2, 3), 75, top_margin=10) == (187.5, 272.5)
        assert node_center(MapNode(0, 0), 50) == (25, 25)

    def test_segment_progress(self):
        """Test a half drawn segment ends midway."""
        segment = PathSegment(MapNode(0, 0), MapNode(1, 1))
        start, end = segment_progress(segment, 0.5, 100)
        assert start == (50, 50)
        assert end == (100, 100)
