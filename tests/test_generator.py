"""End-to-end tests for quest map generation."""

import json

import pytest

from quest_map.config import Settings
from quest_map.core.alea_prng import AleaPRNG
from quest_map.core.generator import (
    QuestMapGenerator, evens_in_range, grid_dimensions
)
from quest_map.core.point import Point
from quest_map.core.portraits import PortraitCatalog


def make_settings(**overrides):
    return Settings(**overrides)


class TestHelpers:
    """Test layout arithmetic."""

    @pytest.mark.parametrize("start,end,expected", [
        (0, 4, 3), (1, 4, 2), (3, 9, 3), (3, 3, 0), (2, 2, 1), (4, 2, 0), (0, 0, 1),
    ])
    def test_evens_in_range(self, start, end, expected):
        """Test counting even numbers in an inclusive range."""
        assert evens_in_range(start, end) == expected

    def test_grid_dimensions(self):
        """Test viewport sizing at a fixed spacing."""
        assert grid_dimensions(1920, 1080, 75) == (25, 14)
        assert grid_dimensions(1920, 1080, 75, header_height=100) == (25, 13)
        assert grid_dimensions(10, 10, 75) == (0, 0)
        with pytest.raises(ValueError):
            grid_dimensions(100, 100, 0)


class TestEndpoints:
    """Test start and end selection."""

    @pytest.mark.parametrize("width,height", [(2, 3), (3, 3), (10, 7), (25, 14), (24, 13)])
    def test_endpoints_share_parity_and_fit(self, width, height):
        """Test endpoints sit on opposite edges in the same parity class."""
        generator = QuestMapGenerator(settings=make_settings(), prng=AleaPRNG("ends"))
        for _ in range(20):
            start, end = generator.pick_endpoints(width, height)
            assert start.x == 0
            assert end.x == width - 1
            assert 0 <= start.y < height and 0 <= end.y < height
            assert start.y % 2 == 0
            assert start.y >= height // 2
            assert end.y <= (height - 1) // 2 + 1
            assert (start.x + start.y) % 2 == (end.x + end.y) % 2


class TestDetour:
    """Test detour endpoint selection."""

    def test_detour_respects_gap(self):
        """Test detour endpoints are at least the gap apart both ways round."""
        generator = QuestMapGenerator(settings=make_settings(detour_min_gap=5),
                                      prng=AleaPRNG("detour"))
        path = [Point(i, i % 2) for i in range(20)]
        for _ in range(50):
            first, second = generator.pick_detour(path)
            i, j = path.index(first), path.index(second)
            forward = (j - i) % len(path)
            assert 5 <= forward <= len(path) - 5

    def test_short_path_has_no_detour(self):
        """Test paths shorter than twice the gap are left alone."""
        generator = QuestMapGenerator(settings=make_settings(detour_min_gap=15),
                                      prng=AleaPRNG("short"))
        assert generator.pick_detour([Point(i, 0) for i in range(30)]) is None


class TestGenerate:
    """Test the full pipeline."""

    def test_generates_complete_map(self):
        """Test a generated map is consistent from paths to reveal plan."""
        generator = QuestMapGenerator(settings=make_settings(detour_min_gap=5),
                                      prng=AleaPRNG("full"))
        quest_map = generator.generate(25, 14)

        assert quest_map.main_path.complete
        assert quest_map.main_path.points[0] == quest_map.start
        assert quest_map.main_path.points[-1] == quest_map.end
        assert quest_map.detour is not None and quest_map.detour.complete
        assert len(quest_map.paths) == 2

        graph, plan = quest_map.graph, quest_map.plan
        assert graph.start.point == quest_map.start
        assert graph.end.is_boss
        assert plan.node_batches[0] == [graph.start]
        assert plan.edge_batches[0] == []
        assert graph.end in plan.nodes()

        staged = [node.point for node in plan.nodes()]
        assert len(staged) == len(set(staged))
        assert set(staged) == {node.point for node in graph.reachable_nodes()}

    def test_same_seed_same_map(self):
        """Test generation is reproducible from a seed."""
        first = QuestMapGenerator(settings=make_settings(), prng=AleaPRNG("replay")).generate(20, 12)
        second = QuestMapGenerator(settings=make_settings(), prng=AleaPRNG("replay")).generate(20, 12)

        assert first.main_path.points == second.main_path.points
        assert first.describe().model_dump() == second.describe().model_dump()

    def test_seed_from_settings(self):
        """Test the settings seed is used when no PRNG is injected."""
        first = QuestMapGenerator(settings=make_settings(seed="cfg")).generate(12, 8)
        second = QuestMapGenerator(settings=make_settings(seed="cfg")).generate(12, 8)
        assert first.main_path.points == second.main_path.points

    def test_detour_disabled(self):
        """Test maps without a detour use only the main path."""
        generator = QuestMapGenerator(settings=make_settings(detour_enabled=False),
                                      prng=AleaPRNG("nodetour"))
        quest_map = generator.generate(25, 14)
        assert quest_map.detour is None
        assert set(quest_map.transitions.keys()) == set(quest_map.main_path.points)

    def test_smallest_grid(self):
        """Test the smallest supported grid."""
        generator = QuestMapGenerator(settings=make_settings(), prng=AleaPRNG("tiny"))
        quest_map = generator.generate(2, 3)
        assert quest_map.main_path.points == [Point(0, 2), Point(1, 1)]
        assert quest_map.detour is None
        assert quest_map.plan.step_count == 2

    @pytest.mark.parametrize("width,height", [(1, 5), (5, 2), (0, 0)])
    def test_too_small(self, width, height):
        """Test grids too small for both endpoints are rejected."""
        generator = QuestMapGenerator(settings=make_settings(), prng=AleaPRNG("small"))
        with pytest.raises(ValueError):
            generator.generate(width, height)

    def test_generate_for_viewport(self):
        """Test sizing the grid from a viewport."""
        generator = QuestMapGenerator(settings=make_settings(node_spacing=100, header_height=50),
                                      prng=AleaPRNG("viewport"))
        quest_map = generator.generate_for_viewport(1280, 720)
        assert (quest_map.width, quest_map.height) == (12, 6)

    def test_portraits_attached(self):
        """Test encounter portraits come from the configured catalog."""
        prng = AleaPRNG("portraits")
        catalog = PortraitCatalog(["knight", "mage", "rogue"], prng=prng)
        generator = QuestMapGenerator(settings=make_settings(), prng=prng, portraits=catalog)
        quest_map = generator.generate(20, 12)

        encounters = quest_map.plan.encounters()
        assert encounters
        for node in encounters:
            assert node.encounter_portrait in {"knight", "mage", "rogue"}

    def test_portrait_dir_setting(self, tmp_path):
        """Test the portrait directory setting builds a catalog."""
        (tmp_path / "boss.png").write_text("x")
        generator = QuestMapGenerator(settings=make_settings(portrait_dir=str(tmp_path)),
                                      prng=AleaPRNG("dir"))
        quest_map = generator.generate(10, 6)
        assert quest_map.graph.end.encounter_portrait == tmp_path / "boss.png"


class TestDescribe:
    """Test render descriptors."""

    def test_descriptor_matches_plan(self):
        """Test descriptors mirror the plan batches."""
        quest_map = QuestMapGenerator(settings=make_settings(),
                                      prng=AleaPRNG("describe")).generate(16, 10)
        descriptor = quest_map.describe()

        assert descriptor.step_count == quest_map.plan.step_count
        boss = [node for batch in descriptor.node_batches for node in batch if node.boss]
        assert len(boss) == 1
        assert (boss[0].x, boss[0].y) == (quest_map.end.x, quest_map.end.y)
        assert boss[0].encounter

        first_edge = descriptor.edge_batches[1][0]
        assert first_edge.source == (quest_map.start.x, quest_map.start.y)

        json.dumps(descriptor.model_dump())

    def test_timeline(self):
        """Test a timeline spans every reveal step."""
        quest_map = QuestMapGenerator(settings=make_settings(),
                                      prng=AleaPRNG("timeline")).generate(16, 10)
        timeline = quest_map.timeline(ms_per_step=500, node_fade_ms=100)
        assert timeline.total_ms == quest_map.plan.step_count * 500

    def test_timing_from_settings(self):
        """Test the configured timing drives the map's timeline."""
        settings = make_settings(ms_per_step=500, node_fade_ms=100, delay_between_maps_ms=2000)
        quest_map = QuestMapGenerator(settings=settings, prng=AleaPRNG("timing")).generate(12, 8)
        steps = quest_map.plan.step_count

        timeline = quest_map.timeline()
        assert timeline.ms_per_step == 500
        assert timeline.node_fade_ms == 100
        assert timeline.total_ms == steps * 500
        assert quest_map.delay_between_maps_ms == 2000
        assert quest_map.cycle_ms == steps * 500 + 2000

        frame = timeline.frame_at(450)
        assert frame.step == 0
        assert frame.alpha == pytest.approx(0.5)

    def test_default_timing(self):
        """Test default settings give one second steps and a five second pause."""
        quest_map = QuestMapGenerator(settings=make_settings(),
                                      prng=AleaPRNG("timing")).generate(12, 8)
        timeline = quest_map.timeline()
        assert timeline.ms_per_step == 1000
        assert timeline.node_fade_ms == 250
        assert quest_map.cycle_ms == quest_map.plan.step_count * 1000 + 5000
