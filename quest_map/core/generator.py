"""
Quest map generation pipeline.

Nodes can only connect diagonally, so the start and end are chosen to share
a parity class:

- the start is on the left edge, on an even row in the bottom half
- the end is on the right edge, on an even row in the top half, shifted down
  one row when the grid has an even number of columns

which keeps them connectable and makes the route flow towards the top right.
A second, detour path is then searched between two points of the main path
that sit at least ``detour_min_gap`` steps apart, giving anywhere from one to
three distinct routes once the paths are merged.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import structlog

from ..config import Settings, settings as default_settings
from ..utils.random import get_prng
from .alea_prng import AleaPRNG
from .descriptors import RevealDescriptor, describe_plan
from .graph_builder import QuestGraph, QuestGraphBuilder
from .point import Point
from .portraits import PortraitCatalog, PortraitProvider
from .reveal_scheduler import RevealPlan, RevealScheduler
from .timeline import DEFAULT_MS_PER_STEP, DEFAULT_NODE_FADE_MS, RevealTimeline
from .transitions import TransitionTable
from .weighted_grid import GridPath, WeightedGrid

logger = structlog.get_logger()

MIN_GRID_WIDTH = 2
MIN_GRID_HEIGHT = 3
DEFAULT_DELAY_BETWEEN_MAPS_MS = 5000


def evens_in_range(start: int, end: int) -> int:
    """Count of even integers in the inclusive range [start, end]."""
    return (end - start + 2 - (start % 2)) // 2


def grid_dimensions(viewport_width: float, viewport_height: float, node_spacing: float,
                    header_height: float = 0) -> Tuple[int, int]:
    """
    Number of node columns and rows that fit in a viewport.

    Args:
        viewport_width: Viewport width in pixels
        viewport_height: Viewport height in pixels
        node_spacing: Pixels between adjacent nodes
        header_height: Pixels kept free above the grid so portraits fit

    Returns:
        (columns, rows)
    """
    if node_spacing <= 0:
        raise ValueError("node_spacing must be positive")
    columns = math.floor(viewport_width / node_spacing)
    rows = math.floor((viewport_height - header_height) / node_spacing)
    return max(columns, 0), max(rows, 0)


@dataclass
class QuestMap:
    """Everything produced for one map."""
    width: int
    height: int
    start: Point
    end: Point
    main_path: GridPath
    detour: Optional[GridPath]
    transitions: TransitionTable
    graph: QuestGraph
    plan: RevealPlan
    ms_per_step: float = DEFAULT_MS_PER_STEP
    node_fade_ms: float = DEFAULT_NODE_FADE_MS
    delay_between_maps_ms: float = DEFAULT_DELAY_BETWEEN_MAPS_MS

    @property
    def paths(self) -> List[GridPath]:
        return [path for path in (self.main_path, self.detour) if path is not None]

    def describe(self) -> RevealDescriptor:
        return describe_plan(self.plan)

    def timeline(self, ms_per_step: Optional[float] = None,
                 node_fade_ms: Optional[float] = None) -> RevealTimeline:
        """Reveal timeline for this map, using the map's timing unless overridden."""
        return RevealTimeline(
            self.plan.step_count,
            ms_per_step if ms_per_step is not None else self.ms_per_step,
            node_fade_ms if node_fade_ms is not None else self.node_fade_ms,
        )

    @property
    def cycle_ms(self) -> float:
        """Time from the start of this reveal until the next map should begin."""
        return self.plan.step_count * self.ms_per_step + self.delay_between_maps_ms


class QuestMapGenerator:
    """Generates quest maps: grid search, graph building and reveal staging."""

    def __init__(self, settings: Optional[Settings] = None, prng: Optional[AleaPRNG] = None,
                 portraits: Optional[PortraitProvider] = None):
        """
        Args:
            settings: Generation settings; the module-level settings if omitted
            prng: Random source; seeded from settings.seed, else the shared PRNG
            portraits: Portrait provider; built from settings.portrait_dir if omitted
        """
        self.settings = settings or default_settings

        if prng is None:
            prng = AleaPRNG(self.settings.seed) if self.settings.seed else get_prng()
        self.prng = prng

        if portraits is None and self.settings.portrait_dir:
            portraits = PortraitCatalog.from_directory(self.settings.portrait_dir, prng=prng)
        self.portraits = portraits

    def pick_endpoints(self, width: int, height: int) -> Tuple[Point, Point]:
        """Pick start and end points that share a parity class."""
        half = math.ceil(height / 2)
        first_even_below_half = math.ceil(half / 2) * 2
        start_row = first_even_below_half + self.prng.randint_below(
            evens_in_range(half, height - 1)) * 2

        end_row = self.prng.randint_below(evens_in_range(0, (height - 1) // 2)) * 2
        if width % 2 == 0:
            end_row += 1

        return Point(0, start_row), Point(width - 1, end_row)

    def pick_detour(self, path: List[Point]) -> Optional[Tuple[Point, Point]]:
        """
        Pick two points of ``path`` to join with a detour.

        The second point is at least ``detour_min_gap`` steps from the first
        in both directions, wrapping past the end of the path.
        """
        gap = self.settings.detour_min_gap
        if len(path) < 2 * gap + 1:
            logger.info("Path too short for a detour", length=len(path), min_gap=gap)
            return None

        start_index = self.prng.randint_below(len(path))
        offset = self.prng.randint_below(len(path) - 2 * gap) + gap
        end_index = (start_index + offset) % len(path)
        return path[start_index], path[end_index]

    def generate(self, width: int, height: int) -> QuestMap:
        """
        Generate a quest map on a ``width`` x ``height`` node grid.

        Raises:
            ValueError: If the grid is too small to place both endpoints
            IncompletePathError: If the main path cannot be found
        """
        if width < MIN_GRID_WIDTH or height < MIN_GRID_HEIGHT:
            raise ValueError(
                f"Grid must be at least {MIN_GRID_WIDTH}x{MIN_GRID_HEIGHT}, got {width}x{height}"
            )

        logger.info("Generating quest map", width=width, height=height, seed=self.settings.seed)

        grid = WeightedGrid(width, height, prng=self.prng)
        start, end = self.pick_endpoints(width, height)
        main_path = grid.find(start, end).require_complete()

        detour = None
        if self.settings.detour_enabled:
            endpoints = self.pick_detour(main_path.points)
            if endpoints is not None:
                detour = grid.find(*endpoints)
                if not detour.complete:
                    logger.warning("Discarding incomplete detour",
                                   start=endpoints[0].key(), end=endpoints[1].key())
                    detour = None

        transitions = TransitionTable.from_paths(
            *(path.points for path in (main_path, detour) if path is not None))
        graph = QuestGraphBuilder(transitions).build(start, end)

        scheduler = RevealScheduler(
            prng=self.prng,
            portraits=self.portraits,
            encounter_base_chance=self.settings.encounter_base_chance,
            encounter_step_chance=self.settings.encounter_step_chance,
        )
        plan = scheduler.schedule(graph)

        logger.info("Quest map generated", start=start.key(), end=end.key(),
                    main_path=len(main_path), detour=len(detour) if detour else 0,
                    steps=plan.step_count)

        return QuestMap(
            width=width,
            height=height,
            start=start,
            end=end,
            main_path=main_path,
            detour=detour,
            transitions=transitions,
            graph=graph,
            plan=plan,
            ms_per_step=self.settings.ms_per_step,
            node_fade_ms=self.settings.node_fade_ms,
            delay_between_maps_ms=self.settings.delay_between_maps_ms,
        )

    def generate_for_viewport(self, viewport_width: float, viewport_height: float) -> QuestMap:
        """Generate a map sized to fit a viewport at the configured node spacing."""
        width, height = grid_dimensions(viewport_width, viewport_height,
                                        self.settings.node_spacing, self.settings.header_height)
        return self.generate(width, height)
