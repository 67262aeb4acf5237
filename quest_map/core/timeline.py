"""
Reveal timing and layout arithmetic.

Pure helpers for whatever draws a RevealPlan: which step is active at a
given moment, how far through it we are, how opaque newly revealed nodes
should be, and where on screen a grid coordinate lands. No drawing or frame
scheduling happens here.
"""

import math
from typing import List, NamedTuple, Tuple

from .map_node import PathSegment

DEFAULT_MS_PER_STEP = 1000
DEFAULT_NODE_FADE_MS = 250


class FrameState(NamedTuple):
    """Reveal progress at one moment."""
    step: int
    progress: float  # fraction of the current step elapsed, 0 <= progress < 1
    alpha: float  # opacity of nodes revealed in the current step
    finished: bool


def lerp(a: float, b: float, ratio: float) -> float:
    """Linear interpolation between a and b."""
    return a + ratio * (b - a)


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two pixel positions."""
    return math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)


def node_center(point, node_spacing: float, top_margin: float = 0) -> Tuple[float, float]:
    """Pixel centre of a grid coordinate."""
    half = node_spacing / 2
    return (point.x * node_spacing + half, point.y * node_spacing + half + top_margin)


def segment_progress(segment: PathSegment, progress: float, node_spacing: float,
                     top_margin: float = 0) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """
    Pixel endpoints of a segment drawn ``progress`` of the way from n1 to n2.

    Returns:
        ((start_x, start_y), (end_x, end_y))
    """
    start_x, start_y = node_center(segment.n1, node_spacing, top_margin)
    full_x, full_y = node_center(segment.n2, node_spacing, top_margin)
    return (start_x, start_y), (lerp(start_x, full_x, progress), lerp(start_y, full_y, progress))


class RevealTimeline:
    """Maps elapsed time onto the steps of a reveal plan."""

    def __init__(self, step_count: int, ms_per_step: float = DEFAULT_MS_PER_STEP,
                 node_fade_ms: float = DEFAULT_NODE_FADE_MS):
        if ms_per_step <= 0:
            raise ValueError("ms_per_step must be positive")
        if node_fade_ms <= 0 or node_fade_ms > ms_per_step:
            raise ValueError("node_fade_ms must be positive and at most ms_per_step")
        self.step_count = step_count
        self.ms_per_step = ms_per_step
        self.node_fade_ms = node_fade_ms

    @property
    def total_ms(self) -> float:
        return self.step_count * self.ms_per_step

    def frame_at(self, elapsed_ms: float) -> FrameState:
        """
        Reveal state ``elapsed_ms`` after the reveal started.

        Nodes of the current step fade in over the last ``node_fade_ms`` of
        the step, after its edges have mostly been drawn.
        """
        elapsed_ms = max(elapsed_ms, 0)
        step = min(int(elapsed_ms // self.ms_per_step), self.step_count)
        if step >= self.step_count:
            return FrameState(step=self.step_count, progress=0.0, alpha=1.0, finished=True)

        progress = (elapsed_ms - step * self.ms_per_step) / self.ms_per_step
        remaining = (step + 1) * self.ms_per_step - elapsed_ms
        alpha = (self.node_fade_ms - min(remaining, self.node_fade_ms)) / self.node_fade_ms
        return FrameState(step=step, progress=progress, alpha=alpha, finished=False)

    @staticmethod
    def steps_to_commit(last_committed: int, step: int) -> List[int]:
        """Completed steps after ``last_committed`` that are not yet permanent."""
        return list(range(last_committed + 1, step))
