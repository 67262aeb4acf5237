"""Weighted grid with diagonal-only movement and A* path search."""

import math
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional

import numpy as np
import structlog

from ..utils.random import get_prng
from .alea_prng import AleaPRNG
from .errors import IncompletePathError
from .point import Point, manhattan_distance
from .priority_queue import PriorityQueue

logger = structlog.get_logger()

# Nodes only ever connect diagonally
DIAGONAL_OFFSETS = ((1, 1), (-1, 1), (-1, -1), (1, -1))

SQRT_2 = math.sqrt(2)


class Vertex(NamedTuple):
    """A grid coordinate and the cost of stepping onto it."""
    point: Point
    cost: float


@dataclass
class GridPath:
    """Result of a grid search.

    ``points`` runs from ``start`` towards ``end``. When the search could not
    reach ``end`` the points are the best-effort backtrace and ``complete``
    is False.
    """
    start: Point
    end: Point
    points: List[Point] = field(default_factory=list)
    cost: float = 0.0

    @property
    def complete(self) -> bool:
        return bool(self.points) and self.points[-1] == self.end

    def require_complete(self) -> "GridPath":
        """Return self, raising IncompletePathError if ``end`` was not reached."""
        if not self.complete:
            raise IncompletePathError(self)
        return self

    def __len__(self) -> int:
        return len(self.points)


class WeightedGrid:
    """
    Fixed W x H grid of randomly weighted vertices.

    Each vertex gets a cost drawn uniformly from ``[0, (W + H) / 10)`` once,
    at construction. Adjacency is restricted to the four diagonal neighbours,
    which splits the grid into two parity classes (even and odd ``x + y``)
    that never connect. The grid can be searched any number of times.
    """

    def __init__(self, width: int, height: int, prng: Optional[AleaPRNG] = None):
        """
        Build the grid and its adjacency lists.

        Args:
            width: Number of columns
            height: Number of rows
            prng: Random source for vertex costs (shared PRNG if omitted)
        """
        if width < 1 or height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {width}x{height}")

        self.width = width
        self.height = height
        self._prng = prng or get_prng()

        max_cost = (width + height) / 10
        self.costs = np.zeros((width, height), dtype=np.float64)
        for x in range(width):
            for y in range(height):
                self.costs[x, y] = self._prng.random() * max_cost

        self._adjacency: Dict[Point, List[Point]] = {}
        for x in range(width):
            for y in range(height):
                point = Point(x, y)
                self._adjacency[point] = self._generate_adjacency(point)

        logger.debug("Built weighted grid", width=width, height=height, max_cost=max_cost)

    def _generate_adjacency(self, point: Point) -> List[Point]:
        connections = []
        for dx, dy in DIAGONAL_OFFSETS:
            neighbor = Point(point.x + dx, point.y + dy)
            if self.in_bounds(neighbor):
                connections.append(neighbor)
        return connections

    def in_bounds(self, point) -> bool:
        return 0 <= point.x < self.width and 0 <= point.y < self.height

    def cost_at(self, point) -> float:
        """Cost of stepping onto ``point``."""
        return float(self.costs[point.x, point.y])

    def vertex_at(self, point) -> Vertex:
        return Vertex(Point(point.x, point.y), self.cost_at(point))

    def neighbors(self, point) -> List[Point]:
        """Diagonal neighbours of ``point`` inside the grid."""
        return list(self._adjacency.get(Point(point.x, point.y), []))

    @staticmethod
    def _heuristic(point: Point, end: Point) -> float:
        return manhattan_distance(point, end) / SQRT_2

    def find(self, start, end) -> GridPath:
        """
        Find the cheapest path from ``start`` to ``end``.

        Cumulative vertex cost is the path cost; ``manhattan / sqrt(2)`` to the
        end is added only to the queue priority. The search stops once ``end``
        is dequeued. Vertices are re-queued whenever a cheaper route to them is
        found rather than updated in place.

        Args:
            start: Start coordinate
            end: End coordinate

        Returns:
            GridPath from start to end, inclusive. If the frontier runs dry
            first, the path is the backtrace of the last vertex dequeued and
            ``complete`` is False.
        """
        start = Point(start.x, start.y)
        end = Point(end.x, end.y)

        if not self.in_bounds(start):
            logger.warning("Search start outside grid", start=start.key(),
                           width=self.width, height=self.height)
            return GridPath(start=start, end=end)

        frontier: PriorityQueue[Point] = PriorityQueue()
        frontier.insert(start, 0)
        costs: Dict[Point, float] = {start: 0.0}
        origin: Dict[Point, Optional[Point]] = {start: None}

        current = start
        while frontier:
            current = frontier.dequeue()
            if current == end:
                break

            for neighbor in self._adjacency[current]:
                new_cost = costs[current] + self.cost_at(neighbor)

                if neighbor not in costs or new_cost < costs[neighbor]:
                    costs[neighbor] = new_cost
                    frontier.insert(neighbor, new_cost + self._heuristic(neighbor, end))
                    origin[neighbor] = current

        points = []
        step: Optional[Point] = current
        while step is not None:
            points.append(step)
            step = origin[step]
        points.reverse()

        path = GridPath(start=start, end=end, points=points, cost=costs[current])
        if not path.complete:
            logger.warning("Search exhausted before reaching end",
                           start=start.key(), end=end.key(), reached=current.key())
        return path

    def find_points(self, start, end) -> List[Point]:
        """Like ``find`` but returns only the list of points."""
        return self.find(start, end).points
