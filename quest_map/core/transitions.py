"""Transition table: symmetric adjacency merged from raw grid paths."""

from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .point import Point


class TransitionTable:
    """
    Maps every point on one or more merged paths to the points it can move to.

    Built from undirected path adjacency, so the table is symmetric: if A
    transitions to B then B transitions to A. Neighbour order is first-seen
    order and neighbours are never duplicated.
    """

    def __init__(self):
        self._transitions: Dict[Point, List[Point]] = {}

    @classmethod
    def from_paths(cls, *paths: Sequence) -> "TransitionTable":
        table = cls()
        for path in paths:
            table.add_path(path)
        return table

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> "TransitionTable":
        """Build a table from an explicit ``{point: [neighbours]}`` mapping.

        The mapping is taken as given; no symmetry is added.
        """
        table = cls()
        for point, neighbors in mapping.items():
            entry = table._entry(point)
            for neighbor in neighbors:
                table._link(entry, _as_point(neighbor))
        return table

    def _entry(self, point) -> List[Point]:
        return self._transitions.setdefault(_as_point(point), [])

    @staticmethod
    def _link(entry: List[Point], point: Point) -> None:
        if point not in entry:
            entry.append(point)

    def add_path(self, path: Sequence) -> None:
        """Record the previous and next point of every point along ``path``."""
        points = [_as_point(p) for p in path]
        for i, point in enumerate(points):
            entry = self._entry(point)
            if i - 1 >= 0:
                self._link(entry, points[i - 1])
            if i + 1 < len(points):
                self._link(entry, points[i + 1])

    def neighbors(self, point) -> Tuple[Point, ...]:
        """Points reachable from ``point`` in one move; empty if unknown."""
        return tuple(self._transitions.get(_as_point(point), ()))

    def keys(self) -> Iterable[Point]:
        return self._transitions.keys()

    def items(self):
        return self._transitions.items()

    def __contains__(self, point) -> bool:
        return _as_point(point) in self._transitions

    def __len__(self) -> int:
        return len(self._transitions)

    def __repr__(self) -> str:
        return f"TransitionTable({len(self)} points)"


def _as_point(value) -> Point:
    if isinstance(value, Point):
        return value
    if isinstance(value, tuple):
        return Point(*value)
    return Point(value.x, value.y)
