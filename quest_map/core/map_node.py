"""Quest graph nodes and the segments joining them."""

from dataclasses import dataclass
from typing import Any, List, Optional, Set

from .point import Point

UNRESOLVED = -1


class MapNode:
    """
    A waypoint on a generated quest map.

    Identity is the grid coordinate: two nodes at the same coordinate compare
    equal. A map keeps one instance per coordinate so every parent/child
    link points at the same object.

    Attributes:
        point: Grid coordinate of the node
        distance_since_encounter: Steps since the last encounter on the route
            that reached this node. -1 until resolved, 0 when the node itself
            is an encounter.
        is_boss: True only for the map's end node
        encounter_portrait: Opaque portrait handle for encounters, set lazily
    """

    def __init__(self, x: int, y: int):
        self.point = Point(x, y)
        self.distance_since_encounter = UNRESOLVED
        self.is_boss = False
        self.encounter_portrait: Optional[Any] = None

        self._parents: List["MapNode"] = []
        self._children: List["MapNode"] = []

    @classmethod
    def at(cls, point) -> "MapNode":
        return cls(point.x, point.y)

    @property
    def x(self) -> int:
        return self.point.x

    @property
    def y(self) -> int:
        return self.point.y

    def key(self) -> str:
        return self.point.key()

    def equals(self, other) -> bool:
        return self.point.equals(other)

    @property
    def is_encounter(self) -> bool:
        return self.distance_since_encounter == 0

    @property
    def parents(self) -> List["MapNode"]:
        return list(self._parents)

    @property
    def children(self) -> List["MapNode"]:
        return list(self._children)

    def add_parent(self, parent: "MapNode") -> None:
        """Add a direct parent; adding the same coordinate twice is a no-op."""
        if parent not in self._parents:
            self._parents.append(parent)

    def add_child(self, child: "MapNode") -> None:
        """Add a direct child; adding the same coordinate twice is a no-op."""
        if child not in self._children:
            self._children.append(child)

    def ancestors(self) -> Set[Point]:
        """Coordinates of every transitive parent of this node."""
        seen: Set[Point] = set()
        stack = list(self._parents)
        while stack:
            node = stack.pop()
            if node.point in seen:
                continue
            seen.add(node.point)
            stack.extend(node._parents)
        return seen

    def has_ancestor(self, point) -> bool:
        """Check whether ``point`` appears anywhere in this node's ancestry."""
        target = Point(point.x, point.y)
        seen: Set[Point] = set()
        stack = list(self._parents)
        while stack:
            node = stack.pop()
            if node.point == target:
                return True
            if node.point in seen:
                continue
            seen.add(node.point)
            stack.extend(node._parents)
        return False

    def __eq__(self, other) -> bool:
        if not isinstance(other, MapNode):
            return NotImplemented
        return self.point == other.point

    def __hash__(self) -> int:
        return hash(self.point)

    def __repr__(self) -> str:
        flags = ""
        if self.is_boss:
            flags = " boss"
        elif self.is_encounter:
            flags = " encounter"
        return f"MapNode({self.x}, {self.y}{flags})"


@dataclass(frozen=True, eq=False)
class PathSegment:
    """An edge between two nodes, revealed as one animated stroke.

    Segments compare equal regardless of direction.
    """
    n1: MapNode
    n2: MapNode

    def endpoints(self) -> frozenset:
        return frozenset((self.n1.point, self.n2.point))

    def __eq__(self, other) -> bool:
        if not isinstance(other, PathSegment):
            return NotImplemented
        return self.endpoints() == other.endpoints()

    def __hash__(self) -> int:
        return hash(self.endpoints())
