"""Grid coordinates."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """Immutable integer grid coordinate, hashable and compared by value."""

    x: int
    y: int

    def key(self) -> str:
        """Canonical identifier used to index per-coordinate tables."""
        return f"{self.x},{self.y}"

    def equals(self, other) -> bool:
        """Compare coordinates with any object exposing ``x`` and ``y``."""
        return self.x == other.x and self.y == other.y

    def __iter__(self):
        yield self.x
        yield self.y

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


def manhattan_distance(a, b) -> int:
    """Taxicab distance between two coordinates."""
    return abs(a.x - b.x) + abs(a.y - b.y)
