"""Exceptions raised by quest map generation."""


class QuestMapError(Exception):
    """Base class for quest map generation errors."""


class IncompletePathError(QuestMapError):
    """A grid search did not reach its requested end point."""

    def __init__(self, path):
        self.path = path
        last = path.points[-1].key() if path.points else "nothing"
        super().__init__(
            f"Path from {path.start.key()} to {path.end.key()} stopped at {last}"
        )


class GraphConsistencyError(QuestMapError):
    """The transition table references a coordinate with no node."""
