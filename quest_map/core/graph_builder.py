"""
Quest graph construction.

Turns a transition table merged from one or more grid paths into a
directed acyclic graph of MapNodes rooted at the start point and funnelling
into the end point. Nodes are discovered breadth-first from the start; an
edge to a neighbour is kept only if the neighbour is not already an ancestor
and can still reach the end without passing back through the current node
or its ancestors.
"""

from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterable, List, Set

import structlog

from .errors import GraphConsistencyError
from .map_node import MapNode, PathSegment
from .point import Point
from .transitions import TransitionTable

logger = structlog.get_logger()


@dataclass
class QuestGraph:
    """Node registry for one generated map.

    ``nodes`` holds exactly one MapNode per discovered coordinate, keyed by
    the coordinate's key string.
    """
    nodes: Dict[str, MapNode]
    start: MapNode
    end: MapNode

    def node_at(self, point) -> MapNode:
        return self.nodes[Point(point.x, point.y).key()]

    def reachable_nodes(self) -> List[MapNode]:
        """Nodes reachable from start through child links, depth-first."""
        seen: Set[Point] = {self.start.point}
        order = [self.start]
        stack = [self.start]
        while stack:
            node = stack.pop()
            for child in reversed(node.children):
                if child.point not in seen:
                    seen.add(child.point)
                    order.append(child)
                    stack.append(child)
        return order

    def edges(self) -> List[PathSegment]:
        """Every parent to child link among the reachable nodes."""
        return [
            PathSegment(node, child)
            for node in self.reachable_nodes()
            for child in node.children
        ]

    def __len__(self) -> int:
        return len(self.nodes)


def can_reach_end(start: Point, end: Point, transitions: TransitionTable,
                  blocked: Iterable[Point] = ()) -> bool:
    """
    Check whether ``end`` is reachable from ``start`` through the transition table.

    Depth-first with an explicit stack; points in ``blocked`` are never
    entered. A point already explored in one branch is not explored again in
    a sibling branch, since whatever it could reach has been pushed already.

    Args:
        start: Point to search from
        end: Point to reach
        transitions: Table of allowed moves
        blocked: Points the route may not pass through

    Returns:
        True if a route exists, otherwise False
    """
    if start == end:
        return True

    visited: Set[Point] = set(blocked)
    visited.add(start)
    stack = [start]
    while stack:
        point = stack.pop()
        for neighbor in transitions.neighbors(point):
            if neighbor in visited:
                continue
            if neighbor == end:
                return True
            visited.add(neighbor)
            stack.append(neighbor)
    return False


class QuestGraphBuilder:
    """Builds a QuestGraph from a transition table."""

    def __init__(self, transitions: TransitionTable):
        self.transitions = transitions

    def _node_for(self, nodes: Dict[str, MapNode], point: Point) -> MapNode:
        """Registered node at ``point``, registering a new one if needed."""
        node = nodes.get(point.key())
        if node is None:
            node = nodes[point.key()] = MapNode.at(point)
        return node

    def build(self, start, end) -> QuestGraph:
        """
        Build the quest graph between two points.

        Args:
            start: Start coordinate
            end: End coordinate

        Returns:
            QuestGraph whose reachable part is acyclic, rooted at start, with
            every kept node able to reach end through the transition table.

        Raises:
            GraphConsistencyError: If a queued coordinate has no node
        """
        start = Point(start.x, start.y)
        end = Point(end.x, end.y)

        nodes: Dict[str, MapNode] = {start.key(): MapNode.at(start)}
        nodes.setdefault(end.key(), MapNode.at(end))

        pending = deque([start])
        scheduled: Set[Point] = {start}

        while pending:
            point = pending.popleft()

            current = nodes.get(point.key())
            if current is None:
                logger.error("Node reference is uninitialized", key=point.key(),
                             start=start.key(), end=end.key(),
                             transitions=len(self.transitions))
                raise GraphConsistencyError(f"No node for coordinate {point.key()}")

            # The current node and all its ancestors are off limits for the
            # reachability check
            blocked = current.ancestors()
            blocked.add(current.point)

            for neighbor in self.transitions.neighbors(point):
                child = self._node_for(nodes, neighbor)

                if current.has_ancestor(neighbor):
                    continue
                if not can_reach_end(neighbor, end, self.transitions, blocked):
                    continue

                child.add_parent(current)
                current.add_child(child)

                # Each coordinate is expanded once; ancestors only grow, so a
                # later expansion would link a subset of the same neighbours
                if neighbor != end and neighbor not in scheduled:
                    scheduled.add(neighbor)
                    pending.append(neighbor)

        graph = QuestGraph(nodes=nodes, start=nodes[start.key()], end=nodes[end.key()])
        logger.info("Built quest graph", start=start.key(), end=end.key(),
                    nodes=len(graph.reachable_nodes()), edges=len(graph.edges()))
        return graph
