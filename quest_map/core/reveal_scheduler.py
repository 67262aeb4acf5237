"""
Staged reveal of a quest graph.

Walks the graph level by level from the start node and groups nodes and
edges into batches. Everything in one batch is revealed together; batches are
revealed in order. Encounters are placed during the same walk, since their
likelihood depends on how far the route has gone since the last one.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

import structlog

from ..utils.random import get_prng
from .alea_prng import AleaPRNG
from .graph_builder import QuestGraph
from .map_node import UNRESOLVED, MapNode, PathSegment
from .point import Point
from .portraits import PortraitProvider

logger = structlog.get_logger()

DEFAULT_ENCOUNTER_BASE_CHANCE = 0.1
DEFAULT_ENCOUNTER_STEP_CHANCE = 0.1


@dataclass
class RevealPlan:
    """Parallel node and edge batches, one entry per reveal step.

    Batch 0 holds only the start node and no edges. A node or an edge (in
    either direction) appears in exactly one batch.
    """
    node_batches: List[List[MapNode]] = field(default_factory=list)
    edge_batches: List[List[PathSegment]] = field(default_factory=list)

    @property
    def step_count(self) -> int:
        return len(self.node_batches)

    def nodes(self) -> List[MapNode]:
        return [node for batch in self.node_batches for node in batch]

    def edges(self) -> List[PathSegment]:
        return [edge for batch in self.edge_batches for edge in batch]

    def encounters(self) -> List[MapNode]:
        """Staged nodes holding an encounter, boss included, in reveal order."""
        return [node for node in self.nodes() if node.is_encounter]

    def batch_index(self, node) -> Optional[int]:
        """Step in which ``node`` is revealed, or None if it never is."""
        point = Point(node.x, node.y)
        for index, batch in enumerate(self.node_batches):
            if any(staged.point == point for staged in batch):
                return index
        return None


class RevealScheduler:
    """
    Partitions a QuestGraph into reveal batches and places encounters.

    The graph must already be acyclic and rooted at its start node, as
    produced by QuestGraphBuilder; no cycle detection happens here.
    """

    def __init__(self, prng: Optional[AleaPRNG] = None,
                 portraits: Optional[PortraitProvider] = None,
                 encounter_base_chance: float = DEFAULT_ENCOUNTER_BASE_CHANCE,
                 encounter_step_chance: float = DEFAULT_ENCOUNTER_STEP_CHANCE):
        """
        Args:
            prng: Random source for encounter placement (shared PRNG if omitted)
            portraits: Portrait provider for encounters; portraits stay None without one
            encounter_base_chance: Encounter chance right after an encounter
            encounter_step_chance: Extra chance per step since the last encounter
        """
        self._prng = prng or get_prng()
        self.portraits = portraits
        self.encounter_base_chance = encounter_base_chance
        self.encounter_step_chance = encounter_step_chance

    def _attach_portrait(self, node: MapNode) -> None:
        if self.portraits is None:
            return

        def on_ready(portrait):
            node.encounter_portrait = portrait

        self.portraits.request_portrait(on_ready)

    def _place_encounter(self, parent: MapNode, child: MapNode) -> None:
        """Maybe turn ``child`` into an encounter when reached from ``parent``.

        Only evaluated while the child is unresolved or when this route is
        shorter than the one that resolved it.
        """
        gap = parent.distance_since_encounter
        if child.distance_since_encounter != UNRESOLVED and child.distance_since_encounter <= gap + 1:
            return

        chance = self.encounter_step_chance * gap + self.encounter_base_chance
        if self._prng.random() < chance:
            child.distance_since_encounter = 0
            self._attach_portrait(child)
        else:
            child.distance_since_encounter = max(gap + 1, 1)

    def schedule(self, graph: QuestGraph) -> RevealPlan:
        """
        Stage every node and edge reachable from the graph's start.

        Args:
            graph: Graph built by QuestGraphBuilder

        Returns:
            RevealPlan with parallel node and edge batches
        """
        start, end = graph.start, graph.end

        start.distance_since_encounter = 1
        end.distance_since_encounter = 0
        end.is_boss = True
        self._attach_portrait(end)

        plan = RevealPlan()
        staged_nodes: Set[Point] = {start.point}
        staged_edges: Set[PathSegment] = set()

        current_nodes: List[MapNode] = [start]
        current_edges: List[PathSegment] = []

        while current_nodes or current_edges:
            plan.node_batches.append(current_nodes)
            plan.edge_batches.append(current_edges)

            next_nodes: List[MapNode] = []
            next_edges: List[PathSegment] = []
            next_seen: Set[Point] = set()

            for node in current_nodes:
                for child in node.children:
                    if child.point not in staged_nodes and child.point not in next_seen:
                        next_seen.add(child.point)
                        next_nodes.append(child)

                    segment = PathSegment(node, child)
                    if segment not in staged_edges:
                        staged_edges.add(segment)
                        next_edges.append(segment)

                    self._place_encounter(node, child)

            staged_nodes.update(next_seen)
            current_nodes, current_edges = next_nodes, next_edges

        logger.info("Scheduled reveal", steps=plan.step_count, nodes=len(staged_nodes),
                    edges=len(staged_edges), encounters=len(plan.encounters()))
        return plan
