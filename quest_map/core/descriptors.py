"""Plain data descriptions of a reveal plan for rendering code."""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from .map_node import MapNode, PathSegment
from .reveal_scheduler import RevealPlan


class NodeDescriptor(BaseModel):
    """A node as seen by a renderer."""

    x: int = Field(..., description="Grid column")
    y: int = Field(..., description="Grid row")
    encounter: bool = Field(False, description="Node holds an encounter")
    boss: bool = Field(False, description="Node is the boss at the end of the map")
    portrait: Optional[str] = Field(None, description="Portrait handle, stringified")


class EdgeDescriptor(BaseModel):
    """An edge as seen by a renderer, drawn from source to target."""

    source: Tuple[int, int] = Field(..., description="Grid coordinate the stroke starts at")
    target: Tuple[int, int] = Field(..., description="Grid coordinate the stroke ends at")


class RevealDescriptor(BaseModel):
    """Reveal batches, one entry per step."""

    node_batches: List[List[NodeDescriptor]] = Field(default_factory=list)
    edge_batches: List[List[EdgeDescriptor]] = Field(default_factory=list)

    @property
    def step_count(self) -> int:
        return len(self.node_batches)


def describe_node(node: MapNode) -> NodeDescriptor:
    portrait = node.encounter_portrait
    return NodeDescriptor(
        x=node.x,
        y=node.y,
        encounter=node.is_encounter,
        boss=node.is_boss,
        portrait=str(portrait) if portrait is not None else None,
    )


def describe_edge(segment: PathSegment) -> EdgeDescriptor:
    return EdgeDescriptor(
        source=(segment.n1.x, segment.n1.y),
        target=(segment.n2.x, segment.n2.y),
    )


def describe_plan(plan: RevealPlan) -> RevealDescriptor:
    """Snapshot a reveal plan as serialisable descriptors."""
    return RevealDescriptor(
        node_batches=[[describe_node(node) for node in batch] for batch in plan.node_batches],
        edge_batches=[[describe_edge(edge) for edge in batch] for batch in plan.edge_batches],
    )
