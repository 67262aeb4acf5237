"""
Core quest map generation functionality.
"""

from .alea_prng import AleaPRNG
from .errors import GraphConsistencyError, IncompletePathError, QuestMapError
from .point import Point
from .priority_queue import PriorityQueue
from .weighted_grid import GridPath, WeightedGrid
from .transitions import TransitionTable
from .map_node import MapNode, PathSegment
from .graph_builder import QuestGraph, QuestGraphBuilder
from .portraits import PortraitCatalog, PortraitProvider
from .reveal_scheduler import RevealPlan, RevealScheduler
from .timeline import FrameState, RevealTimeline
from .generator import QuestMap, QuestMapGenerator

__all__ = ['AleaPRNG', 'GraphConsistencyError', 'IncompletePathError', 'QuestMapError',
           'Point', 'PriorityQueue', 'GridPath', 'WeightedGrid', 'TransitionTable',
           'MapNode', 'PathSegment', 'QuestGraph', 'QuestGraphBuilder',
           'PortraitCatalog', 'PortraitProvider', 'RevealPlan', 'RevealScheduler',
           'FrameState', 'RevealTimeline', 'QuestMap', 'QuestMapGenerator']
