from __future__ import annotations

from .config import GridShape, SessionConfig
from .errors import InvariantViolation
from .graph import Graph, Node, node_index_from_coord
from .groups import compute_groups, compute_sub_path_lengths, trace_path, used_edges
from .pair_set import PairSet
from .rotation import RotationCase, can_rotate, try_rotate
from .session import GameState, PuzzleSession
from .snapshot import GraphSnapshot, snapshot

__all__ = [
    "GridShape",
    "SessionConfig",
    "InvariantViolation",
    "Graph",
    "Node",
    "node_index_from_coord",
    "compute_groups",
    "compute_sub_path_lengths",
    "trace_path",
    "used_edges",
    "PairSet",
    "RotationCase",
    "can_rotate",
    "try_rotate",
    "GameState",
    "PuzzleSession",
    "GraphSnapshot",
    "snapshot",
]
