from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from hampath.engine.constants import NO_NODE
from hampath.engine.graph import Graph


@dataclass(frozen=True)
class GraphSnapshot:
    """
    Read-only per-frame view of a graph for renderers.

    Absent `next` pointers and groups are encoded as NO_NODE (-1) in the
    integer arrays.
    """

    extents: Tuple[int, int]
    coords: np.ndarray  # (n, 2) int32
    next: np.ndarray  # (n,) int32
    group: np.ndarray  # (n,) int32
    section_length: np.ndarray  # (n,) int32
    blocked: np.ndarray  # (k, 2) int32
    path_is_blocked: bool
    path_is_win: bool

    @property
    def node_count(self) -> int:
        return int(self.coords.shape[0])

    def section_fraction(self) -> np.ndarray:
        """Section length as a fraction of the node count, for colour gradients."""
        if self.node_count == 0:
            return np.zeros(0, dtype=np.float32)
        return self.section_length.astype(np.float32) / np.float32(self.node_count)

    def edge_endpoints(self) -> np.ndarray:
        """(m, 2) array of directed (from, to) pairs for every live `next` pointer."""
        sources = np.flatnonzero(self.next != NO_NODE)
        return np.stack([sources, self.next[sources]], axis=1).astype(np.int32)


def snapshot(graph: Graph) -> GraphSnapshot:
    count = len(graph.nodes)
    coords = np.zeros((count, 2), dtype=np.int32)
    nexts = np.full(count, NO_NODE, dtype=np.int32)
    groups = np.full(count, NO_NODE, dtype=np.int32)
    lengths = np.zeros(count, dtype=np.int32)

    for idx, node in enumerate(graph.nodes):
        coords[idx] = node.coord
        if node.next is not None:
            nexts[idx] = node.next
        if node.group is not None:
            groups[idx] = node.group
        lengths[idx] = node.section_length

    pairs = graph.blocked_edges.pairs
    blocked = np.array(pairs, dtype=np.int32).reshape(len(pairs), 2)

    for array in (coords, nexts, groups, lengths, blocked):
        array.setflags(write=False)

    return GraphSnapshot(
        extents=graph.extents,
        coords=coords,
        next=nexts,
        group=groups,
        section_length=lengths,
        blocked=blocked,
        path_is_blocked=graph.path_is_blocked,
        path_is_win=graph.path_is_win,
    )


__all__ = ["GraphSnapshot", "snapshot"]
