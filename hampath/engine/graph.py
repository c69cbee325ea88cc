from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple

from hampath.engine.config import GridShape
from hampath.engine.pair_set import PairSet

Coord = Tuple[int, int]


@dataclass(slots=True)
class Node:
    """
    One lattice point of the puzzle.

    `next` is the single outgoing edge of the path/cycle structure; `group`
    and `section_length` are derived and rewritten wholesale by the group
    engine after every mutation.
    """

    coord: Coord
    next: int | None = None
    group: int | None = 0
    section_length: int = 1


@dataclass
class Graph:
    """
    Grid graph holding one directed path (rooted at `goal`) plus zero or
    more disjoint cycles covering the remaining nodes.

    Nodes are laid out column-major: index = x * size_y + y.
    """

    nodes: list[Node]
    extents: Coord
    start: int = 0
    goal: int = 0
    blocked_edges: PairSet = field(default_factory=PairSet)
    path_is_blocked: bool = False
    path_is_win: bool = False

    @staticmethod
    def empty(size_x: int, size_y: int) -> "Graph":
        """Create the lattice with no edges at all."""
        shape = GridShape(size_x, size_y)
        nodes = [Node(coord=(x, y)) for x in range(shape.size_x) for y in range(shape.size_y)]
        return Graph(nodes=nodes, extents=(shape.size_x, shape.size_y))

    @staticmethod
    def zig_zag(size_x: int, size_y: int) -> "Graph":
        """Create the lattice covered by a boustrophedon Hamiltonian path."""
        from hampath.engine.groups import compute_groups, trace_path

        graph = Graph.empty(size_x, size_y)
        generate_zig_zag_path(graph)
        compute_groups(graph)
        trace_path(graph)
        return graph

    @property
    def shape(self) -> GridShape:
        return GridShape(*self.extents)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def index(self, x: int, y: int) -> int:
        return x * self.extents[1] + y

    def next_pointers(self) -> Tuple[int | None, ...]:
        return tuple(node.next for node in self.nodes)


def node_index_from_coord(graph: Graph, x: int, y: int) -> int | None:
    """Return the node index at lattice position (x, y), or None if outside the grid."""
    if x < 0 or y < 0:
        return None
    if x >= graph.extents[0] or y >= graph.extents[1]:
        return None
    return x * graph.extents[1] + y


def cell_corners(graph: Graph, coord: Coord) -> Tuple[int, int, int, int] | None:
    """Corner indices (00, 10, 01, 11) of the 2x2 cell at `coord`, or None if it leaves the grid."""
    x, y = coord
    i00 = node_index_from_coord(graph, x, y)
    i10 = node_index_from_coord(graph, x + 1, y)
    i01 = node_index_from_coord(graph, x, y + 1)
    i11 = node_index_from_coord(graph, x + 1, y + 1)
    if i00 is None or i10 is None or i01 is None or i11 is None:
        return None
    return i00, i10, i01, i11


def cells(graph: Graph) -> list[Coord]:
    """Lower-left corners of every 2x2 cell inside the grid."""
    size_x, size_y = graph.extents
    return [(x, y) for x in range(size_x - 1) for y in range(size_y - 1)]


def grid_edges(graph: Graph) -> Iterable[Tuple[int, int]]:
    """Every lattice-adjacent node pair, horizontal edges first."""
    size_x, size_y = graph.extents
    for x in range(size_x - 1):
        for y in range(size_y):
            yield graph.index(x, y), graph.index(x + 1, y)
    for x in range(size_x):
        for y in range(size_y - 1):
            yield graph.index(x, y), graph.index(x, y + 1)


def are_adjacent(graph: Graph, i0: int, i1: int) -> bool:
    x0, y0 = graph.nodes[i0].coord
    x1, y1 = graph.nodes[i1].coord
    return abs(x0 - x1) + abs(y0 - y1) == 1


def generate_zig_zag_path(graph: Graph) -> None:
    """
    Point every node along a zig-zag covering the whole grid.

    Even rows run towards x = 0, odd rows towards the right edge, and each
    row ends with a step down. Node (0, 0) is the free tail; the head of the
    path becomes `goal`.
    """
    size_x, size_y = graph.extents
    for node in graph.nodes:
        x, y = node.coord
        if y % 2 == 0:
            if x > 0:
                node.next = graph.index(x - 1, y)
            elif y > 0:
                node.next = graph.index(x, y - 1)
            else:
                node.next = None
        else:
            if x < size_x - 1:
                node.next = graph.index(x + 1, y)
            elif y > 0:
                node.next = graph.index(x, y - 1)
            else:
                node.next = None

    graph.start = 0
    if size_y % 2 == 0:
        graph.goal = size_y - 1
    else:
        graph.goal = size_x * size_y - 1


__all__ = [
    "Coord",
    "Node",
    "Graph",
    "node_index_from_coord",
    "cell_corners",
    "cells",
    "grid_edges",
    "are_adjacent",
    "generate_zig_zag_path",
]
