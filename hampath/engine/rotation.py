"""
The rotation move: swap which pair of parallel edges a 2x2 cell uses.

A rotation turns two parallel unit edges of a cell (bottom and top) into
the other two (left and right), reversing a span of the path when needed
so the graph remains one simple path plus disjoint simple cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from hampath.engine.constants import DIRS
from hampath.engine.errors import InvariantViolation
from hampath.engine.graph import Coord, Graph, cell_corners, node_index_from_coord
from hampath.engine.groups import compute_groups, trace_path


class RotationCase(Enum):
    """Configuration detected inside a rotatable cell (after canonicalisation)."""

    ANTIPARALLEL = "antiparallel"  # top edge already runs 11 -> 01
    MERGE_CYCLE = "merge_cycle"  # top edge lies on a cycle
    REVERSE_FORWARD = "reverse_forward"  # path visits 00 -> 10 ... 01 -> 11
    REVERSE_BACKWARD = "reverse_backward"  # path visits 01 -> 11 ... 00 -> 10


@dataclass(frozen=True)
class RotationPlan:
    case: RotationCase
    i00: int
    i10: int
    i01: int
    i11: int


def _canonical_corners(graph: Graph, coord: Coord) -> tuple[int, int, int, int] | None:
    corners = cell_corners(graph, coord)
    if corners is None:
        return None
    i00, i10, i01, i11 = corners
    nodes = graph.nodes

    # Aim for an edge 00 -> 10, on the main path rather than a cycle if possible.
    if nodes[i00].next == i01 or nodes[i01].next == i00:
        i10, i01 = i01, i10

    if nodes[i01].group == 0:
        i00, i01 = i01, i00
        i10, i11 = i11, i10

    if nodes[i10].next == i00:
        i00, i10 = i10, i00
        i01, i11 = i11, i01

    return i00, i10, i01, i11


def detect_rotation(graph: Graph, coord: Coord) -> RotationPlan | None:
    """Classify the cell at `coord`; None when it cannot be rotated."""
    corners = _canonical_corners(graph, coord)
    if corners is None:
        return None
    i00, i10, i01, i11 = corners
    node00 = graph.nodes[i00]
    node10 = graph.nodes[i10]
    node01 = graph.nodes[i01]
    node11 = graph.nodes[i11]

    # Two parallel edges: 00 -> 10, and 01 -> 11 or 11 -> 01.
    if node00.next != i10:
        return None
    if node01.next != i11 and node11.next != i01:
        return None
    if node01.next == i00:
        return None
    if node10.next == i11:
        return None
    if node11.next == i10:
        return None

    if node11.next == i01:
        case = RotationCase.ANTIPARALLEL
    elif node01.group != 0:
        case = RotationCase.MERGE_CYCLE
    elif before(graph, i10, i01):
        case = RotationCase.REVERSE_FORWARD
    else:
        case = RotationCase.REVERSE_BACKWARD
    return RotationPlan(case=case, i00=i00, i10=i10, i01=i01, i11=i11)


def can_rotate(graph: Graph, coord: Coord) -> bool:
    return detect_rotation(graph, coord) is not None


def try_rotate(graph: Graph, coord: Coord) -> bool:
    """
    Rotate the cell whose lower-left corner is `coord`.

    Returns False, leaving the graph untouched, when the cell is outside the
    grid or does not hold a rotatable pair of edges. On success groups are
    recomputed and the path retraced.
    """
    plan = detect_rotation(graph, coord)
    if plan is None:
        return False

    nodes = graph.nodes
    i00, i10, i01, i11 = plan.i00, plan.i10, plan.i01, plan.i11

    if plan.case is RotationCase.ANTIPARALLEL:
        nodes[i00].next = i01
        nodes[i11].next = i10
    elif plan.case is RotationCase.MERGE_CYCLE:
        reverse(graph, i11, i01)
        nodes[i00].next = i01
        nodes[i11].next = i10
    elif plan.case is RotationCase.REVERSE_FORWARD:
        reverse(graph, i10, i01)
        nodes[i00].next = i01
        nodes[i10].next = i11
    else:
        reverse(graph, i11, i00)
        nodes[i01].next = i00
        nodes[i11].next = i10

    compute_groups(graph)
    trace_path(graph)
    return True


def before(graph: Graph, i0: int | None, i1: int) -> bool:
    """True if walking forward from `i0` (exclusive) reaches `i1`."""
    if i0 is None:
        return False
    nodes = graph.nodes
    i = nodes[i0].next
    while i is not None and i != i0:
        if i == i1:
            return True
        i = nodes[i].next
    return False


def reverse(graph: Graph, i0: int, i1: int) -> None:
    """
    Reverse the chain i0 -> ... -> i1 so it reads i1 -> ... -> i0.

    `i0.next` ends up None; callers relink it straight away.
    """
    nodes = graph.nodes
    span = [i0]
    while span[-1] != i1:
        following = nodes[span[-1]].next
        if following is None or len(span) >= len(nodes):
            raise InvariantViolation(f"node {i1} is not reachable from node {i0}")
        span.append(following)

    prev: int | None = None
    for i in span:
        nodes[i].next = prev
        prev = i


def try_move_start(graph: Graph, rng) -> bool:
    """
    Move the free tail of the path (`start`) to a new node.

    The tail is attached to a random lattice neighbour on the main path; the
    neighbour's old successor becomes the new tail once the span between them
    is reversed. `rng` is a numpy Generator.
    """
    nodes = graph.nodes
    i0 = graph.start
    if nodes[i0].next is not None:
        raise InvariantViolation(f"start node {i0} is not the free end of the path")

    x, y = nodes[i0].coord
    candidates: list[int] = []
    for dx, dy in DIRS:
        i1 = node_index_from_coord(graph, x + dx, y + dy)
        if i1 is None:
            continue
        if nodes[i1].next == i0 or nodes[i1].group != 0:
            continue
        candidates.append(i1)

    if not candidates:
        return False

    i1 = candidates[int(rng.integers(len(candidates)))]
    i2 = nodes[i1].next
    if i2 is None:
        return False

    nodes[i1].next = i0
    reverse(graph, i2, i0)
    graph.start = i2

    compute_groups(graph)
    trace_path(graph)
    return True


__all__ = [
    "RotationCase",
    "RotationPlan",
    "detect_rotation",
    "can_rotate",
    "try_rotate",
    "before",
    "reverse",
    "try_move_start",
]
