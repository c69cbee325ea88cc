"""Unit tests for the rotation engine."""

import numpy as np
import pytest

from hampath.engine.errors import InvariantViolation
from hampath.engine.graph import Graph, cells
from hampath.engine.groups import compute_groups, live_edges, path_from_goal, trace_path
from hampath.engine.rotation import (
    RotationCase,
    before,
    can_rotate,
    detect_rotation,
    reverse,
    try_move_start,
    try_rotate,
)
from hampath.engine.validation import check_structure, cycle_count


def state_of(graph):
    return (
        tuple((node.next, node.group, node.section_length) for node in graph.nodes),
        graph.path_is_blocked,
        graph.path_is_win,
        graph.start,
        graph.goal,
    )


def undirected(graph):
    return set(live_edges(graph))


def linked(size_x, size_y, links, *, goal, start):
    """Graph with the given next pointers; groups and flags are derived."""
    graph = Graph.empty(size_x, size_y)
    for i0, i1 in links.items():
        graph.nodes[i0].next = i1
    graph.goal = goal
    graph.start = start
    compute_groups(graph)
    trace_path(graph)
    check_structure(graph)
    return graph


# 3x3 boards, index = 3 * x + y. Each rotates cell (0, 0) or (1, 0).
CASE_BOARDS = {
    # zig-zag: 1 -> 4 on top, 3 -> 0 below
    RotationCase.ANTIPARALLEL: dict(
        links={8: 5, 5: 2, 2: 1, 1: 4, 4: 7, 7: 6, 6: 3, 3: 0},
        goal=8,
        start=0,
        coord=(0, 0),
        expected=(None, 0, 1, 4, 7, 2, 3, 6, 5),
    ),
    # path 2 -> 1 -> 0 -> 3 -> 6 beside the cycle 4 -> 7 -> 8 -> 5
    RotationCase.MERGE_CYCLE: dict(
        links={2: 1, 1: 0, 0: 3, 3: 6, 4: 7, 7: 8, 8: 5, 5: 4},
        goal=2,
        start=6,
        coord=(1, 0),
        expected=(3, 0, 1, 4, 5, 8, None, 6, 7),
    ),
    # 4 -> 1 leads round the board to 3 -> 0
    RotationCase.REVERSE_FORWARD: dict(
        links={4: 1, 1: 2, 2: 5, 5: 8, 8: 7, 7: 6, 6: 3, 3: 0},
        goal=4,
        start=0,
        coord=(0, 0),
        expected=(None, 0, 1, 6, 3, 2, 7, 8, 5),
    ),
    # 0 -> 3 leads round the board to 1 -> 4
    RotationCase.REVERSE_BACKWARD: dict(
        links={0: 3, 3: 6, 6: 7, 7: 8, 8: 5, 5: 2, 2: 1, 1: 4},
        goal=0,
        start=4,
        coord=(0, 0),
        expected=(1, 2, 5, 4, None, 8, 3, 6, 7),
    ),
}


@pytest.mark.parametrize("case", list(RotationCase), ids=lambda case: case.value)
def test_rotation_case_relinks(case):
    """Each rotation case produces the exact expected pointers."""
    board = CASE_BOARDS[case]
    graph = linked(3, 3, board["links"], goal=board["goal"], start=board["start"])

    plan = detect_rotation(graph, board["coord"])
    assert plan is not None
    assert plan.case is case

    assert try_rotate(graph, board["coord"])
    assert graph.next_pointers() == board["expected"]
    assert graph.goal == board["goal"]
    assert graph.start == board["start"]
    check_structure(graph)


def test_antiparallel_case_splits_a_cycle():
    board = CASE_BOARDS[RotationCase.ANTIPARALLEL]
    graph = linked(3, 3, board["links"], goal=board["goal"], start=board["start"])
    try_rotate(graph, board["coord"])
    assert path_from_goal(graph) == [8, 5, 2, 1, 0]
    assert cycle_count(graph) == 1
    assert not graph.path_is_win


@pytest.mark.parametrize(
    "case",
    [RotationCase.MERGE_CYCLE, RotationCase.REVERSE_FORWARD, RotationCase.REVERSE_BACKWARD],
    ids=lambda case: case.value,
)
def test_reversing_cases_end_on_a_full_path(case):
    """Merging or reversing rotations leave one path over all nine nodes."""
    board = CASE_BOARDS[case]
    graph = linked(3, 3, board["links"], goal=board["goal"], start=board["start"])
    try_rotate(graph, board["coord"])
    assert len(path_from_goal(graph)) == 9
    assert cycle_count(graph) == 0
    assert graph.path_is_win


def test_cell_without_edges_cannot_rotate():
    """An edgeless cell is rejected and nothing changes."""
    graph = Graph.empty(3, 3)
    before_state = state_of(graph)
    assert not can_rotate(graph, (0, 0))
    assert not try_rotate(graph, (0, 0))
    assert state_of(graph) == before_state


@pytest.mark.parametrize("coord", [(4, 0), (0, 4), (4, 4), (-1, 0), (0, -1), (9, 9)])
def test_out_of_range_cells_are_noops(coord):
    """Cells leaving the grid are never rotatable."""
    graph = Graph.zig_zag(5, 5)
    before_state = state_of(graph)
    assert not can_rotate(graph, coord)
    assert not try_rotate(graph, coord)
    assert state_of(graph) == before_state


def test_cell_with_side_edge_cannot_rotate():
    """The row-end cell of a zig-zag holds three edges and is rejected."""
    graph = Graph.zig_zag(5, 5)
    assert not can_rotate(graph, (3, 0))
    assert not try_rotate(graph, (3, 0))


def test_antiparallel_split_and_rejoin():
    """Rotating (0, 0) splits a cycle off; rotating again restores the path."""
    graph = Graph.zig_zag(5, 5)
    initial = graph.next_pointers()

    plan = detect_rotation(graph, (0, 0))
    assert plan is not None
    assert plan.case is RotationCase.ANTIPARALLEL

    assert try_rotate(graph, (0, 0))
    assert cycle_count(graph) == 1
    assert len(path_from_goal(graph)) == 17
    check_structure(graph)

    assert try_rotate(graph, (0, 0))
    assert graph.next_pointers() == initial
    assert graph.path_is_win


def test_double_rotation_restores_edges():
    """Every rotatable zig-zag cell is its own inverse up to edge direction."""
    reference = Graph.zig_zag(5, 4)
    edges = undirected(reference)
    rotatable = [coord for coord in cells(reference) if can_rotate(reference, coord)]
    assert rotatable

    for coord in rotatable:
        graph = Graph.zig_zag(5, 4)
        assert try_rotate(graph, coord)
        assert undirected(graph) != edges
        assert can_rotate(graph, coord)
        assert try_rotate(graph, coord)
        assert undirected(graph) == edges
        check_structure(graph)


def test_random_rotations_preserve_structure():
    """Any sequence of rotations keeps one path plus disjoint simple cycles."""
    rng = np.random.default_rng(1234)
    graph = Graph.zig_zag(6, 5)
    seen = set()
    for _ in range(600):
        coord = (int(rng.integers(5)), int(rng.integers(4)))
        plan = detect_rotation(graph, coord)
        before_state = state_of(graph)
        rotated = try_rotate(graph, coord)
        assert rotated == (plan is not None)
        if not rotated:
            assert state_of(graph) == before_state
            continue
        seen.add(plan.case)
        check_structure(graph)
        assert {i for i, node in enumerate(graph.nodes) if node.group == 0} == set(
            path_from_goal(graph)
        )
    assert RotationCase.ANTIPARALLEL in seen


def test_rotations_with_moving_start_reach_every_case():
    """Once the free end wanders, every rotation case shows up and structure holds."""
    seen = set()
    for seed in range(20):
        rng = np.random.default_rng(seed)
        graph = Graph.zig_zag(6, 6)
        for _ in range(500):
            try_move_start(graph, rng)
            coord = (int(rng.integers(5)), int(rng.integers(5)))
            plan = detect_rotation(graph, coord)
            if not try_rotate(graph, coord):
                continue
            seen.add(plan.case)
            check_structure(graph)
            assert graph.nodes[graph.start].next is None
    assert seen == set(RotationCase)


def test_goal_stays_the_path_head():
    """Rotations never give goal a predecessor."""
    rng = np.random.default_rng(7)
    graph = Graph.zig_zag(5, 5)
    for _ in range(300):
        try_rotate(graph, (int(rng.integers(4)), int(rng.integers(4))))
        assert all(node.next != graph.goal for node in graph.nodes)


def test_reverse_span():
    """reverse turns 5 -> 2 -> 1 into 1 -> 2 -> 5 and detaches 5."""
    graph = Graph.zig_zag(3, 3)
    assert path_from_goal(graph) == [8, 5, 2, 1, 4, 7, 6, 3, 0]
    reverse(graph, 5, 1)
    assert graph.nodes[1].next == 2
    assert graph.nodes[2].next == 5
    assert graph.nodes[5].next is None
    assert graph.nodes[8].next == 5


def test_reverse_single_node():
    """Reversing a one-node span just clears its pointer."""
    graph = Graph.zig_zag(3, 3)
    reverse(graph, 4, 4)
    assert graph.nodes[4].next is None


def test_reverse_unreachable_target_raises():
    """Reversing towards a node that cannot be reached is a corrupted-graph error."""
    graph = Graph.zig_zag(3, 3)
    initial = graph.next_pointers()
    with pytest.raises(InvariantViolation, match="not reachable"):
        reverse(graph, 0, 8)
    assert graph.next_pointers() == initial


def test_before():
    """before() follows next pointers, excluding the starting node."""
    graph = Graph.zig_zag(3, 3)
    assert before(graph, 8, 0)
    assert before(graph, 2, 4)
    assert not before(graph, 4, 2)
    assert not before(graph, 0, 8)
    assert not before(graph, 8, 8)
    assert not before(graph, None, 3)


def test_before_stops_on_cycles():
    """Walking a cycle ends once it returns to the start."""
    graph = Graph.zig_zag(5, 5)
    try_rotate(graph, (0, 0))
    cycle_node = graph.index(1, 0)
    path_node = graph.index(0, 2)
    assert not before(graph, cycle_node, path_node)
    assert before(graph, cycle_node, graph.index(4, 1))


def test_try_move_start_keeps_a_hamiltonian_path():
    """Moving the free end keeps the path covering the board."""
    rng = np.random.default_rng(3)
    graph = Graph.zig_zag(4, 4)
    moved = 0
    for _ in range(40):
        if try_move_start(graph, rng):
            moved += 1
        check_structure(graph)
        assert graph.nodes[graph.start].next is None
        assert len(path_from_goal(graph)) == 16
        assert path_from_goal(graph)[-1] == graph.start
    assert moved > 0


def test_try_move_start_rejects_non_tail_start():
    """start must be the free end of the path."""
    graph = Graph.zig_zag(3, 3)
    graph.start = 4
    with pytest.raises(InvariantViolation, match="free end"):
        try_move_start(graph, np.random.default_rng(0))
