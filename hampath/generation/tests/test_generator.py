"""Tests for the shuffle / join / block generation pipeline."""

import math

import numpy as np
import pytest

from hampath.core.logging import RecordingRunLogger
from hampath.engine.config import GridShape
from hampath.engine.graph import Graph
from hampath.engine.groups import group_count, live_edges, used_edges
from hampath.engine.rotation import try_rotate
from hampath.engine.validation import is_well_formed
from hampath.generation.config import GeneratorConfig, LevelPolicy
from hampath.generation.generator import (
    LevelGenerator,
    all_shuffle,
    block_unused_edges,
    create_graph,
    is_mixed,
    join,
    mixed_cells,
    shuffle,
    wander_start,
)


@pytest.fixture
def split_graph():
    graph = Graph.zig_zag(5, 5)
    assert try_rotate(graph, (0, 0))
    return graph


def _fast(seed: int, **overrides) -> GeneratorConfig:
    return GeneratorConfig(seed=seed, all_shuffle_passes=3, **overrides)


def test_shape_for_grows_with_level():
    """Extents widen within a step and grow by two rows between steps."""
    policy = LevelPolicy()
    shapes = [policy.shape_for(level) for level in range(5)]
    assert [(s.size_x, s.size_y) for s in shapes] == [(5, 5), (6, 5), (7, 5), (7, 7), (8, 7)]


def test_policy_clamp():
    policy = LevelPolicy(min_level=1, max_level=4)
    assert policy.clamp(0) == 1
    assert policy.clamp(3) == 3
    assert policy.clamp(10) == 4


def test_same_seed_same_level():
    """Seeded generators reproduce pointers and blocked edges exactly."""
    a = LevelGenerator(_fast(11)).create(0)
    b = LevelGenerator(_fast(11)).create(0)
    assert a.graph.next_pointers() == b.graph.next_pointers()
    assert sorted(a.graph.blocked_edges) == sorted(b.graph.blocked_edges)
    assert sorted(a.solution_edges) == sorted(b.solution_edges)


def test_generated_level_is_consistent():
    level = LevelGenerator(_fast(3)).create(1)
    graph = level.graph
    assert graph.extents == (6, 5)
    assert is_well_formed(graph)
    for i0, i1 in graph.blocked_edges:
        assert not level.solution_edges.has(i0, i1)


def test_blocked_count_matches_fraction():
    """floor(share * candidates) of the non-solution edges get blocked."""
    for seed in range(4):
        level = LevelGenerator(_fast(seed, blocked_fraction=0.3)).create(0)
        candidates = 40 - len(level.solution_edges)
        assert len(level.graph.blocked_edges) == math.floor(candidates * 0.3)
        assert level.report.blocked_edges == len(level.graph.blocked_edges)


def test_converged_level_has_full_solution():
    """Both joins converge, so the solution and the scrambled board are single paths."""
    for seed in range(4):
        level = LevelGenerator(_fast(seed)).create(0)
        assert level.report.converged
        assert level.report.join.converged
        assert level.report.rejoin.converged
        assert group_count(level.graph) == 1
        assert len(level.solution_edges) == 24


def test_unblocked_converged_level_is_won():
    level = LevelGenerator(_fast(8, blocked_fraction=0.0)).create(0)
    assert len(level.graph.blocked_edges) == 0
    assert level.report.converged
    assert level.graph.path_is_win


def test_degenerate_board_has_nothing_to_do():
    """A 1-wide board has no cells to rotate and every edge is on the solution."""
    generator = LevelGenerator(_fast(0))
    level = generator.build(GridShape(1, 4))
    assert level.report.shuffle_rotations == 0
    assert level.report.blocked_edges == 0
    assert level.report.converged
    assert level.graph.path_is_win
    assert level.level is None


def test_shuffle_counts_rotations():
    graph = Graph.zig_zag(5, 5)
    rotations = shuffle(graph, np.random.default_rng(4), factor=2)
    assert 0 < rotations <= 2 * 25
    assert is_well_formed(graph)


def test_shuffle_on_thin_board():
    graph = Graph.zig_zag(1, 5)
    assert shuffle(graph, np.random.default_rng(0)) == 0


def test_all_shuffle_keeps_structure():
    graph = Graph.zig_zag(6, 5)
    all_shuffle(graph, np.random.default_rng(2), passes=2)
    assert is_well_formed(graph)


def test_mixed_cells(split_graph):
    assert mixed_cells(Graph.zig_zag(5, 5)) == []
    assert (0, 0) in mixed_cells(split_graph)
    assert is_mixed(split_graph, (0, 0))
    assert not is_mixed(split_graph, (3, 3))
    assert not is_mixed(split_graph, (4, 4))


def test_join_reconnects_cycle(split_graph):
    """One merging rotation puts every node back on the path."""
    result = join(split_graph, np.random.default_rng(0))
    assert result.converged
    assert result.rotations >= 1
    assert group_count(split_graph) == 1
    assert split_graph.path_is_win


def test_join_on_whole_path_is_noop():
    graph = Graph.zig_zag(5, 5)
    result = join(graph, np.random.default_rng(0))
    assert result.passes == 0
    assert result.rotations == 0
    assert result.converged


def test_block_prefers_idle_edges(split_graph):
    """With prefer_idle, edges used by a live pointer are kept open while idle ones remain."""
    solution = used_edges(Graph.zig_zag(5, 5))
    count = block_unused_edges(
        split_graph, solution, 0.5, np.random.default_rng(7), prefer_idle=True
    )
    assert count == 8
    live = live_edges(split_graph)
    for i0, i1 in split_graph.blocked_edges:
        assert not live.has(i0, i1)
        assert not solution.has(i0, i1)


def test_block_full_fraction(split_graph):
    solution = used_edges(Graph.zig_zag(5, 5))
    count = block_unused_edges(split_graph, solution, 1.0, np.random.default_rng(0))
    assert count == 16
    assert len(split_graph.blocked_edges) == 16


def test_wander_start_keeps_structure():
    graph = Graph.zig_zag(5, 5)
    wander_start(graph, np.random.default_rng(9), steps=20)
    assert is_well_formed(graph)
    assert graph.nodes[graph.start].next is None


def test_wander_generation_is_consistent():
    level = LevelGenerator(_fast(5, wander_start_steps=10)).create(0)
    assert is_well_formed(level.graph)
    assert level.report.wander_moves >= 0


def test_generation_logs_metrics():
    logger = RecordingRunLogger()
    level = LevelGenerator(_fast(1), logger=logger).create(2)
    assert logger.params["level"] == 2
    assert logger.params["size_x"] == 7
    assert logger.metric("generation/blocked_edges") == float(level.report.blocked_edges)
    assert logger.metric("generation/converged") == 1.0
    assert all(step == 2 for _, _, step in logger.metrics)


def test_create_graph_wrapper():
    graph = create_graph(0, seed=21)
    assert graph.extents == (5, 5)
    assert is_well_formed(graph)
