"""Level generation package.

Turns the zig-zag starting path into a shuffled, partially blocked puzzle
whose baked-in solution stays reachable.
"""

from hampath.generation.config import DEFAULT_GENERATOR, DEFAULT_POLICY, GeneratorConfig, LevelPolicy
from hampath.generation.generator import (
    GenerationReport,
    Level,
    LevelGenerator,
    block_unused_edges,
    create_graph,
    join,
    shuffle,
)

__all__ = [
    "GeneratorConfig",
    "LevelPolicy",
    "DEFAULT_GENERATOR",
    "DEFAULT_POLICY",
    "GenerationReport",
    "Level",
    "LevelGenerator",
    "block_unused_edges",
    "create_graph",
    "join",
    "shuffle",
]
