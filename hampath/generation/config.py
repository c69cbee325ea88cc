"""Configuration dataclasses for level generation."""

from __future__ import annotations

from dataclasses import dataclass

from hampath.engine.config import GridShape


@dataclass(frozen=True)
class LevelPolicy:
    """
    Maps a level number to grid extents.

    The board grows by `size_step` rows every `levels_per_step` levels and
    is `level % levels_per_step` columns wider than it is tall.
    """

    base_size: int = 5
    size_step: int = 2
    levels_per_step: int = 3
    min_level: int = 0
    max_level: int = 30

    def __post_init__(self) -> None:
        if self.base_size <= 0:
            raise ValueError(f"base_size must be positive, got {self.base_size}")
        if self.size_step < 0:
            raise ValueError(f"size_step must be non-negative, got {self.size_step}")
        if self.levels_per_step <= 0:
            raise ValueError(f"levels_per_step must be positive, got {self.levels_per_step}")
        if self.min_level < 0:
            raise ValueError(f"min_level must be non-negative, got {self.min_level}")
        if self.max_level < self.min_level:
            raise ValueError(
                f"max_level ({self.max_level}) must be >= min_level ({self.min_level})"
            )

    def shape_for(self, level: int) -> GridShape:
        if level < 0:
            raise ValueError(f"level must be non-negative, got {level}")
        size_y = self.base_size + self.size_step * (level // self.levels_per_step)
        size_x = size_y + level % self.levels_per_step
        return GridShape(size_x, size_y)

    def clamp(self, level: int) -> int:
        return max(self.min_level, min(self.max_level, level))


@dataclass(frozen=True)
class GeneratorConfig:
    """Knobs for the shuffle / join / block pipeline.

    Attributes:
        seed: Seed for the default random generator (None draws fresh entropy)
        shuffle_factor: Random rotation attempts per node in the first shuffle
        all_shuffle_passes: Full-board passes in random order before blocking
        max_join_passes: Upper bound on join passes before giving up
        blocked_fraction: Share of non-solution edges that get blocked
        prefer_idle_edges: Block edges no live pointer uses before live ones
        wander_start_steps: Random moves of the path's free end before shuffling
    """

    seed: int | None = None
    shuffle_factor: int = 7
    all_shuffle_passes: int = 12
    max_join_passes: int = 64
    blocked_fraction: float = 0.5
    prefer_idle_edges: bool = False
    wander_start_steps: int = 0

    def __post_init__(self) -> None:
        if self.shuffle_factor < 0:
            raise ValueError(f"shuffle_factor must be non-negative, got {self.shuffle_factor}")
        if self.all_shuffle_passes < 0:
            raise ValueError(
                f"all_shuffle_passes must be non-negative, got {self.all_shuffle_passes}"
            )
        if self.max_join_passes <= 0:
            raise ValueError(f"max_join_passes must be positive, got {self.max_join_passes}")
        if not 0.0 <= self.blocked_fraction <= 1.0:
            raise ValueError(f"blocked_fraction must be in [0, 1], got {self.blocked_fraction}")
        if self.wander_start_steps < 0:
            raise ValueError(
                f"wander_start_steps must be non-negative, got {self.wander_start_steps}"
            )


DEFAULT_POLICY = LevelPolicy()
DEFAULT_GENERATOR = GeneratorConfig()


__all__ = ["LevelPolicy", "GeneratorConfig", "DEFAULT_POLICY", "DEFAULT_GENERATOR"]
