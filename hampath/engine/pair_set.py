"""Unordered pair membership set used for blocked and solution edges."""

from __future__ import annotations

from typing import Iterable, Iterator, Tuple

Pair = Tuple[int, int]


def canonical(i0: int, i1: int) -> Pair:
    """Return the pair ordered so the first index is the smaller one."""
    if i1 < i0:
        return (i1, i0)
    return (i0, i1)


class PairSet:
    """
    Set of undirected index pairs.

    Pairs are kept in a list (the order renderers iterate) with a position
    index on the side, so add/remove/has are all constant time. Removal
    swaps the last pair into the freed slot, so ordering is not stable.
    """

    def __init__(self) -> None:
        self._pairs: list[Pair] = []
        self._slots: dict[Pair, int] = {}

    @staticmethod
    def from_pairs(pairs: Iterable[Pair]) -> "PairSet":
        result = PairSet()
        for i0, i1 in pairs:
            result.add(i0, i1)
        return result

    @property
    def pairs(self) -> list[Pair]:
        return list(self._pairs)

    def add(self, i0: int, i1: int) -> None:
        pair = canonical(int(i0), int(i1))
        if pair in self._slots:
            return
        self._slots[pair] = len(self._pairs)
        self._pairs.append(pair)

    def remove(self, i0: int, i1: int) -> None:
        pair = canonical(int(i0), int(i1))
        slot = self._slots.pop(pair, None)
        if slot is None:
            return
        last = self._pairs.pop()
        if slot < len(self._pairs):
            self._pairs[slot] = last
            self._slots[last] = slot

    def has(self, i0: int, i1: int) -> bool:
        return canonical(i0, i1) in self._slots

    def copy(self) -> "PairSet":
        return PairSet.from_pairs(self._pairs)

    def shuffled(self, rng) -> list[Pair]:
        """Return the pairs in an order drawn from `rng` (a numpy Generator)."""
        order = rng.permutation(len(self._pairs))
        return [self._pairs[int(i)] for i in order]

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return self.has(pair[0], pair[1])

    def __iter__(self) -> Iterator[Pair]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"PairSet({self._pairs!r})"


__all__ = ["PairSet", "Pair", "canonical"]
