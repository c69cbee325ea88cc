from __future__ import annotations


class InvariantViolation(RuntimeError):
    """Raised when the `next` structure of a graph is corrupted.

    Signals a broken caller invariant (e.g. reversing towards an unreachable
    node), never a retryable user action.
    """


__all__ = ["InvariantViolation"]
