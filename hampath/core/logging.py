from __future__ import annotations

from typing import Any, Dict


class RunLogger:
    """Minimal logging interface used by level generation and the CLI."""

    def log_params(self, params: Dict[str, Any]) -> None:
        raise NotImplementedError

    def log_metric(self, key: str, value: float, step: int | None = None) -> None:
        raise NotImplementedError

    def set_tags(self, tags: Dict[str, Any]) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class NullRunLogger(RunLogger):
    """No-op logger used when nobody is listening."""

    def log_params(self, params: Dict[str, Any]) -> None:
        return None

    def log_metric(self, key: str, value: float, step: int | None = None) -> None:
        return None

    def set_tags(self, tags: Dict[str, Any]) -> None:
        return None

    def close(self) -> None:
        return None


class ConsoleRunLogger(RunLogger):
    """Prints every record as `key=value` lines, prefixed with the run name."""

    def __init__(self, *, prefix: str = "hampath") -> None:
        self.prefix = prefix
        self.closed = False

    def _emit(self, kind: str, items: Dict[str, Any]) -> None:
        body = " ".join(f"{key}={value}" for key, value in items.items())
        print(f"[{self.prefix}] {kind}: {body}")

    def log_params(self, params: Dict[str, Any]) -> None:
        self._emit("params", params)

    def log_metric(self, key: str, value: float, step: int | None = None) -> None:
        if step is None:
            self._emit("metric", {key: value})
        else:
            self._emit("metric", {key: value, "step": step})

    def set_tags(self, tags: Dict[str, Any]) -> None:
        self._emit("tags", tags)

    def close(self) -> None:
        self.closed = True


class RecordingRunLogger(RunLogger):
    """Keeps every record in memory; handy for tests and reports."""

    def __init__(self) -> None:
        self.params: Dict[str, Any] = {}
        self.metrics: list[tuple[str, float, int | None]] = []
        self.tags: Dict[str, Any] = {}

    def log_params(self, params: Dict[str, Any]) -> None:
        self.params.update(params)

    def log_metric(self, key: str, value: float, step: int | None = None) -> None:
        self.metrics.append((key, float(value), step))

    def set_tags(self, tags: Dict[str, Any]) -> None:
        self.tags.update(tags)

    def close(self) -> None:
        return None

    def metric(self, key: str) -> float | None:
        """Most recent value logged under `key`."""
        for name, value, _ in reversed(self.metrics):
            if name == key:
                return value
        return None


__all__ = ["RunLogger", "NullRunLogger", "ConsoleRunLogger", "RecordingRunLogger"]
