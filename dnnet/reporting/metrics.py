"""Epoch callbacks that record training progress."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Mapping, Tuple


class CostHistory:
    """Keep every reported ``(epoch, cost)`` pair in memory."""

    def __init__(self) -> None:
        self.history: List[Tuple[int, float]] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        if "cost" in metrics:
            self.history.append((int(epoch), float(metrics["cost"])))

    @property
    def costs(self) -> List[float]:
        return [cost for _, cost in self.history]


class JsonlSink:
    """Append-only JSONL writer for epoch metrics."""

    def __init__(self, path: str | Path, *, run: str | None = None) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.run = run

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        record: dict[str, object] = {"epoch": int(epoch)}
        if self.run is not None:
            record["run"] = self.run
        record.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    __call__ = on_epoch


__all__ = ["CostHistory", "JsonlSink"]
