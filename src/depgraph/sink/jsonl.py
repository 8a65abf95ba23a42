"""JSON Lines GraphSink for offline bulk loading.

Each committed batch is appended to the file as one record per line:

    {"type": "node", "id": "orderService", "category": "bean", "attributes": {}}
    {"type": "edge", "source": "orderService", "target": "paymentService", ...}

Lines are written only on ``commit()``, so a rolled-back batch never
reaches the file. Upserts are resolved by the loader (last record for a key
wins); the file itself is append-only.

Python 3.13+.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import IO

from depgraph.graph import Edge, Node

__all__ = ["JsonLinesGraphSink"]


class JsonLinesGraphSink:
    """Append committed batches to a ``.jsonl`` file; implements GraphSink."""

    __slots__ = ("_file", "_path", "_staged")

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._file: IO[str] | None = None
        self._staged: list[str] = []

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> None:
        if self._file is None:
            self._file = self._path.open("a", encoding="utf-8")

    def close(self) -> None:
        self._staged.clear()
        if self._file is not None:
            self._file.close()
            self._file = None

    def write_nodes(self, batch: Sequence[Node]) -> None:
        self._staged.extend(_line("node", node.as_dict()) for node in batch)

    def write_edges(self, batch: Sequence[Edge]) -> None:
        self._staged.extend(_line("edge", edge.as_dict()) for edge in batch)

    def commit(self) -> None:
        if self._file is None:
            msg = f"JsonLinesGraphSink for {self._path} is not open"
            raise RuntimeError(msg)
        self._file.writelines(self._staged)
        self._file.flush()
        self._staged.clear()

    def rollback(self) -> None:
        self._staged.clear()


def _line(record_type: str, data: dict[str, object]) -> str:
    return json.dumps({"type": record_type, **data}, ensure_ascii=False) + "\n"
