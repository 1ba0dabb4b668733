"""
SimpleIndex: In-Memory Identifier <-> Index Mapping

Reference implementation of ``IndexProtocol``. Indices are assigned in
first-seen order and are dense in ``[0, count)``. The preference store only
reads an index; building one is the caller's job.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Iterator, Optional, TextIO, Union

from fastrec.core.types import UNKNOWN_INDEX
from fastrec.data.parsers import parse_str


class SimpleIndex:
    """
    Bidirectional raw-id / index mapping.

    Complexity:
        - get_index: O(1) dict lookup
        - get_id: O(1) list access
    """

    __slots__ = ("_ids", "_id_to_idx")

    def __init__(self, ids: Optional[Iterable[Hashable]] = None) -> None:
        self._ids: list[Hashable] = []
        self._id_to_idx: dict[Hashable, int] = {}
        if ids is not None:
            for raw_id in ids:
                self.add(raw_id)

    @classmethod
    def from_ids(cls, ids: Iterable[Hashable]) -> "SimpleIndex":
        return cls(ids)

    @classmethod
    def from_tsv(
        cls,
        source: Union[str, TextIO],
        column: int,
        parser=parse_str,
    ) -> "SimpleIndex":
        """Index the distinct values of one tab-separated column."""
        index = cls()
        if isinstance(source, str):
            with open(source, "r", encoding="utf-8") as f:
                index._scan(f, column, parser)
        else:
            index._scan(source, column, parser)
        return index

    def _scan(self, lines: Iterable[str], column: int, parser) -> None:
        for line in lines:
            line = line.rstrip("\r\n")
            if not line:
                continue
            tokens = line.split("\t")
            if column < len(tokens):
                self.add(parser(tokens[column]))

    def add(self, raw_id: Hashable) -> int:
        """Index of ``raw_id``, assigning the next free index if new."""
        idx = self._id_to_idx.get(raw_id)
        if idx is None:
            idx = len(self._ids)
            self._ids.append(raw_id)
            self._id_to_idx[raw_id] = idx
        return idx

    @property
    def count(self) -> int:
        return len(self._ids)

    def get_index(self, raw_id: Hashable) -> int:
        return self._id_to_idx.get(raw_id, UNKNOWN_INDEX)

    def get_id(self, idx: int) -> Any:
        return self._ids[idx]

    def contains(self, raw_id: Hashable) -> bool:
        return raw_id in self._id_to_idx

    def indices(self) -> Iterator[int]:
        return iter(range(len(self._ids)))

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"SimpleIndex(count={len(self._ids)})"
