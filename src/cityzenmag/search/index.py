"""In-memory index store of normalized search records."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator

from cityzenmag.search.records import SearchRecord


class IndexStore:
    """Records keyed by ``type-id``; at most one record per key.

    Rebuilds replace the whole mapping, so a failed build elsewhere never
    leaves a half-populated index behind.
    """

    def __init__(self) -> None:
        self._records: dict[str, SearchRecord] = {}

    def rebuild(self, records: Iterable[SearchRecord]) -> None:
        self._records = {r.key: r for r in records}

    def get(self, content_type: str, content_id: str) -> SearchRecord | None:
        return self._records.get(f"{content_type}-{content_id}")

    def counts_by_type(self) -> dict[str, int]:
        return dict(Counter(r.type for r in self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[SearchRecord]:
        return iter(list(self._records.values()))
