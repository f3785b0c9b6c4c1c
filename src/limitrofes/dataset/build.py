from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from .collate import locale_sorted
from .parse import ParseResult, Record, has_text
from .query import QueryResult, lookup_neighbors


def build_index(records: Iterable[Record]) -> tuple[str, ...]:
    """Distinct, non-blank entity names in locale order."""
    return tuple(locale_sorted({r.entity for r in records if has_text(r.entity)}))


def build_adjacency(records: Iterable[Record]) -> dict[str, tuple[str, ...]]:
    """Map entity -> locale-sorted neighbors.

    Duplicate edges are kept as listed in the data; blank entities and blank
    neighbors are dropped.
    """
    acc: dict[str, list[str]] = defaultdict(list)
    for r in records:
        if not has_text(r.entity) or not has_text(r.neighbor):
            continue
        acc[r.entity].append(r.neighbor)

    return {ent: tuple(locale_sorted(nbs)) for ent, nbs in acc.items()}


@dataclass(frozen=True)
class Dataset:
    records: tuple[Record, ...]
    entities: tuple[str, ...]
    adjacency: Mapping[str, tuple[str, ...]] = field(repr=False)
    blank_lines: int = 0
    short_rows: int = 0

    def neighbors(self, selected: str | None) -> QueryResult:
        # Same contract as query.neighbors_of, answered from the precomputed map.
        return lookup_neighbors(self.adjacency, selected)

    def stats(self) -> dict[str, int]:
        return {
            "records": len(self.records),
            "entities": len(self.entities),
            "entities_with_neighbors": len(self.adjacency),
            "edges": sum(len(v) for v in self.adjacency.values()),
            "blank_lines": self.blank_lines,
            "short_rows": self.short_rows,
        }


def build_dataset(parsed: ParseResult) -> Dataset:
    return Dataset(
        records=parsed.records,
        entities=build_index(parsed.records),
        adjacency=MappingProxyType(build_adjacency(parsed.records)),
        blank_lines=parsed.blank_lines,
        short_rows=parsed.short_rows,
    )
