from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping

from .collate import locale_sorted
from .parse import Record, has_text


NO_SELECTION_MESSAGE = "Nenhum município selecionado."
NOT_FOUND_MESSAGE = "Não foram encontrados dados de limites para este município."


class QueryStatus(str, Enum):
    NO_SELECTION = "no_selection"
    NOT_FOUND = "not_found"
    FOUND = "found"


@dataclass(frozen=True)
class QueryResult:
    status: QueryStatus
    selected: str = ""
    neighbors: tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.status is QueryStatus.FOUND

    @property
    def message(self) -> str | None:
        if self.status is QueryStatus.NO_SELECTION:
            return NO_SELECTION_MESSAGE
        if self.status is QueryStatus.NOT_FOUND:
            return NOT_FOUND_MESSAGE
        return None

    def lines(self) -> list[str]:
        """What a result list should render: neighbor names or one message."""
        if self.found:
            return list(self.neighbors)
        return [self.message or ""]


def neighbors_of(records: Iterable[Record], selected: str | None) -> QueryResult:
    """Scan records for `selected` (exact, case-sensitive) and sort its neighbors."""
    if not selected:
        return QueryResult(status=QueryStatus.NO_SELECTION)

    # Blank cells (short rows) carry no data.
    found = [
        r.neighbor
        for r in records
        if r.entity == selected and has_text(r.entity) and has_text(r.neighbor)
    ]
    if not found:
        return QueryResult(status=QueryStatus.NOT_FOUND, selected=selected)
    return QueryResult(status=QueryStatus.FOUND, selected=selected, neighbors=tuple(locale_sorted(found)))


def lookup_neighbors(adjacency: Mapping[str, tuple[str, ...]], selected: str | None) -> QueryResult:
    if not selected:
        return QueryResult(status=QueryStatus.NO_SELECTION)

    nbs = adjacency.get(selected)
    if not nbs:
        return QueryResult(status=QueryStatus.NOT_FOUND, selected=selected)
    return QueryResult(status=QueryStatus.FOUND, selected=selected, neighbors=nbs)
