from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..errors import ErrorKind


logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"\r?\n")

DEFAULT_ENTITY_FIELD = "NM_MUN"
DEFAULT_NEIGHBOR_FIELD = "NM_LIM"


@dataclass(frozen=True)
class Record:
    entity: str
    neighbor: str


@dataclass(frozen=True)
class ParseResult:
    records: tuple[Record, ...]
    error: ErrorKind | None = None
    # Stats (useful for `limitrofes stats` / `doctor`).
    blank_lines: int = 0
    short_rows: int = 0
    missing_fields: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


def has_text(value: str | None) -> bool:
    return bool(value and value.strip())


def split_lines(text: str) -> list[str]:
    return _LINE_RE.split(text)


def resolve_columns(header: list[str], *, entity_field: str, neighbor_field: str) -> tuple[int, int]:
    """Return (entity_pos, neighbor_pos); -1 for a field that is absent."""
    def pos(name: str) -> int:
        try:
            return header.index(name)
        except ValueError:
            return -1

    return pos(entity_field), pos(neighbor_field)


def parse_csv(
    text: str,
    *,
    entity_field: str = DEFAULT_ENTITY_FIELD,
    neighbor_field: str = DEFAULT_NEIGHBOR_FIELD,
    delimiter: str = ",",
) -> ParseResult:
    """Parse delimited text into (entity, neighbor) records.

    There is no quote handling: every delimiter splits a field. Blank lines
    are skipped, rows shorter than the resolved positions yield "" for the
    missing values. A header without either field produces no records and
    `ErrorKind.MISSING_COLUMN`; nothing is raised.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = split_lines(text)
    header = lines[0].split(delimiter)

    ent_pos, nb_pos = resolve_columns(header, entity_field=entity_field, neighbor_field=neighbor_field)
    if ent_pos == -1 or nb_pos == -1:
        missing = tuple(name for name, p in ((entity_field, ent_pos), (neighbor_field, nb_pos)) if p == -1)
        logger.error("Columns %s not found in CSV header %r", ", ".join(repr(m) for m in missing), lines[0])
        return ParseResult(records=(), error=ErrorKind.MISSING_COLUMN, missing_fields=missing)

    need = max(ent_pos, nb_pos) + 1
    records: list[Record] = []
    blank = 0
    short = 0

    for line in lines[1:]:
        if not line.strip():
            blank += 1
            continue

        cols = line.split(delimiter)
        if len(cols) < need:
            short += 1
            logger.debug("Short row (%d of %d columns): %r", len(cols), need, line)

        records.append(
            Record(
                entity=cols[ent_pos] if ent_pos < len(cols) else "",
                neighbor=cols[nb_pos] if nb_pos < len(cols) else "",
            )
        )

    logger.info("Parsed %d records (%d blank lines, %d short rows)", len(records), blank, short)
    return ParseResult(
        records=tuple(records),
        blank_lines=blank,
        short_rows=short,
    )
