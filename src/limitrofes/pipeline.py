"""Load/select state machine tying the source, dataset and selector together.

A load runs UNINITIALIZED/READY/FAILED -> LOADING -> READY | FAILED. Loads are
numbered; when loads overlap (the web server runs handlers on a thread pool),
only the most recently started one may publish its result.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Protocol, Sequence

import httpx

from .config import Settings
from .dataset.build import Dataset, build_dataset
from .dataset.parse import parse_csv
from .dataset.query import QueryResult
from .errors import ErrorKind, FetchError, LoadError, MissingColumnError
from .source import load_text


logger = logging.getLogger(__name__)

PLACEHOLDER_LABEL = "Selecione..."
LOADING_LABEL = "Carregando..."
ERROR_LABEL = "Erro ao carregar dados"


class PipelineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class PipelineNotReady(RuntimeError):
    pass


@dataclass(frozen=True)
class Option:
    value: str
    label: str
    disabled: bool = False

    def as_dict(self) -> dict:
        return {"value": self.value, "label": self.label, "disabled": self.disabled}


class SelectionSink(Protocol):
    def set_options(self, items: Sequence[Option]) -> None: ...


class ListSink:
    """Plain selectable list: just remembers the last options it was given."""

    def __init__(self) -> None:
        self.options: list[Option] = []

    def set_options(self, items: Sequence[Option]) -> None:
        self.options = list(items)


def selector_options(entities: Iterable[str]) -> list[Option]:
    out = [Option(value="", label=PLACEHOLDER_LABEL)]
    out.extend(Option(value=e, label=e) for e in entities if e)
    return out


LOADING_OPTIONS = (Option(value="", label=LOADING_LABEL, disabled=True),)
ERROR_OPTIONS = (Option(value="", label=ERROR_LABEL, disabled=True),)


class Pipeline:
    def __init__(
        self,
        *,
        fetch: Callable[[], str],
        entity_field: str = "NM_MUN",
        neighbor_field: str = "NM_LIM",
        delimiter: str = ",",
        sink: SelectionSink | None = None,
    ):
        self.fetch = fetch
        self.entity_field = entity_field
        self.neighbor_field = neighbor_field
        self.delimiter = delimiter
        self.sink = sink

        self._lock = threading.Lock()
        self._seq = 0
        self._state = PipelineState.UNINITIALIZED
        self._dataset: Dataset | None = None
        self._error: LoadError | None = None
        self._options: list[Option] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        source: str | None = None,
        client: httpx.Client | None = None,
        sink: SelectionSink | None = None,
    ) -> "Pipeline":
        location = source or settings.data_url

        def fetch() -> str:
            return load_text(location, timeout_s=settings.fetch_timeout, client=client)

        return cls(
            fetch=fetch,
            entity_field=settings.entity_field,
            neighbor_field=settings.neighbor_field,
            delimiter=settings.delimiter,
            sink=sink,
        )

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def dataset(self) -> Dataset | None:
        return self._dataset

    @property
    def error(self) -> LoadError | None:
        return self._error

    @property
    def error_kind(self) -> ErrorKind | None:
        return self._error.kind if self._error is not None else None

    @property
    def options(self) -> list[Option]:
        return list(self._options)

    def begin_load(self) -> int:
        """Enter LOADING, hide the previous dataset and return this load's number."""
        with self._lock:
            self._seq += 1
            self._state = PipelineState.LOADING
            self._dataset = None
            self._error = None
            self._publish(LOADING_OPTIONS)
            return self._seq

    def complete_load(self, seq: int, text: str) -> bool:
        """Parse `text` for load `seq`; returns False if a newer load superseded it."""
        parsed = parse_csv(
            text,
            entity_field=self.entity_field,
            neighbor_field=self.neighbor_field,
            delimiter=self.delimiter,
        )
        if not parsed.ok:
            return self.fail_load(
                seq,
                MissingColumnError(
                    f"Columns not found in CSV header: {', '.join(parsed.missing_fields)}",
                    missing=list(parsed.missing_fields),
                ),
            )

        dataset = build_dataset(parsed)
        with self._lock:
            if seq != self._seq:
                logger.info("Discarding stale load #%d (latest is #%d)", seq, self._seq)
                return False
            self._dataset = dataset
            self._state = PipelineState.READY
            self._publish(selector_options(dataset.entities))
        logger.info("Load #%d ready: %d records, %d municipalities", seq, len(dataset.records), len(dataset.entities))
        return True

    def fail_load(self, seq: int, error: LoadError) -> bool:
        with self._lock:
            if seq != self._seq:
                logger.info("Discarding stale failure of load #%d (latest is #%d)", seq, self._seq)
                return False
            self._error = error
            self._state = PipelineState.FAILED
            self._publish(ERROR_OPTIONS)
        logger.error("Failed to load or process data (%s): %s", error.kind.value, error)
        return True

    def load(self) -> PipelineState:
        seq = self.begin_load()
        try:
            self.complete_load(seq, self.fetch())
        except LoadError as e:
            self.fail_load(seq, e)
        except Exception as e:
            # Never leave the selector stuck on the loading entry.
            self.fail_load(seq, FetchError(f"Failed to load data: {e}"))
            raise
        return self._state

    def select(self, value: str | None) -> QueryResult:
        """Handle a selector change event."""
        dataset = self._dataset
        if self._state is not PipelineState.READY or dataset is None:
            raise PipelineNotReady(f"No dataset loaded (state={self._state.value})")
        return dataset.neighbors(value)

    def _publish(self, items: Sequence[Option]) -> None:
        self._options = list(items)
        if self.sink is not None:
            self.sink.set_options(self._options)
