# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Lookup table listing the targets of a bulk delete.

Every target gets one row with user-defined metadata columns. When a
``used_by`` capability is supplied, rows are expandable: expanding a row
fetches the consequences of deleting that target, once per target, and
summarizes them.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Collection, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from ..common.constants import NOT_USED_MESSAGE
from ..core.errors import parse_api_error, pluck_error_detail
from ..models.consequence import ConsequenceRecord
from ..models.metadata import MetadataCallback, MetadataField
from ..models.target import describe_target
from ..utils._pandas import rows_to_dataframe

UsedByCallback = Callable[[Any], Union[Awaitable[Iterable[Any]], Iterable[Any]]]

_LOGGER = logging.getLogger(__name__)


class ExpansionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class TableRow:
    """One rendered row: the target and its metadata cells, in the order produced for it."""

    target: Any
    cells: List[MetadataField] = field(default_factory=list)

    @property
    def values(self) -> List[str]:
        return [cell.value for cell in self.cells]


@dataclass(frozen=True)
class ConsequenceSummary:
    """
    Rendered consequences of deleting one target.

    ``lines`` holds one ``"<name> (<label>)"`` entry per consequence, in the
    order the capability returned them. When it is empty, ``message`` says so.
    """

    lines: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def message(self) -> Optional[str]:
        return NOT_USED_MESSAGE if self.is_empty else None

    def __str__(self) -> str:
        if self.is_empty:
            return NOT_USED_MESSAGE
        return "\n".join(f"- {line}" for line in self.lines)


@dataclass(frozen=True)
class ExpandedRow:
    """Result of expanding one row."""

    target: Any
    state: ExpansionState
    relations: List[ConsequenceRecord] = field(default_factory=list)
    summary: Optional[ConsequenceSummary] = None
    error: Optional[BaseException] = None
    detail: Optional[str] = None


def render_consequences(relations: Iterable[ConsequenceRecord]) -> ConsequenceSummary:
    """Summarize consequences without sorting or de-duplicating them."""
    return ConsequenceSummary(tuple(record.describe() for record in relations))


def _coerce_record(value: Any) -> ConsequenceRecord:
    if isinstance(value, ConsequenceRecord):
        return value
    return ConsequenceRecord.from_dict(value)


class RelationLookupTable:
    """
    Non-paginated table of deletion targets with cached "used by" lookups.

    :param objects: Targets to list. One-shot iterables are materialized on assignment.
    :type objects: Iterable
    :param metadata: Produces the metadata cells of a target. Without it rows are empty.
    :type metadata: Callable or None
    :param used_by: Fetches the consequences of deleting a target. Rows are
        expandable only when it is supplied.
    :type used_by: Callable or None
    :param label: Caption of the table, e.g. ``"Users to be deleted"``.
    :type label: str or None

    The relation cache is keyed by target identity, never by ``pk``. It holds
    one task per target, so concurrent first expansions of the same target
    share a single fetch. A failed fetch stays visible as ``FAILED`` and is
    replaced by a fresh fetch on the next request.

    Example::

        with RelationLookupTable(users, metadata=default_metadata, used_by=api.used_by) as table:
            print(table.columns())
            row = await table.expand(users[0])
            print(row.summary)
    """

    paginated = False

    def __init__(
        self,
        objects: Iterable[Any] = (),
        *,
        metadata: Optional[MetadataCallback] = None,
        used_by: Optional[UsedByCallback] = None,
        label: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.objects = objects
        self.metadata = metadata
        self.used_by = used_by
        self.label = label
        self._logger = logger or _LOGGER
        self._cache: Dict[int, Tuple[Any, "asyncio.Future[List[ConsequenceRecord]]"]] = {}

    # ------------------------------------------------------------------ state

    @property
    def objects(self) -> Collection[Any]:
        return self._objects

    @objects.setter
    def objects(self, value: Iterable[Any]) -> None:
        self._objects = value if isinstance(value, Collection) else list(value)

    @property
    def expandable(self) -> bool:
        return self.used_by is not None

    def __len__(self) -> int:
        return len(self._objects)

    def __enter__(self) -> "RelationLookupTable":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Discard the relation cache. In-flight fetches are not cancelled."""
        self._cache.clear()

    # ---------------------------------------------------------------- columns

    def columns(self) -> List[str]:
        """Column headers, derived once from the first target's metadata."""
        targets = list(self._objects)
        if not targets or self.metadata is None:
            return []
        return [meta.key for meta in self.metadata(targets[0])]

    def _cells(self, item: Any) -> List[MetadataField]:
        if self.metadata is None:
            return []
        return list(self.metadata(item))

    def rows(self) -> List[TableRow]:
        """One row per target. Rows whose keys differ from :meth:`columns` are logged."""
        columns = self.columns()
        rows = []
        for item in self._objects:
            cells = self._cells(item)
            keys = [cell.key for cell in cells]
            if keys != columns:
                self._logger.warning(
                    "Metadata for %s has keys %s, table columns are %s", describe_target(item), keys, columns
                )
            rows.append(TableRow(item, cells))
        return rows

    def to_dataframe(self) -> pd.DataFrame:
        """The table as a DataFrame aligned to :meth:`columns`."""
        return rows_to_dataframe([self._cells(item) for item in self._objects], self.columns())

    # -------------------------------------------------------------- relations

    def _entry(self, item: Any) -> Optional["asyncio.Future[List[ConsequenceRecord]]"]:
        entry = self._cache.get(id(item))
        if entry is None or entry[0] is not item:
            return None
        return entry[1]

    def state(self, item: Any) -> ExpansionState:
        """Loading state of ``item``'s relations."""
        task = self._entry(item)
        if task is None:
            return ExpansionState.IDLE
        if not task.done():
            return ExpansionState.LOADING
        if task.cancelled() or task.exception() is not None:
            return ExpansionState.FAILED
        return ExpansionState.LOADED

    def cached_relations(self, item: Any) -> Optional[List[ConsequenceRecord]]:
        """Cached relations of ``item`` without fetching, or None if not loaded."""
        if self.state(item) is not ExpansionState.LOADED:
            return None
        return list(self._entry(item).result())

    async def _load(self, item: Any) -> List[ConsequenceRecord]:
        self._logger.debug("Fetching relations for %s", describe_target(item))
        try:
            result = self.used_by(item)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            self._logger.warning("Fetching relations for %s failed: %s", describe_target(item), e)
            raise
        relations = [_coerce_record(value) for value in (result or [])]
        self._logger.debug("%s is used by %d object(s)", describe_target(item), len(relations))
        return relations

    async def fetch_relations(self, item: Any) -> List[ConsequenceRecord]:
        """
        Return the consequences of deleting ``item``.

        A loaded or in-flight result for this exact object is reused; otherwise
        the ``used_by`` capability is called once and its result cached. Without
        ``used_by`` nothing is fetched and the result is empty.

        :raises Exception: Whatever the ``used_by`` capability raised.
        """
        if self.used_by is None:
            return []
        task = self._entry(item)
        if task is None or (task.done() and (task.cancelled() or task.exception() is not None)):
            task = asyncio.ensure_future(self._load(item))
            self._cache[id(item)] = (item, task)
        # Shielded so a cancelled caller does not cancel the shared fetch
        return list(await asyncio.shield(task))

    async def expand(self, item: Any) -> ExpandedRow:
        """
        Expand ``item``'s row: fetch its relations and render the summary.

        A failed fetch is returned as a ``FAILED`` row with a readable detail.
        """
        if not self.expandable:
            return ExpandedRow(item, ExpansionState.IDLE)
        try:
            relations = await self.fetch_relations(item)
        except Exception as e:
            return ExpandedRow(
                item,
                ExpansionState.FAILED,
                error=e,
                detail=pluck_error_detail(parse_api_error(e)),
            )
        return ExpandedRow(item, ExpansionState.LOADED, relations, render_consequences(relations))

    async def expand_all(self, items: Optional[Sequence[Any]] = None) -> List[ExpandedRow]:
        """Expand several rows concurrently; results follow the input order."""
        targets = list(self._objects) if items is None else list(items)
        return list(await asyncio.gather(*(self.expand(item) for item in targets)))


__all__ = [
    "ExpansionState",
    "TableRow",
    "ConsequenceSummary",
    "ExpandedRow",
    "RelationLookupTable",
    "render_consequences",
]
