"""Data-access boundary for the prediction engine.

The engine itself never performs I/O.  This module supplies it with entry
snapshots and republishes results:

- ``CycleDataSource``          protocol the engine's callers depend on
- ``PostgresCycleDataSource``  reads ``period_entries`` / ``menstrual_cycles``
- ``CycleDataService``         ``refresh()`` on initial load, identity change
                               and after writes; newest refresh wins
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Mapping, Protocol

from pydantic import ValidationError

from cyclesense.config_loader import EngineConfig, get_engine_config
from cyclesense.menstrual.history import build_cycle_history
from cyclesense.menstrual.predictor import CyclePredictor
from cyclesense.menstrual.types import CycleRecord, PeriodEntry, PredictionResult
from cyclesense.models.entries import CycleHistoryRow, PeriodEntryRow, SymptomScores
from cyclesense.services import database

logger = logging.getLogger("cyclesense.services.cycle_data")

FetchFn = Callable[..., Awaitable[list[Any]]]

_ENTRIES_QUERY = """
    SELECT date, flow_intensity, period_start_date, period_end_date, symptoms
    FROM period_entries
    WHERE user_id = $1
"""

_CYCLES_QUERY = """
    SELECT cycle_start_date, cycle_end_date, cycle_length, period_length, predicted
    FROM menstrual_cycles
    WHERE user_id = $1
    ORDER BY cycle_start_date DESC
"""


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------


def entries_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[PeriodEntry]:
    """Convert stored rows into engine entries, skipping malformed rows.

    Unparsable *dates* are left for the normalizer to drop; rows that fail
    schema validation (unknown flow value, missing columns) are skipped here.
    """
    entries: list[PeriodEntry] = []
    for raw in rows:
        try:
            row = PeriodEntryRow.model_validate(dict(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed period entry row: %s", exc.errors()[0]["msg"])
            continue
        entries.append(
            PeriodEntry(
                date=row.entry_date,
                flow_intensity=row.flow_intensity,
                period_start_date=row.period_start_date,
                period_end_date=row.period_end_date,
                symptoms=SymptomScores.clamped(row.symptoms) if row.symptoms else None,
            )
        )
    return entries


def history_from_rows(rows: Iterable[Mapping[str, Any]]) -> list[CycleRecord]:
    """Convert stored cycle rows into records, skipping malformed rows."""
    records: list[CycleRecord] = []
    for raw in rows:
        try:
            row = CycleHistoryRow.model_validate(dict(raw))
        except ValidationError as exc:
            logger.warning("Skipping malformed cycle row: %s", exc.errors()[0]["msg"])
            continue
        records.append(
            CycleRecord(
                cycle_start_date=row.cycle_start_date,
                cycle_end_date=row.cycle_end_date,
                cycle_length=row.cycle_length,
                period_length=row.period_length,
                predicted=row.predicted,
            )
        )
    return records


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


class CycleDataSource(Protocol):
    """Anything that can supply a user's logged entries and stored cycles."""

    async def fetch_entries(self, user_id: uuid.UUID) -> list[PeriodEntry]: ...

    async def fetch_cycle_history(self, user_id: uuid.UUID) -> list[CycleRecord]: ...


class PostgresCycleDataSource:
    """Read cycle data through the RLS-scoped asyncpg pool.

    Entries are fetched unordered; the engine sorts them itself.

    Args:
        fetch: Query function with the signature of ``database.fetch``.
               Injected in tests.
    """

    def __init__(self, fetch: FetchFn | None = None) -> None:
        self._fetch = fetch or database.fetch

    async def fetch_entries(self, user_id: uuid.UUID) -> list[PeriodEntry]:
        rows = await self._fetch(_ENTRIES_QUERY, user_id, user_id=user_id)
        entries = entries_from_rows(rows)
        logger.debug("Fetched %d/%d period entries for user %s", len(entries), len(rows), user_id)
        return entries

    async def fetch_cycle_history(self, user_id: uuid.UUID) -> list[CycleRecord]:
        rows = await self._fetch(_CYCLES_QUERY, user_id, user_id=user_id)
        return history_from_rows(rows)


# ---------------------------------------------------------------------------
# Refresh service
# ---------------------------------------------------------------------------


class RefreshTrigger(str, Enum):
    initial_load = "initial_load"
    identity_change = "identity_change"
    post_write = "post_write"


@dataclass(frozen=True)
class CycleSnapshot:
    """Everything presentation needs for one user, computed in one pass.

    Attributes:
        user_id:        User the snapshot belongs to.
        prediction:     Engine output for the fetched entries.
        history:        Cycle records derived from the same entries.
        stored_history: Cycle rows kept by the storage layer, display only.
        trigger:        What caused the refresh.
        generation:     Monotonic refresh number; higher is newer.
        computed_at:    UTC time the snapshot was built.
    """

    user_id: uuid.UUID
    prediction: PredictionResult
    history: list[CycleRecord]
    stored_history: list[CycleRecord]
    trigger: RefreshTrigger
    generation: int
    computed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class CycleDataService:
    """Fetch, compute and publish cycle snapshots.

    Refreshes may overlap (e.g. a write lands while the initial load is still
    in flight).  Each refresh takes a generation number when it starts and
    only publishes if no later refresh has published already, so the
    visible snapshot always reflects the most recently started refresh.

    Usage::

        service = CycleDataService(PostgresCycleDataSource())
        snapshot = await service.refresh(user_id, RefreshTrigger.initial_load)
        snapshot.prediction.next_period_date
    """

    def __init__(
        self,
        source: CycleDataSource,
        config: EngineConfig | None = None,
    ) -> None:
        self._source = source
        self._config = config or get_engine_config()
        self._predictor = CyclePredictor(self._config)
        self._generation = 0
        self._published_generation = 0
        self._current: CycleSnapshot | None = None

    @property
    def current(self) -> CycleSnapshot | None:
        """The latest published snapshot, if any."""
        return self._current

    def snapshot_for(self, user_id: uuid.UUID) -> CycleSnapshot | None:
        """The latest snapshot if it belongs to ``user_id``."""
        if self._current is not None and self._current.user_id == user_id:
            return self._current
        return None

    def clear(self) -> None:
        """Forget the published snapshot (e.g. on sign-out)."""
        self._current = None
        self._published_generation = self._generation

    async def refresh(
        self,
        user_id: uuid.UUID,
        trigger: RefreshTrigger = RefreshTrigger.initial_load,
    ) -> CycleSnapshot:
        """Re-fetch the user's data and recompute everything from scratch.

        Returns the snapshot this call computed, even when a newer refresh
        superseded it before publication.

        Raises:
            Whatever the data source raises.  The previously published
            snapshot is kept in that case.
        """
        self._generation += 1
        generation = self._generation

        if trigger is RefreshTrigger.identity_change or (
            self._current is not None and self._current.user_id != user_id
        ):
            # Never show the previous user's numbers, even from refreshes in flight
            self._current = None
            self._published_generation = generation - 1

        try:
            entries, stored = await asyncio.gather(
                self._source.fetch_entries(user_id),
                self._source.fetch_cycle_history(user_id),
            )
        except Exception:
            logger.exception(
                "Refresh #%d (%s) failed for user %s", generation, trigger.value, user_id
            )
            raise

        prediction = self._predictor.compute_prediction(entries)
        history = build_cycle_history(entries, self._config, prediction=prediction)
        snapshot = CycleSnapshot(
            user_id=user_id,
            prediction=prediction,
            history=history,
            stored_history=stored,
            trigger=trigger,
            generation=generation,
        )

        if generation > self._published_generation:
            self._published_generation = generation
            self._current = snapshot
            logger.info(
                "Published refresh #%d (%s) for user %s: next=%s regularity=%s",
                generation,
                trigger.value,
                user_id,
                prediction.next_period_date,
                prediction.regularity.value,
            )
        else:
            logger.debug(
                "Discarding stale refresh #%d (published #%d)",
                generation,
                self._published_generation,
            )
        return snapshot
