"""Derive cycle history records from logged entries.

Each observed period start opens a cycle that closes the day before the
next start.  The newest observed cycle is still open.  When a prediction
exists, a forecast record for the next cycle is placed on top.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable

from cyclesense.config_loader import EngineConfig, get_engine_config
from cyclesense.menstrual.cycle_stats import period_span
from cyclesense.menstrual.normalizer import normalize_start_dates, readable_entries
from cyclesense.menstrual.predictor import CyclePredictor
from cyclesense.menstrual.types import CycleRecord, PeriodEntry, PredictionResult

logger = logging.getLogger("cyclesense.menstrual.history")


def _period_ends_by_start(entries: list[PeriodEntry]) -> dict[date, date]:
    """Latest logged end date per period start."""
    ends: dict[date, date] = {}
    for entry in entries:
        span = period_span(entry)
        if span is None:
            continue
        start, end = span
        if start not in ends or end > ends[start]:
            ends[start] = end
    return ends


def build_cycle_history(
    entries: Iterable[PeriodEntry],
    config: EngineConfig | None = None,
    prediction: PredictionResult | None = None,
) -> list[CycleRecord]:
    """Build cycle records, most recent first.

    Args:
        entries:    Logged entries in any order.
        config:     Engine config (history settings and defaults).
        prediction: Result already computed for the same entries; computed
                    here when omitted.

    Returns:
        Up to ``config.history.max_records`` records.  The first one is the
        forecast (``predicted=True``) when forecasts are enabled and a next
        period date exists.
    """
    cfg = config or get_engine_config()
    valid = readable_entries(entries)
    starts = sorted(normalize_start_dates(valid))
    ends = _period_ends_by_start(valid)

    records: list[CycleRecord] = []
    for index, start in enumerate(starts):
        end = ends.get(start)
        period_length = (end - start).days + 1 if end is not None else None
        if index + 1 < len(starts):
            next_start = starts[index + 1]
            records.append(
                CycleRecord(
                    cycle_start_date=start,
                    cycle_end_date=next_start - timedelta(days=1),
                    cycle_length=(next_start - start).days,
                    period_length=period_length,
                )
            )
        else:
            records.append(CycleRecord(cycle_start_date=start, period_length=period_length))
    records.reverse()

    if cfg.history.include_forecast:
        result = prediction or CyclePredictor(cfg).compute_prediction(valid)
        if result.next_period_date is not None:
            records.insert(
                0,
                CycleRecord(
                    cycle_start_date=result.next_period_date,
                    cycle_length=result.cycle_length_days,
                    period_length=result.period_length_days,
                    predicted=True,
                ),
            )

    logger.debug("Built %d cycle record(s) from %d start(s)", len(records), len(starts))
    return records[: cfg.history.max_records]
