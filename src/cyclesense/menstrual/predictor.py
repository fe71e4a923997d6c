"""Next-period prediction engine.

Turns a snapshot of logged entries into a ``PredictionResult``:

- cycle length: rounded mean of the gaps between period starts
- period length: rounded mean of logged start→end spans (inclusive)
- regularity: population std-dev of cycle lengths against a 2-day threshold
- next period: most recent start + cycle length

Sparse histories never raise.  With no start dates the result carries no
next-period date; with one start date the default cycle length is used and
regularity stays unknown.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable

from cyclesense.config_loader import EngineConfig, get_engine_config
from cyclesense.menstrual.cycle_stats import (
    classify_regularity,
    cycle_lengths,
    period_lengths,
    round_half_up_mean,
)
from cyclesense.menstrual.normalizer import normalize_start_dates, readable_entries
from cyclesense.menstrual.types import PeriodEntry, PredictionResult, Regularity

logger = logging.getLogger("cyclesense.menstrual.predictor")


class CyclePredictor:
    """Predict the next period from logged entries.

    Usage::

        predictor = CyclePredictor()
        result = predictor.compute_prediction(entries)
        print(result.next_period_date, result.regularity)
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or get_engine_config()

    @property
    def config(self) -> EngineConfig:
        return self._config

    def compute_prediction(self, entries: Iterable[PeriodEntry]) -> PredictionResult:
        """Compute cycle statistics and the next-period forecast.

        Args:
            entries: Logged entries in any order.  Not modified.

        Returns:
            A new PredictionResult.  Identical input gives an equal result.
        """
        defaults = self._config.defaults
        valid = readable_entries(entries)

        starts = normalize_start_dates(valid)
        lengths = cycle_lengths(starts)
        regularity, std_dev = classify_regularity(lengths)

        spans = period_lengths(valid)
        period_length = round_half_up_mean(spans) if spans else defaults.period_length_days

        if not starts:
            logger.debug("No period starts logged; returning empty prediction")
            return PredictionResult(
                cycle_length_days=defaults.cycle_length_days,
                period_length_days=period_length,
            )

        cycle_length = round_half_up_mean(lengths) if lengths else defaults.cycle_length_days
        last_start = starts[0]
        next_period = last_start + timedelta(days=cycle_length)

        logger.debug(
            "Predicted next period %s from %d start(s): cycle=%d period=%d regularity=%s",
            next_period, len(starts), cycle_length, period_length, regularity.value,
        )
        return PredictionResult(
            next_period_date=next_period,
            cycle_length_days=cycle_length,
            period_length_days=period_length,
            regularity=regularity,
            last_period_start=last_start,
            cycle_lengths=tuple(lengths),
            cycle_length_std_dev=std_dev,
        )


def compute_prediction(
    entries: Iterable[PeriodEntry], config: EngineConfig | None = None
) -> PredictionResult:
    """Module-level shortcut for ``CyclePredictor(config).compute_prediction``."""
    return CyclePredictor(config).compute_prediction(entries)


# ---------------------------------------------------------------------------
# Display values derived from a prediction
# ---------------------------------------------------------------------------


def days_until_next_period(result: PredictionResult, today: date | None = None) -> int | None:
    """Days from ``today`` to the predicted start.

    Negative when the prediction has passed without a newer period being
    logged (overdue).  None when there is nothing to count down to, so the
    caller can show a "not enough data" state instead of a zero.
    """
    if result.next_period_date is None:
        return None
    return (result.next_period_date - (today or date.today())).days


def current_cycle_day(result: PredictionResult, today: date | None = None) -> int | None:
    """1-indexed day of the current cycle; day 1 is the last period start."""
    if result.last_period_start is None:
        return None
    return max(1, ((today or date.today()) - result.last_period_start).days + 1)


def cycle_progress_percent(result: PredictionResult, today: date | None = None) -> float | None:
    """How far through the expected cycle ``today`` is, capped at 100."""
    day = current_cycle_day(result, today)
    if day is None:
        return None
    return min(100.0, day / result.cycle_length_days * 100)


def is_overdue(result: PredictionResult, today: date | None = None) -> bool:
    """True once the predicted start has passed with no newer period logged."""
    remaining = days_until_next_period(result, today)
    return remaining is not None and remaining < 0


def has_enough_data(result: PredictionResult) -> bool:
    """True when regularity could be judged (at least two period starts)."""
    return result.regularity is not Regularity.unknown
