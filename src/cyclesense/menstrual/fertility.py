"""Fertile window and ovulation estimates.

Ovulation is placed 14 days before the *next* predicted period (the luteal
phase is the stable part of the cycle), so the estimate moves with the
user's own cycle length rather than sitting on a fixed day 14.

Cycle days are 1-indexed from the last period start.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum

from cyclesense.menstrual.predictor import current_cycle_day
from cyclesense.menstrual.types import PredictionResult

logger = logging.getLogger("cyclesense.menstrual.fertility")

LUTEAL_PHASE_DAYS = 14
FERTILE_DAYS_BEFORE_OVULATION = 4
FERTILE_DAYS_AFTER_OVULATION = 1
PEAK_TOLERANCE_DAYS = 1


class FertilityStatus(str, Enum):
    peak = "peak"
    high = "high"
    low = "low"


@dataclass(frozen=True)
class FertilityEstimate:
    """Fertility status for one cycle day.

    Attributes:
        status:                          Peak / high / low.
        days_to_ovulation:               Signed; negative after ovulation.
        fertile_window_progress_percent: 0–100 inside the window, else None.
        ovulation_day:                   Estimated ovulation cycle day.
        fertile_window_start:            First fertile cycle day.
        fertile_window_end:              Last fertile cycle day.
    """

    status: FertilityStatus
    days_to_ovulation: int
    fertile_window_progress_percent: float | None
    ovulation_day: int
    fertile_window_start: int
    fertile_window_end: int

    @property
    def in_fertile_window(self) -> bool:
        return self.status is not FertilityStatus.low


@dataclass(frozen=True)
class FertileWindowDates:
    """Calendar projection of the fertile window for the current cycle."""

    ovulation_date: date
    fertile_window_start: date
    fertile_window_end: date


def ovulation_cycle_day(cycle_length_days: int) -> int:
    """Cycle day of ovulation for a cycle of the given length (at least day 1)."""
    return max(1, cycle_length_days - LUTEAL_PHASE_DAYS)


def fertile_window(cycle_length_days: int) -> tuple[int, int]:
    """``(first, last)`` fertile cycle days, both at least day 1."""
    ovulation = ovulation_cycle_day(cycle_length_days)
    start = max(1, ovulation - FERTILE_DAYS_BEFORE_OVULATION)
    end = ovulation + FERTILE_DAYS_AFTER_OVULATION
    return start, end


def compute_fertility_status(cycle_day: int, cycle_length_days: int) -> FertilityEstimate:
    """Classify fertility on a given cycle day.

    Args:
        cycle_day:         1-indexed day within the current cycle.
        cycle_length_days: Expected cycle length, normally
                           ``PredictionResult.cycle_length_days``.

    Raises:
        ValueError: If either argument is below 1.
    """
    if cycle_day < 1:
        raise ValueError(f"cycle_day must be >= 1, got {cycle_day}")
    if cycle_length_days < 1:
        raise ValueError(f"cycle_length_days must be >= 1, got {cycle_length_days}")

    ovulation = ovulation_cycle_day(cycle_length_days)
    start, end = fertile_window(cycle_length_days)
    in_window = start <= cycle_day <= end

    if in_window and abs(cycle_day - ovulation) <= PEAK_TOLERANCE_DAYS:
        status = FertilityStatus.peak
    elif in_window:
        status = FertilityStatus.high
    else:
        status = FertilityStatus.low

    progress: float | None = None
    if in_window:
        progress = (cycle_day - start) / (end - start) * 100

    return FertilityEstimate(
        status=status,
        days_to_ovulation=ovulation - cycle_day,
        fertile_window_progress_percent=progress,
        ovulation_day=ovulation,
        fertile_window_start=start,
        fertile_window_end=end,
    )


def fertility_status_for(result: PredictionResult, today: date | None = None) -> FertilityEstimate | None:
    """Fertility status for ``today`` using the prediction's own cycle length."""
    day = current_cycle_day(result, today)
    if day is None:
        return None
    return compute_fertility_status(day, result.cycle_length_days)


def fertility_window_dates(result: PredictionResult) -> FertileWindowDates | None:
    """Project the fertile window for the current cycle onto calendar dates."""
    if result.last_period_start is None:
        return None
    anchor = result.last_period_start
    ovulation = ovulation_cycle_day(result.cycle_length_days)
    start, end = fertile_window(result.cycle_length_days)
    return FertileWindowDates(
        ovulation_date=anchor + timedelta(days=ovulation - 1),
        fertile_window_start=anchor + timedelta(days=start - 1),
        fertile_window_end=anchor + timedelta(days=end - 1),
    )
