"""Menstrual cycle statistics and prediction.

Modules:
    types       — Engine value types (PeriodEntry, CycleRecord, PredictionResult)
    normalizer  — Date parsing and period-start extraction
    cycle_stats — Cycle/period lengths, rounding, regularity
    predictor   — Next-period prediction and display values
    fertility   — Ovulation day, fertile window and fertility status
    history     — Cycle history records for display
"""

from cyclesense.menstrual.fertility import (
    FertileWindowDates,
    FertilityEstimate,
    FertilityStatus,
    compute_fertility_status,
    fertility_status_for,
    fertility_window_dates,
)
from cyclesense.menstrual.history import build_cycle_history
from cyclesense.menstrual.predictor import (
    CyclePredictor,
    compute_prediction,
    current_cycle_day,
    cycle_progress_percent,
    days_until_next_period,
)
from cyclesense.menstrual.types import CycleRecord, PeriodEntry, PredictionResult, Regularity

__all__ = [
    "CyclePredictor",
    "CycleRecord",
    "FertileWindowDates",
    "FertilityEstimate",
    "FertilityStatus",
    "PeriodEntry",
    "PredictionResult",
    "Regularity",
    "build_cycle_history",
    "compute_fertility_status",
    "compute_prediction",
    "current_cycle_day",
    "cycle_progress_percent",
    "days_until_next_period",
    "fertility_status_for",
    "fertility_window_dates",
]
