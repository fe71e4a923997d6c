"""Pydantic schemas for stored cycle data."""

from cyclesense.models.entries import (
    CycleHistoryRow,
    FlowIntensity,
    PeriodEntryRow,
    SymptomKey,
    SymptomScores,
)

__all__ = [
    "CycleHistoryRow",
    "FlowIntensity",
    "PeriodEntryRow",
    "SymptomKey",
    "SymptomScores",
]
