"""Value types shared by the cycle prediction engine.

Engine inputs (``PeriodEntry``) and outputs (``PredictionResult``,
``CycleRecord``) are frozen dataclasses: the engine never mutates what it
is given and every call returns fresh, independent results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from cyclesense.models.entries import FlowIntensity, SymptomScores

# A calendar date as logged: already parsed, a timestamp, or ISO-8601 text.
DateLike = date | datetime | str


class Regularity(str, Enum):
    regular = "regular"
    irregular = "irregular"
    unknown = "unknown"


@dataclass(frozen=True)
class PeriodEntry:
    """A single logged entry, as supplied by the logging collaborator.

    Attributes:
        date:              Calendar date the entry was logged.
        flow_intensity:    Logged flow.
        period_start_date: First day of a period, if this entry marks one.
        period_end_date:   Last day of that period, if known.
        symptoms:          Symptom severities logged with the entry.
    """

    date: DateLike
    flow_intensity: FlowIntensity
    period_start_date: DateLike | None = None
    period_end_date: DateLike | None = None
    symptoms: SymptomScores | None = None


@dataclass(frozen=True)
class CycleRecord:
    """One cycle in the history view.

    Attributes:
        cycle_start_date: First day of the cycle's period.
        cycle_end_date:   Last day of the cycle (day before the next period).
        cycle_length:     Days from this period start to the next one.
        period_length:    Inclusive days of bleeding, if an end was logged.
        predicted:        True for a forecast rather than an observed cycle.
    """

    cycle_start_date: date
    cycle_end_date: date | None = None
    cycle_length: int | None = None
    period_length: int | None = None
    predicted: bool = False


@dataclass(frozen=True)
class PredictionResult:
    """The engine's output for one snapshot of entries.

    Attributes:
        next_period_date:     Forecast start of the next period, or None
                              without any period data.
        cycle_length_days:    Rounded mean cycle length (default when unknown).
        period_length_days:   Rounded mean period length (default when unknown).
        regularity:           Regular / irregular / unknown.
        last_period_start:    Most recent observed period start.
        cycle_lengths:        Day gaps between consecutive starts, newest first.
        cycle_length_std_dev: Population std-dev of ``cycle_lengths``; None
                              when there are no gaps.
    """

    next_period_date: date | None = None
    cycle_length_days: int = 28
    period_length_days: int = 5
    regularity: Regularity = Regularity.unknown
    last_period_start: date | None = None
    cycle_lengths: tuple[int, ...] = field(default_factory=tuple)
    cycle_length_std_dev: float | None = None

    @property
    def has_data(self) -> bool:
        """True when at least one period start was logged."""
        return self.last_period_start is not None
