"""Cycle and period length statistics.

All averages round half up (29.5 → 30), never to even, so the same history
always reports the same whole-day figures.
"""

from __future__ import annotations

import logging
import statistics
from datetime import date
from typing import Iterable, Sequence

from cyclesense.menstrual.normalizer import parse_entry_date, readable_entries
from cyclesense.menstrual.types import PeriodEntry, Regularity

logger = logging.getLogger("cyclesense.menstrual.cycle_stats")

# Population std-dev (days) at or below which a cycle counts as regular.
REGULARITY_STD_DEV_DAYS = 2.0


def round_half_up_mean(values: Sequence[int]) -> int:
    """Mean of whole-day values, rounded half up.

    Integer arithmetic keeps ``.5`` boundaries exact.

    Raises:
        ValueError: If ``values`` is empty.
    """
    if not values:
        raise ValueError("mean of an empty sequence")
    total = sum(values)
    n = len(values)
    return (2 * total + n) // (2 * n)


def cycle_lengths(starts: Sequence[date]) -> list[int]:
    """Day gaps between consecutive period starts.

    Starts are calendar dates, so every gap is already a whole number of days.

    Args:
        starts: Distinct start dates, most recent first.

    Returns:
        ``len(starts) - 1`` lengths, newest cycle first.
    """
    return [
        (newer - older).days
        for newer, older in zip(starts, starts[1:])
    ]


def cycle_length_std_dev(lengths: Sequence[int]) -> float | None:
    """Population standard deviation of cycle lengths, None if empty."""
    if not lengths:
        return None
    return statistics.pstdev(lengths)


def classify_regularity(lengths: Sequence[int]) -> tuple[Regularity, float | None]:
    """Label cycle-to-cycle variation.

    Returns:
        ``(regularity, std_dev)``.  With no cycle lengths the result is
        ``(Regularity.unknown, None)``.
    """
    std_dev = cycle_length_std_dev(lengths)
    if std_dev is None:
        return Regularity.unknown, None
    if std_dev <= REGULARITY_STD_DEV_DAYS:
        return Regularity.regular, std_dev
    return Regularity.irregular, std_dev


def period_span(entry: PeriodEntry) -> tuple[date, date] | None:
    """Return ``(start, end)`` when the entry logs a complete, ordered period."""
    start = parse_entry_date(entry.period_start_date)
    end = parse_entry_date(entry.period_end_date)
    if start is None or end is None:
        return None
    if end < start:
        logger.debug("Ignoring period that ends before it starts: %s → %s", start, end)
        return None
    return start, end


def period_lengths(entries: Iterable[PeriodEntry]) -> list[int]:
    """Inclusive day counts for every entry with a valid start and end."""
    lengths: list[int] = []
    for entry in readable_entries(entries):
        span = period_span(entry)
        if span is not None:
            start, end = span
            lengths.append((end - start).days + 1)
    return lengths
