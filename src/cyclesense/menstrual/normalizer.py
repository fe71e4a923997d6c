"""Entry normalization: parse logged dates and extract period starts.

Logged entries arrive in any order, with optional fields missing and dates
in whatever form the logging collaborator stored them.  Anything that cannot
be read as a calendar date is dropped here, so no downstream calculation has
to handle bad input.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable

from cyclesense.menstrual.types import DateLike, PeriodEntry

logger = logging.getLogger("cyclesense.menstrual.normalizer")


def parse_entry_date(value: DateLike | None) -> date | None:
    """Return the calendar date for a logged value, or None if unreadable.

    Accepts ``date`` objects, ``datetime`` objects (date part only) and
    ISO-8601 strings such as ``2024-01-29`` or ``2024-01-29T08:30:00Z``.
    The time of day never shifts the calendar date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def entry_is_readable(entry: PeriodEntry) -> bool:
    """True when every date field present on the entry parses."""
    if parse_entry_date(entry.date) is None:
        return False
    for value in (entry.period_start_date, entry.period_end_date):
        if value is not None and parse_entry_date(value) is None:
            return False
    return True


def readable_entries(entries: Iterable[PeriodEntry]) -> list[PeriodEntry]:
    """Drop entries carrying any unparsable date field."""
    kept: list[PeriodEntry] = []
    for entry in entries:
        if entry_is_readable(entry):
            kept.append(entry)
        else:
            logger.debug("Dropping entry with unparsable date fields: %r", entry)
    return kept


def normalize_start_dates(entries: Iterable[PeriodEntry]) -> list[date]:
    """Return distinct period start dates, most recent first.

    Entries without a start date, or with any unparsable date field, are
    skipped.  Duplicate start dates collapse to one.
    """
    starts = {
        parse_entry_date(entry.period_start_date)
        for entry in readable_entries(entries)
        if entry.period_start_date is not None
    }
    starts.discard(None)
    return sorted(starts, reverse=True)
