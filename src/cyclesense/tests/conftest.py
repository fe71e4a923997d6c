"""Shared fixtures and helpers for cycle engine tests."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from uuid import UUID

import pytest

from cyclesense.config_loader import EngineConfig, load_engine_config
from cyclesense.menstrual.types import DateLike, PeriodEntry
from cyclesense.models.entries import FlowIntensity

# Fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Canonical test user IDs
TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")
OTHER_USER_ID = UUID("87654321-4321-8765-4321-876543218765")
TEST_DATE = date(2024, 3, 10)


def make_entry(
    start: DateLike | None,
    end: DateLike | None = None,
    logged: DateLike | None = None,
    flow: FlowIntensity = FlowIntensity.medium,
) -> PeriodEntry:
    """Build an entry; the logged date defaults to the start date."""
    return PeriodEntry(
        date=logged if logged is not None else (start if start is not None else TEST_DATE),
        flow_intensity=flow,
        period_start_date=start,
        period_end_date=end,
    )


def entries_for_starts(*starts: str) -> list[PeriodEntry]:
    return [make_entry(date.fromisoformat(s)) for s in starts]


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine_config() -> EngineConfig:
    """Load the bundled engine config for tests."""
    return load_engine_config()


# ---------------------------------------------------------------------------
# JSON fixture loaders
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_data() -> dict:
    return json.loads((FIXTURES_DIR / "cycle_data.json").read_text())


# ---------------------------------------------------------------------------
# Entry fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def regular_entries() -> list[PeriodEntry]:
    """Three 28-day cycles with 5-day periods, logged out of order."""
    return [
        make_entry(date(2024, 1, 29), date(2024, 2, 2)),
        make_entry(date(2024, 2, 26), date(2024, 3, 1)),
        make_entry(date(2024, 1, 1), date(2024, 1, 5)),
        # mid-period day logs carry no start marker
        make_entry(None, logged=date(2024, 2, 27), flow=FlowIntensity.heavy),
    ]


@pytest.fixture
def irregular_entries(cycle_data: dict) -> list[PeriodEntry]:
    return entries_for_starts(*cycle_data["irregular_starts"])
