"""Tests for derived cycle history records."""

from __future__ import annotations

from datetime import date

from cyclesense.config_loader import EngineConfig, HistoryConfig
from cyclesense.menstrual.history import build_cycle_history
from cyclesense.menstrual.predictor import CyclePredictor
from cyclesense.menstrual.types import CycleRecord, PeriodEntry
from cyclesense.tests.conftest import entries_for_starts, make_entry


class TestBuildCycleHistory:
    def test_forecast_first_then_newest_observed(
        self, engine_config: EngineConfig, regular_entries: list[PeriodEntry]
    ) -> None:
        records = build_cycle_history(regular_entries, engine_config)
        assert [r.cycle_start_date for r in records] == [
            date(2024, 3, 25),
            date(2024, 2, 26),
            date(2024, 1, 29),
            date(2024, 1, 1),
        ]
        assert records[0].predicted
        assert not any(r.predicted for r in records[1:])

    def test_closed_cycles_end_day_before_next_start(
        self, engine_config: EngineConfig, regular_entries: list[PeriodEntry]
    ) -> None:
        records = build_cycle_history(regular_entries, engine_config)
        oldest = records[-1]
        assert oldest == CycleRecord(
            cycle_start_date=date(2024, 1, 1),
            cycle_end_date=date(2024, 1, 28),
            cycle_length=28,
            period_length=5,
        )

    def test_newest_observed_cycle_is_open(
        self, engine_config: EngineConfig, regular_entries: list[PeriodEntry]
    ) -> None:
        current = build_cycle_history(regular_entries, engine_config)[1]
        assert current.cycle_start_date == date(2024, 2, 26)
        assert current.cycle_end_date is None
        assert current.cycle_length is None
        assert current.period_length == 5

    def test_forecast_carries_predicted_lengths(self, engine_config: EngineConfig) -> None:
        entries = entries_for_starts("2024-03-01", "2024-01-25", "2024-01-01")
        forecast = build_cycle_history(entries, engine_config)[0]
        assert forecast.predicted
        assert forecast.cycle_start_date == date(2024, 3, 31)
        assert forecast.cycle_length == 30
        assert forecast.period_length == 5

    def test_reuses_given_prediction(
        self, engine_config: EngineConfig, regular_entries: list[PeriodEntry]
    ) -> None:
        prediction = CyclePredictor(engine_config).compute_prediction(regular_entries)
        assert build_cycle_history(regular_entries, engine_config, prediction=prediction) == (
            build_cycle_history(regular_entries, engine_config)
        )

    def test_latest_end_wins_for_shared_start(self, engine_config: EngineConfig) -> None:
        entries = [
            make_entry("2024-01-01", "2024-01-03"),
            make_entry("2024-01-01", "2024-01-06", logged="2024-01-06"),
        ]
        records = build_cycle_history(entries, engine_config)
        assert records[-1].period_length == 6

    def test_inverted_period_leaves_length_unknown(self, engine_config: EngineConfig) -> None:
        records = build_cycle_history([make_entry("2024-01-10", "2024-01-02")], engine_config)
        assert records[-1].period_length is None

    def test_forecast_can_be_disabled(self, regular_entries: list[PeriodEntry]) -> None:
        config = EngineConfig(history=HistoryConfig(include_forecast=False))
        records = build_cycle_history(regular_entries, config)
        assert len(records) == 3
        assert not any(r.predicted for r in records)

    def test_max_records_limits_output(self) -> None:
        config = EngineConfig(history=HistoryConfig(max_records=2))
        entries = entries_for_starts("2024-04-22", "2024-03-25", "2024-02-26", "2024-01-29", "2024-01-01")
        records = build_cycle_history(entries, config)
        assert len(records) == 2
        assert records[0].predicted
        assert records[1].cycle_start_date == date(2024, 4, 22)

    def test_no_entries(self, engine_config: EngineConfig) -> None:
        assert build_cycle_history([], engine_config) == []
