"""Tests for stored-row schemas and symptom score validation."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from cyclesense.models.entries import (
    CycleHistoryRow,
    FlowIntensity,
    PeriodEntryRow,
    SymptomKey,
    SymptomScores,
)


class TestSymptomScores:
    def test_valid_scores(self) -> None:
        scores = SymptomScores(cramps=4, mood=1)
        assert scores.get(SymptomKey.cramps) == 4
        assert scores.get(SymptomKey.energy) is None
        assert scores.logged() == {SymptomKey.cramps: 4, SymptomKey.mood: 1}

    @pytest.mark.parametrize("severity", [0, 6, -1])
    def test_out_of_range_rejected(self, severity: int) -> None:
        with pytest.raises(ValidationError):
            SymptomScores(headache=severity)

    def test_unknown_symptom_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SymptomScores(acne=2)  # type: ignore[call-arg]

    def test_frozen(self) -> None:
        scores = SymptomScores(cramps=2)
        with pytest.raises(ValidationError):
            scores.cramps = 3  # type: ignore[misc]

    def test_clamped_bounds_values(self) -> None:
        scores = SymptomScores.clamped({"cramps": 9, "bloating": 0, "Mood": "3"})
        assert scores.cramps == 5
        assert scores.bloating == 1
        assert scores.mood == 3

    def test_clamped_drops_unknown_and_garbage(self, caplog: pytest.LogCaptureFixture) -> None:
        scores = SymptomScores.clamped({"sleepiness": 3, "energy": "high", "headache": None})
        assert scores.logged() == {}
        assert "unknown symptom key" in caplog.text

    def test_clamped_none(self) -> None:
        assert SymptomScores.clamped(None) == SymptomScores()


class TestPeriodEntryRow:
    def test_flow_normalized(self) -> None:
        row = PeriodEntryRow.model_validate({"date": "2024-01-01", "flow_intensity": " Heavy "})
        assert row.flow_intensity is FlowIntensity.heavy

    def test_unknown_flow_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PeriodEntryRow.model_validate({"date": "2024-01-01", "flow_intensity": "torrential"})

    def test_dates_kept_raw(self) -> None:
        row = PeriodEntryRow.model_validate(
            {"date": date(2024, 1, 1), "flow_intensity": "light", "period_start_date": "2024-02-31"}
        )
        assert row.entry_date == date(2024, 1, 1)
        assert row.period_start_date == "2024-02-31"

    def test_symptoms_json_text_decoded(self) -> None:
        row = PeriodEntryRow.model_validate(
            {"date": "2024-01-01", "flow_intensity": "light", "symptoms": '{"cramps": 2}'}
        )
        assert row.symptoms == {"cramps": 2}

    def test_undecodable_symptoms_dropped(self) -> None:
        row = PeriodEntryRow.model_validate(
            {"date": "2024-01-01", "flow_intensity": "light", "symptoms": "{not json"}
        )
        assert row.symptoms is None


class TestCycleHistoryRow:
    def test_valid_row(self) -> None:
        row = CycleHistoryRow.model_validate(
            {"cycle_start_date": "2024-01-01", "cycle_length": 28, "predicted": True}
        )
        assert row.cycle_start_date == date(2024, 1, 1)
        assert row.predicted

    def test_non_positive_length_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CycleHistoryRow.model_validate({"cycle_start_date": "2024-01-01", "period_length": 0})
