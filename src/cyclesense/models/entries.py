"""Pydantic schemas for period entries and cycle history as they are stored.

``SymptomScores`` is the one schema shared with the engine: the explicit,
closed record of symptom severities attached to a ``PeriodEntry``.  The
``*Row`` models mirror the ``period_entries`` and ``menstrual_cycles`` tables;
``cyclesense.services.cycle_data`` converts them into engine values.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping

from pydantic import ConfigDict, Field, field_validator

from cyclesense.models.base import CycleSenseBase

logger = logging.getLogger("cyclesense.models.entries")

MIN_SEVERITY = 1
MAX_SEVERITY = 5


# ---------- Enums ----------

class FlowIntensity(str, Enum):
    spotting = "spotting"
    light = "light"
    medium = "medium"
    heavy = "heavy"


class SymptomKey(str, Enum):
    cramps = "cramps"
    mood = "mood"
    energy = "energy"
    headache = "headache"
    bloating = "bloating"


# ---------- Symptoms ----------

class SymptomScores(CycleSenseBase):
    """Severity (1–5) per tracked symptom; ``None`` means not logged.

    Constructing the model directly rejects out-of-range severities.  Use
    ``SymptomScores.clamped()`` for values read back from storage.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    cramps: int | None = Field(default=None, ge=MIN_SEVERITY, le=MAX_SEVERITY)
    mood: int | None = Field(default=None, ge=MIN_SEVERITY, le=MAX_SEVERITY)
    energy: int | None = Field(default=None, ge=MIN_SEVERITY, le=MAX_SEVERITY)
    headache: int | None = Field(default=None, ge=MIN_SEVERITY, le=MAX_SEVERITY)
    bloating: int | None = Field(default=None, ge=MIN_SEVERITY, le=MAX_SEVERITY)

    def get(self, key: SymptomKey) -> int | None:
        return getattr(self, key.value)

    def logged(self) -> dict[SymptomKey, int]:
        """Return only the symptoms that carry a severity."""
        return {key: value for key in SymptomKey if (value := self.get(key)) is not None}

    @classmethod
    def clamped(cls, raw: Mapping[str, Any] | None) -> SymptomScores:
        """Build scores from a stored mapping, clamping severities into [1, 5].

        Unknown keys and non-integer values are dropped with a warning.
        """
        values: dict[str, int] = {}
        for key, value in (raw or {}).items():
            try:
                symptom = SymptomKey(str(key).lower())
            except ValueError:
                logger.warning("Dropping unknown symptom key %r", key)
                continue
            if value is None:
                continue
            if isinstance(value, bool):
                logger.warning("Dropping non-numeric severity for %s: %r", symptom.value, value)
                continue
            try:
                severity = int(value)
            except (TypeError, ValueError):
                logger.warning("Dropping non-numeric severity for %s: %r", symptom.value, value)
                continue
            bounded = min(MAX_SEVERITY, max(MIN_SEVERITY, severity))
            if bounded != severity:
                logger.warning(
                    "Clamped %s severity %d into [%d, %d]",
                    symptom.value, severity, MIN_SEVERITY, MAX_SEVERITY,
                )
            values[symptom.value] = bounded
        return cls(**values)


# ---------- Period entries ----------

class PeriodEntryRow(CycleSenseBase):
    """One row of ``period_entries``.

    Date columns are kept as-is (``date`` or raw text); calendar parsing
    happens once, in the engine's normalizer.
    """

    user_id: uuid.UUID | None = None
    entry_date: date | datetime | str = Field(alias="date")
    flow_intensity: FlowIntensity
    period_start_date: date | datetime | str | None = None
    period_end_date: date | datetime | str | None = None
    symptoms: dict[str, Any] | None = None

    @field_validator("flow_intensity", mode="before")
    @classmethod
    def _normalize_flow(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("symptoms", mode="before")
    @classmethod
    def _decode_symptoms(cls, value: Any) -> Any:
        # jsonb arrives as text unless the connection registers a codec
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                logger.warning("Ignoring undecodable symptoms payload")
                return None
        return value if isinstance(value, dict) or value is None else None


# ---------- Cycle history ----------

class CycleHistoryRow(CycleSenseBase):
    """One row of ``menstrual_cycles`` (computed or predicted cycles)."""

    user_id: uuid.UUID | None = None
    cycle_start_date: date
    cycle_end_date: date | None = None
    cycle_length: int | None = Field(default=None, gt=0)
    period_length: int | None = Field(default=None, gt=0)
    predicted: bool = False

