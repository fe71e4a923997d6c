"""CycleSense — menstrual cycle statistics and next-period prediction.

Turns logged period entries into cycle length, period length, regularity
and a next-period forecast, plus fertile-window estimates for the same
cycle.  The engine is pure and synchronous; the ``services`` subpackage
feeds it from storage.

Subpackages:
    menstrual/ — Prediction engine (normalizer, statistics, predictor, fertility, history)
    models/    — Pydantic schemas for stored rows and symptom scores
    services/  — asyncpg data source and the refresh service

Core modules:
    config          — Environment settings (pydantic-settings)
    config_loader   — Load/validate/hot-reload engine_config.yaml
    logging_config  — Process-wide logging setup
"""

from cyclesense.config_loader import EngineConfig, get_engine_config
from cyclesense.menstrual import (
    CyclePredictor,
    CycleRecord,
    FertilityEstimate,
    FertilityStatus,
    PeriodEntry,
    PredictionResult,
    Regularity,
    compute_fertility_status,
    compute_prediction,
)
from cyclesense.models import FlowIntensity, SymptomKey, SymptomScores

__version__ = "0.1.0"

__all__ = [
    "CyclePredictor",
    "CycleRecord",
    "EngineConfig",
    "FertilityEstimate",
    "FertilityStatus",
    "FlowIntensity",
    "PeriodEntry",
    "PredictionResult",
    "Regularity",
    "SymptomKey",
    "SymptomScores",
    "compute_fertility_status",
    "compute_prediction",
    "get_engine_config",
]
