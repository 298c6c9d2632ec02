"""Shared constants and globals for backend modules."""

from __future__ import annotations

from pathlib import Path

# Default values used throughout the application
DEFAULT_SETS_PER_EXERCISE = 3
DEFAULT_REST_DURATION = 90
DEFAULT_RPE = 5
DEFAULT_PROGRAM_WEEKS = 16
DEFAULT_AVAILABLE_TIME = 60
DEFAULT_GOAL = "build_muscle"

# Plausible human body weight range in kilograms
MIN_WEIGHT_KG = 35
MAX_WEIGHT_KG = 250

# Path to the SQLite database used as the persistence gateway
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "data" / "fittrack.db"

# Schema applied when the database file does not exist yet
SCHEMA_PATH = Path(__file__).resolve().parent.parent / "data" / "fittrack_schema.sql"

__all__ = [
    "DEFAULT_SETS_PER_EXERCISE",
    "DEFAULT_REST_DURATION",
    "DEFAULT_RPE",
    "DEFAULT_PROGRAM_WEEKS",
    "DEFAULT_AVAILABLE_TIME",
    "DEFAULT_GOAL",
    "MIN_WEIGHT_KG",
    "MAX_WEIGHT_KG",
    "DEFAULT_DB_PATH",
    "SCHEMA_PATH",
]
