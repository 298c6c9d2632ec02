"""Screens used during an active workout session."""

from .rest_screen import RestScreen
from .workout_active_screen import WorkoutActiveScreen
from .workout_overview_screen import WorkoutOverviewScreen
from .workout_summary_screen import WorkoutSummaryScreen

__all__ = [
    "RestScreen",
    "WorkoutActiveScreen",
    "WorkoutOverviewScreen",
    "WorkoutSummaryScreen",
]
