"""UI screen modules for FitTrack."""

from .session import (
    RestScreen,
    WorkoutActiveScreen,
    WorkoutOverviewScreen,
    WorkoutSummaryScreen,
)
from .general import (
    HomeScreen,
    WeighInScreen,
    WeightGoalScreen,
    WorkoutHistoryScreen,
)

__all__ = [
    "HomeScreen",
    "RestScreen",
    "WeighInScreen",
    "WeightGoalScreen",
    "WorkoutActiveScreen",
    "WorkoutHistoryScreen",
    "WorkoutOverviewScreen",
    "WorkoutSummaryScreen",
]
