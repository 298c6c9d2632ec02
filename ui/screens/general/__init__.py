"""Screens not directly part of the workout session loop."""

from .home_screen import HomeScreen
from .weigh_in_screen import WeighInScreen
from .weight_goal_screen import WeightGoalScreen
from .workout_history_screen import WorkoutHistoryScreen

__all__ = [
    "HomeScreen",
    "WeighInScreen",
    "WeightGoalScreen",
    "WorkoutHistoryScreen",
]
