from __future__ import annotations

"""Entry points shared by the screens.

Constants live in :mod:`backend` and are re-exported here so UI code only has
to import from one place.
"""

import logging
from pathlib import Path

from backend import (
    DEFAULT_AVAILABLE_TIME,
    DEFAULT_DB_PATH,
    DEFAULT_GOAL,
    DEFAULT_PROGRAM_WEEKS,
    DEFAULT_REST_DURATION,
    DEFAULT_RPE,
    DEFAULT_SETS_PER_EXERCISE,
    MAX_WEIGHT_KG,
    MIN_WEIGHT_KG,
)
from backend import settings
from backend.catalog import GOAL_TO_PROGRAM, get_template
from backend.gateway import PersistenceGateway
from backend.planning import build_exercise_list, optimize_exercise_order
from backend.sessions import finalize_session
from backend.workout_session import WorkoutSession

__all__ = [
    "DEFAULT_AVAILABLE_TIME",
    "DEFAULT_DB_PATH",
    "DEFAULT_GOAL",
    "DEFAULT_PROGRAM_WEEKS",
    "DEFAULT_REST_DURATION",
    "DEFAULT_RPE",
    "DEFAULT_SETS_PER_EXERCISE",
    "MAX_WEIGHT_KG",
    "MIN_WEIGHT_KG",
    "PersistenceGateway",
    "WorkoutSession",
    "create_workout_session",
    "finalize_session",
    "log_weigh_in",
]


def create_workout_session(
    template_id: str | None = None,
    gateway: PersistenceGateway | None = None,
    user_id: str | None = None,
    goal: str | None = None,
    available_time: int | None = None,
    clock=None,
    recovery_base: Path | None = None,
) -> WorkoutSession:
    """Return a new session in the overview phase.

    Missing arguments are read from the user's settings.  Last-session
    weights and reps are looked up through ``gateway`` when one is given; a
    failing lookup only means the session starts without history.
    """

    user_id = user_id or settings.get_value("user_id")
    goal = goal or settings.get_value("goal", DEFAULT_GOAL)
    available_time = available_time or settings.get_value(
        "available_time", DEFAULT_AVAILABLE_TIME
    )

    history = None
    if gateway is not None and user_id:
        try:
            history = gateway.get_exercise_history(user_id)
        except Exception:
            logging.exception("Failed to load exercise history")

    template = get_template(template_id) if template_id else None
    exercises = build_exercise_list(template, available_time, history)
    exercises = optimize_exercise_order(exercises, goal)
    return WorkoutSession(
        exercises,
        goal=goal,
        user_id=user_id,
        workout_name=template["name"] if template else "Workout",
        program_id=GOAL_TO_PROGRAM.get(goal),
        plan_id=template_id,
        gateway=gateway,
        clock=clock,
        recovery_base=recovery_base,
    )


def log_weigh_in(
    gateway: PersistenceGateway, user_id: str, weight_kg: float
) -> bool:
    """Send a weigh-in to ``gateway``, returning ``False`` if it failed."""

    try:
        gateway.log_weight(user_id, weight_kg)
    except Exception:
        logging.exception("Failed to log weigh-in")
        return False
    settings.set_value("current_weight", round(weight_kg, 1))
    return True
