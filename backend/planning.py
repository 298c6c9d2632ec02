"""Helpers that prepare the exercise list of a workout.

These functions never touch the database.  They order exercises for the
user's goal and fit the prescribed sets and rest periods into the time the
user has available.
"""

from __future__ import annotations

from dataclasses import replace

from backend import DEFAULT_AVAILABLE_TIME, DEFAULT_REST_DURATION
from backend.catalog import (
    COMPOUND_KEYWORDS,
    DEFAULT_EXERCISES,
    GOAL_MUSCLE_PRIORITIES,
    ISOLATION_PENALTY,
    UNMAPPED_PRIORITY,
    alternatives_for,
)
from backend.exercise import ExerciseInstance

# Timing estimates in seconds
AVG_SET_DURATION = 45
WARMUP_TIME = 180
COOLDOWN_TIME = 120
TRANSITION_TIME = 30

MIN_REST_PER_PERIOD = 30
MAX_REST_PER_PERIOD = 180
MIN_SETS = 2
MAX_SETS = 5


def muscle_group_priority(muscle_group: str, goal: str | None) -> int:
    """Return the priority of ``muscle_group`` for ``goal``."""

    table = GOAL_MUSCLE_PRIORITIES.get(goal or "", GOAL_MUSCLE_PRIORITIES["default"])
    return table.get(muscle_group, UNMAPPED_PRIORITY)


def compound_bonus(name: str) -> int:
    """Return 0 for compound movements and ``ISOLATION_PENALTY`` otherwise."""

    lowered = name.lower()
    if any(keyword.lower() in lowered for keyword in COMPOUND_KEYWORDS):
        return 0
    return ISOLATION_PENALTY


def exercise_sort_key(exercise: ExerciseInstance, goal: str | None) -> int:
    return muscle_group_priority(exercise.muscle_group, goal) + compound_bonus(
        exercise.name
    )


def optimize_exercise_order(
    exercises: list[ExerciseInstance], goal: str | None
) -> list[ExerciseInstance]:
    """Return ``exercises`` sorted for ``goal``.

    Larger muscle groups and compound lifts come first.  The sort is stable so
    exercises with equal keys keep their relative order.
    """

    if len(exercises) <= 1:
        return list(exercises)
    return sorted(exercises, key=lambda ex: exercise_sort_key(ex, goal))


def _available_rest(exercises: list[ExerciseInstance], target_seconds: int) -> tuple[int, int]:
    fixed = WARMUP_TIME + COOLDOWN_TIME + (len(exercises) - 1) * TRANSITION_TIME
    total_sets = sum(ex.sets for ex in exercises)
    working = total_sets * AVG_SET_DURATION
    rest_periods = total_sets - len(exercises)
    return target_seconds - fixed - working, rest_periods


def optimize_exercises_for_time(
    exercises: list[ExerciseInstance], target_minutes: int
) -> list[ExerciseInstance]:
    """Adjust sets and rest so the workout fits ``target_minutes``.

    Sets are removed from the largest exercise while rest would drop below
    30 seconds per period, and added to the smallest while rest would exceed
    three minutes.  The resulting rest time per period is applied to every
    exercise.
    """

    if not exercises:
        return []
    target_seconds = target_minutes * 60
    optimized = [replace(ex, last_reps=list(ex.last_reps)) for ex in exercises]

    available, periods = _available_rest(optimized, target_seconds)
    while available < periods * MIN_REST_PER_PERIOD and any(
        ex.sets > MIN_SETS for ex in optimized
    ):
        largest = optimized[0]
        for ex in optimized:
            if ex.sets > largest.sets:
                largest = ex
        if largest.sets <= MIN_SETS:
            break
        largest.sets -= 1
        available, periods = _available_rest(optimized, target_seconds)

    while available > periods * MAX_REST_PER_PERIOD and any(
        ex.sets < MAX_SETS for ex in optimized
    ):
        smallest = optimized[0]
        for ex in optimized:
            if ex.sets < smallest.sets and ex.sets < MAX_SETS:
                smallest = ex
        if smallest.sets >= MAX_SETS:
            break
        smallest.sets += 1
        available, periods = _available_rest(optimized, target_seconds)

    if periods > 0:
        rest = round(available / periods)
        rest = max(MIN_REST_PER_PERIOD, min(MAX_REST_PER_PERIOD, rest))
    else:
        rest = DEFAULT_REST_DURATION
    for ex in optimized:
        ex.rest_time = rest
    return optimized


def workout_time_breakdown(exercises: list[ExerciseInstance]) -> dict:
    """Return estimated working, rest and total time in seconds."""

    warmup_cooldown = WARMUP_TIME + COOLDOWN_TIME
    if not exercises:
        return {
            "working_time": 0,
            "rest_time": 0,
            "transition_time": 0,
            "warmup_cooldown": warmup_cooldown,
            "total_time": 0,
        }
    working = sum(ex.sets * AVG_SET_DURATION for ex in exercises)
    rest = sum((ex.sets - 1) * ex.rest_time for ex in exercises)
    transition = (len(exercises) - 1) * TRANSITION_TIME
    return {
        "working_time": working,
        "rest_time": rest,
        "transition_time": transition,
        "warmup_cooldown": warmup_cooldown,
        "total_time": working + rest + transition + warmup_cooldown,
    }


def apply_exercise_history(
    exercises: list[ExerciseInstance], history: dict[str, dict] | None
) -> None:
    """Fill last-session references from ``history`` keyed by exercise name."""

    if not history:
        return
    for ex in exercises:
        entry = history.get(ex.name)
        if not entry:
            continue
        last_weight = entry.get("last_weight") or 0
        last_reps = entry.get("last_reps") or 0
        ex.last_weight = last_weight
        if isinstance(last_reps, list):
            ex.last_reps = list(last_reps)
        else:
            ex.last_reps = [last_reps] * ex.sets
        if entry.get("e1rm_history"):
            ex.history = list(entry["e1rm_history"])


def build_exercise_list(
    template: dict | None,
    available_time: int = DEFAULT_AVAILABLE_TIME,
    history: dict[str, dict] | None = None,
) -> list[ExerciseInstance]:
    """Return the initial exercise list for a workout.

    Uses ``template['exercises']`` or the built-in default list, keeps as many
    exercises as fit into ``available_time`` (at least two) and balances sets
    and rest for that duration.
    """

    entries = (template or {}).get("exercises") or DEFAULT_EXERCISES
    count = max(2, available_time // 12)
    exercises = [ExerciseInstance.from_template(entry) for entry in entries[:count]]
    for ex in exercises:
        ex.alternatives = alternatives_for(ex.muscle_group)
    apply_exercise_history(exercises, history)
    return optimize_exercises_for_time(exercises, available_time)
