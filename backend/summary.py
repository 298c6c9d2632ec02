"""Statistics shown when a workout is complete.

All functions here are pure: they take the completed sets, the exercise list
and the session timing and return plain values.  Calorie figures are a rough
estimate based on working time and effort, not a physiological model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import math
import time

from backend import DEFAULT_RPE
from backend.exercise import CompletedSet, ExerciseInstance


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator: halves always go up."""

    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def estimate_one_rep_max(weight: float, reps: int) -> float:
    """Return the Epley estimate ``weight * (1 + reps / 30)``."""

    return weight * (1 + reps / 30)


def format_kg(value: float) -> str:
    return f"{round(value, 2):g}kg"


def average_rpe(completed: list[CompletedSet]) -> float:
    """Return the mean RPE to one decimal, or the default for no sets."""

    if not completed:
        return float(DEFAULT_RPE)
    total = sum(s.rpe or DEFAULT_RPE for s in completed)
    return round_half_up(total / len(completed), 1)


def estimate_calories(working_minutes: int, resting_minutes: int, avg_rpe: float) -> int:
    """Estimate calories burned: ~10 kcal per working minute scaled by effort."""

    intensity = avg_rpe / 7
    return int(round_half_up(working_minutes * 10 * intensity + resting_minutes * 2))


def best_set(sets: list[CompletedSet]) -> CompletedSet | None:
    """Return the set with the highest estimated one-rep max."""

    best = None
    for s in sets:
        if best is None or estimate_one_rep_max(s.weight, s.reps) > estimate_one_rep_max(
            best.weight, best.reps
        ):
            best = s
    return best


def previous_best_e1rm(exercise: ExerciseInstance) -> float:
    history_max = max((h or 0 for h in exercise.history), default=0)
    last_max = estimate_one_rep_max(
        exercise.last_weight or 0, max(exercise.last_reps or [0])
    )
    return max(history_max, last_max)


def detect_personal_records(
    completed: list[CompletedSet], exercises: list[ExerciseInstance]
) -> list[dict]:
    """Return personal records achieved in this session.

    An exercise yields at most one record.  An ``E1RM`` record is reported
    when the best set's estimate beats the previous best; otherwise a
    ``Weight`` record is reported when the heaviest best set exceeds last
    session's weight.
    """

    records: list[dict] = []
    for exercise in exercises:
        sets = [s for s in completed if s.exercise_id == exercise.id]
        top = best_set(sets)
        if top is None:
            continue
        current = estimate_one_rep_max(top.weight, top.reps)
        previous = previous_best_e1rm(exercise)
        if current > previous and previous > 0:
            records.append(
                {
                    "exercise": exercise.name,
                    "type": "E1RM",
                    "value": current,
                    "improvement": current - previous,
                    "label": format_kg(current),
                    "improvement_label": "+" + format_kg(current - previous),
                }
            )
            continue
        last_weight = exercise.last_weight or 0
        if top.weight > last_weight and last_weight > 0:
            records.append(
                {
                    "exercise": exercise.name,
                    "type": "Weight",
                    "value": top.weight,
                    "improvement": top.weight - last_weight,
                    "label": format_kg(top.weight),
                    "improvement_label": "+" + format_kg(top.weight - last_weight),
                }
            )
    return records


def exercise_breakdown(
    completed: list[CompletedSet], exercises: list[ExerciseInstance]
) -> list[dict]:
    """Return per-exercise results for exercises with at least one set."""

    breakdown = []
    for exercise in exercises:
        sets = [s for s in completed if s.exercise_id == exercise.id]
        if not sets:
            continue
        breakdown.append(
            {
                "name": exercise.name,
                "sets": len(sets),
                "target_sets": exercise.sets,
                "volume": sum(s.volume for s in sets),
                "set_details": [
                    {"weight": s.weight, "reps": s.reps, "rpe": s.rpe} for s in sets
                ],
            }
        )
    return breakdown


@dataclass
class SessionSummary:
    total_volume: float = 0
    total_reps: int = 0
    avg_rpe: float = float(DEFAULT_RPE)
    duration_minutes: int = 0
    working_minutes: int = 0
    resting_minutes: int = 0
    calories: int = 0
    efficiency_percent: int = 0
    personal_records: list[dict] = field(default_factory=list)
    breakdown: list[dict] = field(default_factory=list)


def calculate_summary(
    completed: list[CompletedSet],
    exercises: list[ExerciseInstance],
    start_time: float | None,
    end_time: float | None,
    working_seconds: float,
    resting_seconds: float,
    now: float | None = None,
) -> SessionSummary:
    """Return the :class:`SessionSummary` for a finished workout.

    ``end_time`` defaults to ``now`` (or the current time) when the session
    ended abnormally without recording one.
    """

    end = end_time if end_time is not None else (now if now is not None else time.time())
    duration_ms = (end - start_time) * 1000 if start_time is not None else 0
    duration_minutes = int(round_half_up(duration_ms / 60000))
    working_minutes = int(round_half_up(working_seconds / 60))
    resting_minutes = int(round_half_up(resting_seconds / 60))
    avg = average_rpe(completed)
    return SessionSummary(
        total_volume=sum(s.volume for s in completed),
        total_reps=sum(s.reps for s in completed),
        avg_rpe=avg,
        duration_minutes=duration_minutes,
        working_minutes=working_minutes,
        resting_minutes=resting_minutes,
        calories=estimate_calories(working_minutes, resting_minutes, avg),
        efficiency_percent=int(
            round_half_up(working_minutes / max(duration_minutes, 1) * 100)
        ),
        personal_records=detect_personal_records(completed, exercises),
        breakdown=exercise_breakdown(completed, exercises),
    )


def progress_percent(completed_count: int, total_sets: int) -> float:
    """Return completion percentage clamped to ``[0, 100]``."""

    if total_sets <= 0:
        return 0.0
    return max(0.0, min(100.0, 100 * completed_count / total_sets))
