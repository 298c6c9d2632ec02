"""Finishing a workout session.

A completed :class:`~backend.workout_session.WorkoutSession` is flushed to the
persistence gateway one call at a time.  Individual failures are logged and
skipped so that one bad set never prevents the remaining sets, or the session
totals, from being stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

from backend.workout_session import PHASE_COMPLETE

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from backend.gateway import PersistenceGateway
    from backend.workout_session import WorkoutSession


@dataclass
class FinalizeResult:
    """Outcome of :func:`finalize_session`."""

    logged_sets: int = 0
    failed_sets: int = 0
    new_records: list[str] = field(default_factory=list)
    completed: bool = False


def validate_workout_session(session: "WorkoutSession") -> list[str]:
    """Return a list of reasons why ``session`` cannot be finalized.

    Partially completed workouts are valid; only the phase and end time are
    checked.
    """

    errors = []
    if session.phase != PHASE_COMPLETE:
        errors.append("Session has not been completed")
    if session.end_time is None:
        errors.append("Session has no end time")
    if session.saved:
        errors.append("Session has already been saved")
    return errors


def finalize_session(
    session: "WorkoutSession", gateway: "PersistenceGateway | None" = None
) -> FinalizeResult:
    """Flush every completed set and the session totals to ``gateway``.

    Sets are logged in completion order, each followed by a personal-record
    check.  When the session never received a gateway id only the local
    recovery files are cleared.
    """

    errors = validate_workout_session(session)
    if errors:
        raise ValueError("; ".join(errors))

    gateway = gateway or session.gateway
    result = FinalizeResult()
    session_id = session.session_id
    if gateway is None or session_id is None:
        logging.info("Workout finished without a stored session record")
        session.saved = True
        session.clear_recovery_files()
        return result

    by_id = {ex.id: ex for ex in session.exercises}
    for record in session.completed_sets:
        exercise = by_id.get(record.exercise_id)
        name = exercise.name if exercise else "Unknown"
        try:
            gateway.log_set(
                session_id,
                name,
                record.set_index + 1,
                record.weight,
                record.reps,
                record.rpe,
            )
            result.logged_sets += 1
        except Exception:
            logging.exception("Failed to log set %s of %s", record.set_index + 1, name)
            result.failed_sets += 1
            continue
        if exercise is None or not session.user_id:
            continue
        try:
            if gateway.check_and_create_pr(
                session.user_id,
                exercise.name,
                record.weight,
                record.reps,
                session_id,
            ):
                result.new_records.append(exercise.name)
        except Exception:
            logging.exception("Failed to check personal record for %s", name)

    stats = session.session_summary()
    try:
        gateway.complete_workout(
            session_id,
            stats.duration_minutes,
            stats.total_volume,
            session.total_working_time,
            session.total_rest_time,
        )
        result.completed = True
    except Exception:
        logging.exception("Failed to complete workout session %s", session_id)

    logging.info(
        "Finalized session %s: %d sets logged, %d failed",
        session_id,
        result.logged_sets,
        result.failed_sets,
    )
    session.saved = True
    session.clear_recovery_files()
    return result
