"""SQLite implementation of the workout persistence gateway.

The rest of the application treats this object as a remote service: every
call may fail, and callers catch and log errors instead of letting them
interrupt the workout.  Each method opens its own connection so a gateway can
be shared freely between screens.
"""

from __future__ import annotations

import datetime
import logging
import sqlite3
import time
from pathlib import Path

from backend import DEFAULT_DB_PATH, SCHEMA_PATH
from backend.summary import estimate_one_rep_max


class PersistenceGateway:
    """Store workouts, sets, personal records and weigh-ins."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH, schema_path: Path = SCHEMA_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(str(self.db_path)) as conn:
            conn.executescript(Path(schema_path).read_text(encoding="utf-8"))

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path))

    # ------------------------------------------------------------------
    # Workout sessions
    # ------------------------------------------------------------------

    def start_workout(
        self,
        user_id: str,
        program_id: str | None = None,
        plan_id: str | None = None,
        workout_name: str | None = None,
    ) -> int:
        """Create a session record and return its id."""

        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO workout_sessions
                    (user_id, program_id, plan_id, workout_name, started_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (user_id, program_id, plan_id, workout_name, time.time()),
            )
            session_id = cursor.lastrowid
        logging.info("Started workout session %s for %s", session_id, user_id)
        return session_id

    def log_set(
        self,
        session_id: int,
        exercise_name: str,
        set_number: int,
        weight: float,
        reps: int,
        rpe: int | None = None,
        is_warmup: bool = False,
    ) -> int:
        """Record a completed set and return the new row id."""

        if not exercise_name:
            raise ValueError("Exercise name is required to log a set")
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO workout_sets
                    (session_id, exercise_name, set_number, weight, reps, rpe, is_warmup)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    session_id,
                    exercise_name,
                    set_number,
                    weight,
                    reps,
                    rpe or None,
                    int(is_warmup),
                ),
            )
            return cursor.lastrowid

    def check_and_create_pr(
        self,
        user_id: str,
        exercise_name: str,
        weight: float,
        reps: int,
        session_id: int | None = None,
    ) -> bool:
        """Store a personal record if this set beats the stored best.

        Returns ``True`` when a new record was written.
        """

        e1rm = estimate_one_rep_max(weight, reps)
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT MAX(e1rm) FROM personal_records
                 WHERE user_id = ? AND exercise_name = ?
                """,
                (user_id, exercise_name),
            ).fetchone()
            current = row[0] if row else None
            if current is not None and e1rm <= current:
                return False
            conn.execute(
                """
                INSERT INTO personal_records
                    (user_id, exercise_name, weight, reps, e1rm, workout_session_id, achieved_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (user_id, exercise_name, weight, reps, e1rm, session_id, time.time()),
            )
        return True

    def complete_workout(
        self,
        session_id: int,
        duration_minutes: int,
        total_volume: float,
        working_time: int,
        rest_time: int,
    ) -> None:
        """Mark ``session_id`` finished and store its totals."""

        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE workout_sessions
                   SET ended_at = ?, duration_minutes = ?, total_volume = ?,
                       working_time = ?, rest_time = ?
                 WHERE id = ?
                """,
                (
                    time.time(),
                    duration_minutes,
                    total_volume,
                    working_time,
                    rest_time,
                    session_id,
                ),
            )
            if cursor.rowcount == 0:
                raise LookupError(f"Workout session {session_id} not found")

    def get_workout_history(self, user_id: str, limit: int = 20, offset: int = 0) -> list[dict]:
        """Return finished sessions, most recent first."""

        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT id, workout_name, started_at, ended_at, duration_minutes, total_volume
                  FROM workout_sessions
                 WHERE user_id = ? AND ended_at IS NOT NULL
                 ORDER BY started_at DESC
                 LIMIT ? OFFSET ?
                """,
                (user_id, limit, offset),
            ).fetchall()
        return [
            {
                "id": sid,
                "workout_name": name or "Workout",
                "started_at": started,
                "ended_at": ended,
                "duration_minutes": duration,
                "total_volume": volume,
            }
            for sid, name, started, ended, duration, volume in rows
        ]

    def get_exercise_history(self, user_id: str, days: int = 90) -> dict[str, dict]:
        """Return the most recent performance of every exercise.

        Each entry maps the exercise name to ``last_weight`` (heaviest set),
        ``last_reps`` (reps per set in set order), ``last_rpe`` and the
        ``e1rm_history`` of stored personal records.
        """

        since = time.time() - days * 24 * 60 * 60
        history: dict[str, dict] = {}
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT s.id, ws.exercise_name, ws.set_number, ws.weight, ws.reps, ws.rpe
                  FROM workout_sessions s
                  JOIN workout_sets ws ON ws.session_id = s.id
                 WHERE s.user_id = ? AND s.ended_at IS NOT NULL
                   AND s.started_at >= ? AND ws.is_warmup = 0
                 ORDER BY s.started_at DESC, ws.set_number
                """,
                (user_id, since),
            ).fetchall()
            for session_id, name, _num, weight, reps, rpe in rows:
                entry = history.get(name)
                if entry is None:
                    entry = history[name] = {
                        "session_id": session_id,
                        "last_weight": 0,
                        "last_reps": [],
                        "last_rpe": None,
                        "e1rm_history": [],
                    }
                if entry["session_id"] != session_id:
                    continue
                entry["last_weight"] = max(entry["last_weight"], weight or 0)
                entry["last_reps"].append(reps or 0)
                entry["last_rpe"] = rpe
            pr_rows = conn.execute(
                """
                SELECT exercise_name, e1rm FROM personal_records
                 WHERE user_id = ?
                 ORDER BY achieved_at
                """,
                (user_id,),
            ).fetchall()
        for name, e1rm in pr_rows:
            if name in history:
                history[name]["e1rm_history"].append(e1rm)
        return history

    # ------------------------------------------------------------------
    # Body weight
    # ------------------------------------------------------------------

    def log_weight(
        self, user_id: str, weight_kg: float, log_date: str | None = None
    ) -> float:
        """Store one weigh-in per user and day, replacing an earlier entry."""

        log_date = log_date or datetime.date.today().isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO weight_logs (user_id, log_date, weight)
                VALUES (?, ?, ?)
                ON CONFLICT (user_id, log_date) DO UPDATE SET weight = excluded.weight
                """,
                (user_id, log_date, weight_kg),
            )
        logging.info("Logged weight %.1f kg for %s on %s", weight_kg, user_id, log_date)
        return weight_kg

    def get_weight_logs(self, user_id: str, limit: int = 30) -> list[dict]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT log_date, weight FROM weight_logs
                 WHERE user_id = ?
                 ORDER BY log_date DESC
                 LIMIT ?
                """,
                (user_id, limit),
            ).fetchall()
        return [{"log_date": d, "weight": w} for d, w in rows]
