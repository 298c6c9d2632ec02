import json
import logging
import time
from pathlib import Path

from backend import DEFAULT_GOAL, DEFAULT_RPE
from backend.catalog import get_exercise
from backend.exercise import CompletedSet, ExerciseInstance, make_exercise_id
from backend.planning import optimize_exercise_order
from backend.rest_timer import RestTimer
from backend.summary import (
    SessionSummary,
    calculate_summary,
    progress_percent,
    round_half_up,
)


PHASE_OVERVIEW = "overview"
PHASE_WORKOUT = "workout"
PHASE_WORKOUT_OVERVIEW = "workoutOverview"
PHASE_COMPLETE = "complete"

PHASES = (PHASE_OVERVIEW, PHASE_WORKOUT, PHASE_WORKOUT_OVERVIEW, PHASE_COMPLETE)

# In-progress sessions are mirrored to two JSON files next to the database so
# a crash or forced close can be recovered on the next start.
RECOVERY_DIR = Path(__file__).resolve().parents[1] / "data"
RECOVERY_BASE = RECOVERY_DIR / "session_recovery"


def recovery_paths(base: Path) -> tuple[Path, Path]:
    base = Path(base)
    return (
        base.with_name(base.name + "_1.json"),
        base.with_name(base.name + "_2.json"),
    )


class WorkoutSession:
    """State of one active workout.

    The session moves through the phases ``overview`` (before starting),
    ``workout`` (performing a set or resting), ``workoutOverview`` (browsing
    the full list mid-workout) and ``complete``.  The current position is the
    pair ``(current_exercise, current_set)`` of indices into :attr:`exercises`.

    Working time is measured from ``current_set_start_time`` to set
    completion.  Rest time is added in full when a rest period starts and the
    unused remainder is subtracted again if the rest is skipped.

    The persistence gateway is optional and every call to it is wrapped so
    that a failing backend never interrupts the workout.
    """

    def __init__(
        self,
        exercises: list[ExerciseInstance],
        goal: str = DEFAULT_GOAL,
        user_id: str | None = None,
        workout_name: str = "Workout",
        program_id: str | None = None,
        plan_id: str | None = None,
        gateway=None,
        clock=None,
        recovery_base: Path | None = None,
    ):
        self.goal = goal
        self.user_id = user_id
        self.workout_name = workout_name
        self.program_id = program_id
        self.plan_id = plan_id
        self.gateway = gateway
        self.recovery_base = Path(recovery_base) if recovery_base else RECOVERY_BASE

        self.exercises: list[ExerciseInstance] = list(exercises)
        self.completed_sets: list[CompletedSet] = []

        self.phase = PHASE_OVERVIEW
        self.current_exercise = 0
        self.current_set = 0
        self.is_resting = False
        self.rest_time_left = 0

        self.start_time: float | None = None
        self.end_time: float | None = None
        self.current_set_start_time: float | None = None
        self.total_working_time = 0
        self.total_rest_time = 0

        self.session_id = None
        self.saved = False
        self.current_input: dict = {}

        self.rest_timer = RestTimer(self.tick, clock=clock)
        self.reset_current_input()

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    @property
    def current(self) -> ExerciseInstance | None:
        if 0 <= self.current_exercise < len(self.exercises):
            return self.exercises[self.current_exercise]
        return None

    @property
    def total_sets(self) -> int:
        return sum(ex.sets for ex in self.exercises)

    @property
    def progress_percent(self) -> float:
        return progress_percent(len(self.completed_sets), self.total_sets)

    @property
    def is_active(self) -> bool:
        return self.phase in (PHASE_WORKOUT, PHASE_WORKOUT_OVERVIEW)

    def completed_for(self, exercise_id: str) -> list[CompletedSet]:
        return [s for s in self.completed_sets if s.exercise_id == exercise_id]

    def find_completed(self, exercise_id: str, set_index: int) -> CompletedSet | None:
        for s in self.completed_sets:
            if s.exercise_id == exercise_id and s.set_index == set_index:
                return s
        return None

    def is_set_completed(self, exercise_index: int, set_index: int) -> bool:
        if not 0 <= exercise_index < len(self.exercises):
            return False
        return (
            self.find_completed(self.exercises[exercise_index].id, set_index)
            is not None
        )

    def upcoming_exercises(self) -> list[ExerciseInstance]:
        return self.exercises[self.current_exercise + 1 :]

    def next_exercise_display(self) -> str:
        ex = self.current
        if ex is None:
            return ""
        return f"{ex.name} set {self.current_set + 1} of {ex.sets}"

    # ------------------------------------------------------------------
    # Set input
    # ------------------------------------------------------------------

    def reset_current_input(self) -> dict:
        """Pre-fill the input for the current set.

        Values come from the last completed set of the current exercise,
        falling back to its suggested (or last) weight, target reps and the
        default RPE.
        """

        ex = self.current
        if ex is None:
            self.current_input = {"weight": 0, "reps": 0, "rpe": DEFAULT_RPE}
            return self.current_input
        done = self.completed_for(ex.id)
        if done:
            last = done[-1]
            self.current_input = {
                "weight": last.weight,
                "reps": last.reps,
                "rpe": last.rpe,
            }
        else:
            self.current_input = {
                "weight": ex.suggested_weight or ex.last_weight or 0,
                "reps": ex.target_reps,
                "rpe": DEFAULT_RPE,
            }
        return self.current_input

    def set_current_input(self, weight=None, reps=None, rpe=None) -> dict:
        """Update the pending set values, clamping them to valid ranges."""

        if weight is not None:
            self.current_input["weight"] = max(0, float(weight))
        if reps is not None:
            self.current_input["reps"] = max(0, int(reps))
        if rpe is not None:
            self.current_input["rpe"] = max(1, min(10, int(rpe)))
        return self.current_input

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Leave the overview and begin timing the first set."""

        if self.phase != PHASE_OVERVIEW or not self.exercises:
            return False
        now = time.time()
        self.start_time = now
        self.current_set_start_time = now
        self.phase = PHASE_WORKOUT
        if self.gateway is not None and self.user_id:
            try:
                self.session_id = self.gateway.start_workout(
                    self.user_id, self.program_id, self.plan_id, self.workout_name
                )
            except Exception:
                logging.exception("Failed to open workout session record")
                self.session_id = None
        self.reset_current_input()
        self.save_recovery_state()
        return True

    def open_overview(self) -> bool:
        if self.phase != PHASE_WORKOUT:
            return False
        self.phase = PHASE_WORKOUT_OVERVIEW
        self.save_recovery_state()
        return True

    def resume(self) -> bool:
        """Return from the overview to the active set or rest period."""

        if self.phase != PHASE_WORKOUT_OVERVIEW:
            return False
        self.phase = PHASE_WORKOUT
        if not self.is_resting and self.current_set_start_time is None:
            self.current_set_start_time = time.time()
        self.save_recovery_state()
        return True

    def complete_set(self) -> bool:
        """Record the current set and advance.

        Returns ``True`` when this was the final set and the session is now
        complete.
        """

        ex = self.current
        if self.phase != PHASE_WORKOUT or ex is None:
            return False
        now = time.time()
        if self.current_set_start_time is not None and not self.is_resting:
            self.total_working_time += int(
                round_half_up(now - self.current_set_start_time)
            )
        self._stop_rest()

        if self.find_completed(ex.id, self.current_set) is not None:
            # every remaining set is recorded; log this one as an extra set
            ex.sets += 1
            ex.last_reps = list(ex.last_reps) + [ex.target_reps]
            self.current_set = ex.sets - 1
        self.completed_sets.append(
            CompletedSet(
                exercise_id=ex.id,
                set_index=self.current_set,
                weight=self.current_input.get("weight", 0),
                reps=self.current_input.get("reps", 0),
                rpe=self.current_input.get("rpe") or DEFAULT_RPE,
            )
        )

        position = self._next_open_set()
        if position is None:
            self.current_set_start_time = None
            self.end_time = now
            self.phase = PHASE_COMPLETE
            self.save_recovery_state()
            return True

        self.current_exercise, self.current_set = position
        self._start_rest(ex.rest_time)
        self.reset_current_input()
        self.save_recovery_state()
        return False

    def skip_rest(self) -> bool:
        if not self.is_resting:
            return False
        self.total_rest_time = max(0, self.total_rest_time - self.rest_time_left)
        self._stop_rest()
        self.current_set_start_time = time.time()
        self.save_recovery_state()
        return True

    def skip_to(self, exercise_index: int, set_index: int = 0) -> bool:
        """Jump to a set that has not been completed yet."""

        if not self.is_active:
            return False
        if not 0 <= exercise_index < len(self.exercises):
            return False
        if not 0 <= set_index < self.exercises[exercise_index].sets:
            return False
        if self.is_set_completed(exercise_index, set_index):
            return False
        self._stop_rest()
        self.current_exercise = exercise_index
        self.current_set = set_index
        self.current_set_start_time = time.time()
        self.phase = PHASE_WORKOUT
        self.reset_current_input()
        self.save_recovery_state()
        return True

    def end_early(self) -> bool:
        """Finish the workout now, skipping any remaining sets."""

        if self.phase == PHASE_COMPLETE:
            return False
        now = time.time()
        if self.current_set_start_time is not None and not self.is_resting:
            self.total_working_time += int(
                round_half_up(now - self.current_set_start_time)
            )
        self._stop_rest()
        if self.start_time is None:
            self.start_time = now
        self.current_set_start_time = None
        self.end_time = now
        self.phase = PHASE_COMPLETE
        self.save_recovery_state()
        return True

    def teardown(self) -> None:
        """Release the rest timer when the session is discarded."""

        self.rest_timer.cancel()

    # ------------------------------------------------------------------
    # Rest countdown
    # ------------------------------------------------------------------

    def _start_rest(self, duration: int) -> None:
        self.rest_time_left = int(duration)
        self.total_rest_time += int(duration)
        self.is_resting = True
        self.current_set_start_time = None
        self.rest_timer.start()

    def _stop_rest(self) -> None:
        self.rest_timer.cancel()
        self.is_resting = False
        self.rest_time_left = 0

    def tick(self) -> bool:
        """Advance the rest countdown by one second.

        Returns ``False`` once the countdown is over so the timer stops.
        """

        if not self.is_resting:
            return False
        self.rest_time_left = max(0, self.rest_time_left - 1)
        if self.rest_time_left > 0:
            return True
        self.is_resting = False
        self.current_set_start_time = time.time()
        self.save_recovery_state()
        return False

    # ------------------------------------------------------------------
    # Exercise list editing
    # ------------------------------------------------------------------

    def _can_edit(self) -> bool:
        return self.phase != PHASE_COMPLETE

    def _reorder(self, previous_id: str | None) -> None:
        self.exercises = optimize_exercise_order(self.exercises, self.goal)
        self._settle_cursor(previous_id)

    def _settle_cursor(self, previous_id: str | None) -> None:
        """Put the cursor on an uncompleted set after a list edit.

        The set input is refilled when the cursor lands on a different
        exercise than ``previous_id``.
        """

        self._clamp_position()
        self._seek_open_set()
        ex = self.current
        if ex is not None and ex.id != previous_id:
            self.reset_current_input()

    def _positions(self) -> list[tuple[int, int]]:
        return [
            (ex_idx, set_idx)
            for ex_idx, ex in enumerate(self.exercises)
            for set_idx in range(ex.sets)
        ]

    def _next_open_set(self) -> tuple[int, int] | None:
        """Return the first uncompleted set after the cursor."""

        cursor = (self.current_exercise, self.current_set)
        for ex_idx, set_idx in self._positions():
            if (ex_idx, set_idx) > cursor and not self.is_set_completed(
                ex_idx, set_idx
            ):
                return ex_idx, set_idx
        return None

    def _seek_open_set(self) -> None:
        """Move the cursor off a completed set, wrapping to earlier exercises.

        The cursor stays put when no uncompleted set is left.
        """

        if not self.is_set_completed(self.current_exercise, self.current_set):
            return
        positions = self._positions()
        start = (self.current_exercise, 0)
        ordered = [p for p in positions if p >= start] + [
            p for p in positions if p < start
        ]
        for ex_idx, set_idx in ordered:
            if not self.is_set_completed(ex_idx, set_idx):
                self.current_exercise, self.current_set = ex_idx, set_idx
                return

    @property
    def _current_id(self) -> str | None:
        ex = self.current
        return ex.id if ex is not None else None

    def _clamp_position(self) -> None:
        if self.current_exercise >= len(self.exercises):
            self.current_exercise = max(0, len(self.exercises) - 1)
        if self.current_exercise < 0:
            self.current_exercise = 0
        ex = self.current
        if ex is not None and self.current_set >= ex.sets:
            self.current_set = max(0, ex.sets - 1)

    def add_exercise(self, name: str) -> ExerciseInstance | None:
        if not self._can_edit() or not name:
            return None
        previous_id = self._current_id
        exercise = ExerciseInstance.from_library(name)
        self.exercises.append(exercise)
        self._reorder(previous_id)
        self.save_recovery_state()
        logging.info("Added exercise %s", name)
        return exercise

    def remove_exercise(self, index: int) -> bool:
        """Remove the exercise at ``index``.  The last exercise cannot go."""

        if not self._can_edit() or len(self.exercises) <= 1:
            return False
        if not 0 <= index < len(self.exercises):
            return False
        previous_id = self._current_id
        del self.exercises[index]
        # removing the current exercise leaves its successor at the cursor
        if self.current_exercise > index:
            self.current_exercise -= 1
        elif self.current_exercise == index:
            self.current_set = 0
        self._reorder(previous_id)
        self.save_recovery_state()
        return True

    def swap_exercise(self, index: int, new_name: str) -> ExerciseInstance | None:
        """Replace the exercise at ``index`` keeping its prescription."""

        if not self._can_edit() or not new_name:
            return None
        if not 0 <= index < len(self.exercises):
            return None
        previous_id = self._current_id
        old = self.exercises[index]
        library = get_exercise(new_name) or {}
        replacement = ExerciseInstance.from_dict(
            {
                **old.to_dict(),
                "id": make_exercise_id(new_name),
                "name": new_name,
                "muscle_group": library.get("muscle_group", old.muscle_group),
                "equipment": library.get("equipment", old.equipment),
                "exercise_type": library.get("type", old.exercise_type),
            }
        )
        self.exercises[index] = replacement
        self._reorder(previous_id)
        self.save_recovery_state()
        logging.info("Swapped %s for %s", old.name, new_name)
        return replacement

    def move_exercise(self, index: int, direction: str) -> bool:
        """Swap the exercise at ``index`` with its neighbour ``up`` or ``down``."""

        if not self._can_edit():
            return False
        new_index = index - 1 if direction == "up" else index + 1
        if not 0 <= index < len(self.exercises):
            return False
        if not 0 <= new_index < len(self.exercises):
            return False
        self.exercises[index], self.exercises[new_index] = (
            self.exercises[new_index],
            self.exercises[index],
        )
        if self.current_exercise == index:
            self.current_exercise = new_index
        elif self.current_exercise == new_index:
            self.current_exercise = index
        self._clamp_position()
        self.save_recovery_state()
        return True

    def add_set(self, index: int) -> bool:
        if not self._can_edit() or not 0 <= index < len(self.exercises):
            return False
        ex = self.exercises[index]
        ex.sets += 1
        ex.last_reps = list(ex.last_reps) + [ex.target_reps]
        self.save_recovery_state()
        return True

    def remove_set(self, index: int) -> bool:
        if not self._can_edit() or not 0 <= index < len(self.exercises):
            return False
        ex = self.exercises[index]
        if ex.sets <= 1:
            return False
        previous_id = self._current_id
        if index == self.current_exercise and self.current_set >= ex.sets - 1:
            self.current_set = max(0, ex.sets - 2)
        ex.sets -= 1
        ex.last_reps = list(ex.last_reps)[:-1]
        self._settle_cursor(previous_id)
        self.save_recovery_state()
        return True

    def update_completed_set(
        self, exercise_id: str, set_index: int, weight=None, reps=None, rpe=None
    ) -> bool:
        """Edit a completed set in place."""

        record = self.find_completed(exercise_id, set_index)
        if record is None:
            return False
        if weight is not None:
            record.weight = max(0, float(weight))
        if reps is not None:
            record.reps = max(0, int(reps))
        if rpe is not None:
            record.rpe = max(1, min(10, int(rpe)))
        self.save_recovery_state()
        return True

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def session_summary(self) -> SessionSummary:
        return calculate_summary(
            self.completed_sets,
            self.exercises,
            self.start_time,
            self.end_time,
            self.total_working_time,
            self.total_rest_time,
        )

    def summary(self) -> str:
        """Return a formatted text summary of the session."""

        stats = self.session_summary()
        lines = [f"Workout: {self.workout_name}"]
        if self.start_time is not None:
            start = time.strftime(
                "%Y-%m-%d %H:%M:%S", time.localtime(self.start_time)
            )
            lines.append(f"Start: {start}")
        lines.append(f"Duration: {stats.duration_minutes} min")
        lines.append(f"Volume: {stats.total_volume:g} kg")
        for item in stats.breakdown:
            lines.append(f"\n{item['name']} ({item['sets']}/{item['target_sets']})")
            for idx, detail in enumerate(item["set_details"], 1):
                lines.append(
                    f"  Set {idx}: {detail['weight']:g} kg x {detail['reps']}"
                    f" @ RPE {detail['rpe']}"
                )
        for pr in stats.personal_records:
            lines.append(f"PR {pr['exercise']}: {pr['label']} ({pr['improvement_label']})")
        return "\n".join(lines)

    # --------------------------------------------------------------
    # Persistence helpers
    # --------------------------------------------------------------

    def to_dict(self) -> dict:
        """Return a JSON-serialisable representation of the session."""

        return {
            "goal": self.goal,
            "user_id": self.user_id,
            "workout_name": self.workout_name,
            "program_id": self.program_id,
            "plan_id": self.plan_id,
            "exercises": [ex.to_dict() for ex in self.exercises],
            "completed_sets": [s.to_dict() for s in self.completed_sets],
            "phase": self.phase,
            "current_exercise": self.current_exercise,
            "current_set": self.current_set,
            "is_resting": self.is_resting,
            "rest_time_left": self.rest_time_left,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "current_set_start_time": self.current_set_start_time,
            "total_working_time": self.total_working_time,
            "total_rest_time": self.total_rest_time,
            "session_id": self.session_id,
            "saved": self.saved,
            "current_input": dict(self.current_input),
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        gateway=None,
        clock=None,
        recovery_base: Path | None = None,
    ) -> "WorkoutSession":
        """Reconstruct a :class:`WorkoutSession` from ``data``.

        A session that was resting restarts its countdown from the stored
        remaining seconds.
        """

        obj = cls(
            [ExerciseInstance.from_dict(ex) for ex in data.get("exercises", [])],
            goal=data.get("goal", DEFAULT_GOAL),
            user_id=data.get("user_id"),
            workout_name=data.get("workout_name", "Workout"),
            program_id=data.get("program_id"),
            plan_id=data.get("plan_id"),
            gateway=gateway,
            clock=clock,
            recovery_base=recovery_base,
        )
        obj.completed_sets = [
            CompletedSet.from_dict(s) for s in data.get("completed_sets", [])
        ]
        phase = data.get("phase", PHASE_OVERVIEW)
        obj.phase = phase if phase in PHASES else PHASE_OVERVIEW
        obj.current_exercise = data.get("current_exercise", 0)
        obj.current_set = data.get("current_set", 0)
        obj.start_time = data.get("start_time")
        obj.end_time = data.get("end_time")
        obj.current_set_start_time = data.get("current_set_start_time")
        obj.total_working_time = data.get("total_working_time", 0)
        obj.total_rest_time = data.get("total_rest_time", 0)
        obj.session_id = data.get("session_id")
        obj.saved = data.get("saved", False)
        obj._clamp_position()
        obj.reset_current_input()
        obj.current_input.update(data.get("current_input") or {})
        if data.get("is_resting") and data.get("rest_time_left", 0) > 0:
            obj.is_resting = True
            obj.rest_time_left = data["rest_time_left"]
            obj.rest_timer.start()
        return obj

    def save_recovery_state(self) -> None:
        """Persist the current session state to both recovery files."""

        payload = json.dumps(self.to_dict())
        try:
            for path in recovery_paths(self.recovery_base):
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(payload)
        except OSError:
            logging.exception("Failed to write session recovery files")

    def clear_recovery_files(self) -> None:
        for path in recovery_paths(self.recovery_base):
            try:
                path.unlink()
            except FileNotFoundError:
                pass

    @staticmethod
    def load_recovery_state(base: Path | None = None) -> dict | None:
        """Return the stored session state, trying the backup file second."""

        for path in recovery_paths(base or RECOVERY_BASE):
            if not path.exists():
                continue
            try:
                text = path.read_text().strip()
                if text:
                    return json.loads(text)
            except (OSError, ValueError):
                logging.exception("Unreadable recovery file %s", path)
        return None

    @classmethod
    def load_from_recovery(
        cls, base: Path | None = None, gateway=None, clock=None
    ) -> "WorkoutSession | None":
        """Return a recovered session if an unfinished one was stored."""

        data = cls.load_recovery_state(base)
        if not data or data.get("saved"):
            return None
        session = cls.from_dict(data, gateway=gateway, clock=clock, recovery_base=base)
        logging.info("Recovered workout session %s", session.workout_name)
        return session
