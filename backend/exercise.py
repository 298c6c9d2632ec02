from __future__ import annotations

"""Exercise and set records used by an active workout session."""

from dataclasses import asdict, dataclass, field
import re
import uuid

from backend import DEFAULT_REST_DURATION, DEFAULT_RPE, DEFAULT_SETS_PER_EXERCISE
from backend.catalog import get_exercise


def make_exercise_id(name: str) -> str:
    """Return a unique id for a newly added or swapped exercise."""

    return re.sub(r"\s", "_", name.lower()) + "_" + uuid.uuid4().hex[:8]


@dataclass
class ExerciseInstance:
    """One exercise in the session's mutable exercise list.

    ``last_weight`` and ``last_reps`` describe the previous session of the
    same exercise.  ``last_reps`` holds one entry per prescribed set and is
    kept the same length as ``sets`` when sets are added or removed.
    ``history`` contains estimated one-rep max values of earlier sessions.
    """

    id: str
    name: str
    muscle_group: str = "Other"
    sets: int = DEFAULT_SETS_PER_EXERCISE
    target_reps: int = 10
    suggested_weight: float = 0
    rest_time: int = DEFAULT_REST_DURATION
    last_weight: float = 0
    last_reps: list[int] = field(default_factory=list)
    history: list[float] = field(default_factory=list)
    equipment: str = ""
    exercise_type: str = ""
    alternatives: list[str] = field(default_factory=list)

    def __post_init__(self):
        if self.sets < 1:
            self.sets = 1

    @property
    def is_compound(self) -> bool:
        return self.exercise_type == "compound"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseInstance":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    @classmethod
    def from_template(cls, entry: dict) -> "ExerciseInstance":
        """Build an instance from a catalog template entry.

        Missing fields are filled from the exercise library where possible.
        """

        library = get_exercise(entry["name"]) or {}
        sets = entry.get("sets") or DEFAULT_SETS_PER_EXERCISE
        target_reps = entry.get("target_reps", 10)
        return cls(
            id=entry.get("id") or make_exercise_id(entry["name"]),
            name=entry["name"],
            muscle_group=entry.get("muscle_group")
            or library.get("muscle_group", "Other"),
            sets=sets,
            target_reps=target_reps,
            suggested_weight=entry.get("suggested_weight", 0),
            rest_time=entry.get("rest_time") or DEFAULT_REST_DURATION,
            last_weight=entry.get("last_weight", 0),
            last_reps=list(entry.get("last_reps") or [target_reps] * sets),
            history=list(entry.get("history") or []),
            equipment=entry.get("equipment") or library.get("equipment", ""),
            exercise_type=entry.get("exercise_type") or library.get("type", ""),
        )

    @classmethod
    def from_library(cls, name: str) -> "ExerciseInstance":
        """Build an instance for an exercise added during a workout."""

        library = get_exercise(name) or {}
        compound = library.get("type") == "compound"
        return cls(
            id=make_exercise_id(name),
            name=name,
            muscle_group=library.get("muscle_group", "Other"),
            sets=3,
            target_reps=8 if compound else 12,
            suggested_weight=20,
            rest_time=180 if compound else 90,
            last_weight=0,
            last_reps=[0, 0, 0],
            equipment=library.get("equipment", ""),
            exercise_type=library.get("type", ""),
        )


@dataclass
class CompletedSet:
    """A performed set.  Unique per ``(exercise_id, set_index)``."""

    exercise_id: str
    set_index: int
    weight: float = 0
    reps: int = 0
    rpe: int = DEFAULT_RPE

    @property
    def volume(self) -> float:
        return self.weight * self.reps

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CompletedSet":
        return cls(
            exercise_id=data["exercise_id"],
            set_index=data["set_index"],
            weight=data.get("weight", 0),
            reps=data.get("reps", 0),
            rpe=data.get("rpe") or DEFAULT_RPE,
        )
