from pathlib import Path
import os
import sys
import time

# Run Kivy headless: the "mock" window provider does not exist in Kivy.
os.environ.setdefault("KIVY_WINDOW", "sdl2")
os.environ.setdefault("SDL_VIDEODRIVER", "offscreen")

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from backend import settings as app_settings
from backend import workout_session as workout_session_module
from backend.exercise import ExerciseInstance
from backend.gateway import PersistenceGateway


class FakeEvent:
    def __init__(self, clock, callback, interval):
        self.clock = clock
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True
        if self in self.clock.events:
            self.clock.events.remove(self)


class FakeClock:
    """Stand-in for ``kivy.clock.Clock`` driven manually by tests."""

    def __init__(self):
        self.events: list[FakeEvent] = []

    def schedule_interval(self, callback, interval):
        event = FakeEvent(self, callback, interval)
        self.events.append(event)
        return event

    def tick(self, times: int = 1):
        """Fire every live event ``times`` times."""
        for _ in range(times):
            for event in list(self.events):
                if event.cancelled:
                    continue
                if event.callback(event.interval) is False:
                    event.cancel()


class FakeTime:
    """Controllable replacement for :func:`time.time`."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolate_files(tmp_path, monkeypatch):
    """Keep recovery and settings files inside the test's temp directory."""
    monkeypatch.setattr(
        workout_session_module, "RECOVERY_BASE", tmp_path / "session_recovery"
    )
    monkeypatch.setattr(app_settings, "SETTINGS_PATH", tmp_path / "settings.json")
    app_settings.clear_cache()
    yield
    app_settings.clear_cache()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_time(monkeypatch) -> FakeTime:
    clock = FakeTime()
    monkeypatch.setattr(time, "time", clock)
    return clock


@pytest.fixture
def gateway(tmp_path: Path) -> PersistenceGateway:
    """Gateway backed by a fresh SQLite database."""
    return PersistenceGateway(tmp_path / "fittrack.db")


@pytest.fixture
def bench_press() -> ExerciseInstance:
    return ExerciseInstance(
        id="bench",
        name="Bench Press",
        muscle_group="Chest",
        sets=3,
        target_reps=6,
        suggested_weight=80,
        rest_time=120,
        last_weight=75,
        last_reps=[6, 6, 5],
        exercise_type="compound",
    )


@pytest.fixture
def sample_exercises(bench_press) -> list[ExerciseInstance]:
    """Bench press followed by two lighter exercises, already in goal order."""
    return [
        bench_press,
        ExerciseInstance(
            id="row",
            name="Barbell Row",
            muscle_group="Back",
            sets=2,
            target_reps=8,
            suggested_weight=60,
            rest_time=90,
            last_reps=[8, 8],
            exercise_type="compound",
        ),
        ExerciseInstance(
            id="curl",
            name="Barbell Curl",
            muscle_group="Biceps",
            sets=2,
            target_reps=12,
            suggested_weight=25,
            rest_time=60,
            last_reps=[12, 12],
            exercise_type="isolation",
        ),
    ]


@pytest.fixture
def make_session(sample_exercises, fake_clock, tmp_path):
    """Factory building a :class:`WorkoutSession` with test doubles."""

    def factory(exercises=None, **kwargs):
        kwargs.setdefault("clock", fake_clock)
        kwargs.setdefault("recovery_base", tmp_path / "session_recovery")
        kwargs.setdefault("goal", "build_muscle")
        return workout_session_module.WorkoutSession(
            exercises if exercises is not None else sample_exercises, **kwargs
        )

    return factory
