import logging

import core
from backend import settings
from backend.workout_session import PHASE_OVERVIEW


class BrokenGateway:
    def get_exercise_history(self, user_id):
        raise ConnectionError("offline")

    def log_weight(self, user_id, weight_kg):
        raise ConnectionError("offline")


def test_create_session_from_template(gateway, fake_clock):
    session = core.create_workout_session(
        "pull_a", gateway=gateway, available_time=45, clock=fake_clock
    )
    assert session.phase == PHASE_OVERVIEW
    assert session.workout_name == "Pull Day A"
    assert session.user_id == "local"
    assert session.goal == "build_muscle"
    assert session.program_id == "upper_lower"
    assert session.plan_id == "pull_a"
    assert [ex.name for ex in session.exercises] == [
        "Barbell Row",
        "Pull Ups",
        "Lat Pulldown",
    ]


def test_create_session_orders_for_goal(fake_clock):
    settings.set_value("goal", "strength")
    session = core.create_workout_session("upper_a", available_time=60, clock=fake_clock)
    assert session.program_id == "strength"
    assert session.exercises[0].muscle_group == "Back"
    assert session.exercises[0].name == "Barbell Row"


def test_create_session_without_template(fake_clock):
    session = core.create_workout_session(clock=fake_clock)
    assert session.workout_name == "Workout"
    assert session.plan_id is None
    assert session.exercises[0].name == "Bench Press"


def test_create_session_uses_history(gateway, fake_clock):
    session_id = gateway.start_workout("local")
    gateway.log_set(session_id, "Pull Ups", 1, 10, 9)
    gateway.complete_workout(session_id, 30, 90, 300, 600)

    session = core.create_workout_session("pull_a", gateway=gateway, clock=fake_clock)

    pullups = next(ex for ex in session.exercises if ex.name == "Pull Ups")
    assert pullups.last_weight == 10
    assert pullups.last_reps == [9]


def test_history_failure_is_logged(fake_clock, caplog):
    with caplog.at_level(logging.ERROR):
        session = core.create_workout_session(
            "pull_a", gateway=BrokenGateway(), clock=fake_clock
        )
    assert session.exercises
    assert "Failed to load exercise history" in caplog.text


def test_log_weigh_in_updates_settings(gateway):
    assert core.log_weigh_in(gateway, "local", 80.04)
    assert settings.get_value("current_weight") == 80.0
    assert gateway.get_weight_logs("local")[0]["weight"] == 80.04


def test_log_weigh_in_failure(caplog):
    with caplog.at_level(logging.ERROR):
        assert not core.log_weigh_in(BrokenGateway(), "local", 80)
    assert settings.get_value("current_weight") is None
    assert "Failed to log weigh-in" in caplog.text
