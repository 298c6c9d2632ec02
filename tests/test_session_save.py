import logging

import pytest

from backend.sessions import finalize_session, validate_workout_session
from backend.workout_session import recovery_paths


class FlakyGateway:
    """Gateway double whose ``log_set`` fails for one exercise."""

    def __init__(self, failing_exercise=None, fail_complete=False):
        self.failing_exercise = failing_exercise
        self.fail_complete = fail_complete
        self.logged = []
        self.records = []
        self.completed = None

    def start_workout(self, *args):
        return 7

    def log_set(self, session_id, name, set_number, weight, reps, rpe=None):
        if name == self.failing_exercise:
            raise ConnectionError("timeout")
        self.logged.append((session_id, name, set_number, weight, reps, rpe))

    def check_and_create_pr(self, user_id, name, weight, reps, session_id=None):
        self.records.append(name)
        return name == "Bench Press"

    def complete_workout(self, *args):
        if self.fail_complete:
            raise ConnectionError("timeout")
        self.completed = args


def _run_workout(session, sets):
    session.start()
    for _ in range(sets):
        session.skip_rest()
        session.complete_set()
    session.end_early()


def test_validation_rejects_unfinished_session(make_session):
    session = make_session()
    session.start()
    errors = validate_workout_session(session)
    assert "Session has not been completed" in errors
    with pytest.raises(ValueError):
        finalize_session(session)


def test_finalize_flushes_sets_and_totals(make_session, gateway):
    session = make_session(user_id="u1", gateway=gateway)
    _run_workout(session, 4)

    result = finalize_session(session)

    assert result.logged_sets == 4
    assert result.failed_sets == 0
    assert result.completed
    assert result.new_records == ["Bench Press", "Barbell Row"]
    assert session.saved
    history = gateway.get_workout_history("u1")
    assert len(history) == 1
    assert history[0]["total_volume"] == pytest.approx(3 * 80 * 6 + 60 * 8)
    assert gateway.get_exercise_history("u1")["Bench Press"]["last_reps"] == [6, 6, 6]
    assert not any(path.exists() for path in recovery_paths(session.recovery_base))


def test_saved_session_cannot_be_finalized_twice(make_session, gateway):
    session = make_session(user_id="u1", gateway=gateway)
    _run_workout(session, 1)
    finalize_session(session)
    assert "Session has already been saved" in validate_workout_session(session)


def test_failed_set_is_logged_and_skipped(make_session, caplog):
    flaky = FlakyGateway(failing_exercise="Barbell Row")
    session = make_session(user_id="u1", gateway=flaky)
    _run_workout(session, 5)

    with caplog.at_level(logging.ERROR):
        result = finalize_session(session)

    assert result.logged_sets == 3
    assert result.failed_sets == 2
    assert result.completed
    assert [entry[2] for entry in flaky.logged] == [1, 2, 3]
    assert flaky.records == ["Bench Press"] * 3
    assert "Failed to log set 1 of Barbell Row" in caplog.text
    assert flaky.completed[0] == 7
    assert session.saved


def test_failed_completion_still_marks_saved(make_session, caplog):
    flaky = FlakyGateway(fail_complete=True)
    session = make_session(user_id="u1", gateway=flaky)
    _run_workout(session, 1)

    with caplog.at_level(logging.ERROR):
        result = finalize_session(session)

    assert not result.completed
    assert "Failed to complete workout session 7" in caplog.text
    assert session.saved


def test_finalize_without_gateway_clears_recovery(make_session):
    session = make_session()
    _run_workout(session, 2)
    assert recovery_paths(session.recovery_base)[0].exists()

    result = finalize_session(session)

    assert result.logged_sets == 0
    assert session.saved
    assert not any(path.exists() for path in recovery_paths(session.recovery_base))
