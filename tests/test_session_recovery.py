import json

from backend.workout_session import (
    PHASE_OVERVIEW,
    PHASE_WORKOUT,
    WorkoutSession,
    recovery_paths,
)


def test_state_roundtrip(make_session, fake_clock):
    session = make_session(user_id="u1", workout_name="Push Day")
    session.start()
    session.set_current_input(weight=82.5)
    session.complete_set()
    state = session.to_dict()

    recovered = WorkoutSession.from_dict(state, clock=fake_clock)

    assert recovered.to_dict() == state


def test_recovery_files_written_on_every_step(make_session):
    session = make_session()
    session.start()
    session.complete_set()
    first, second = recovery_paths(session.recovery_base)
    assert first.name == "session_recovery_1.json"
    assert second.name == "session_recovery_2.json"

    data1 = json.loads(first.read_text())
    data2 = json.loads(second.read_text())
    assert data1 == data2 == session.to_dict()


def test_backup_file_used_when_primary_missing(make_session):
    session = make_session()
    session.start()
    first, _second = recovery_paths(session.recovery_base)
    first.unlink()

    assert WorkoutSession.load_recovery_state(session.recovery_base) == session.to_dict()


def test_corrupt_primary_falls_back_to_backup(make_session):
    session = make_session()
    session.start()
    first, _second = recovery_paths(session.recovery_base)
    first.write_text("{not json")

    assert WorkoutSession.load_recovery_state(session.recovery_base) == session.to_dict()


def test_default_recovery_location(make_session, tmp_path):
    session = make_session(recovery_base=None)
    session.start()
    assert WorkoutSession.load_recovery_state()["phase"] == PHASE_WORKOUT
    assert (tmp_path / "session_recovery_1.json").exists()


def test_recovered_rest_restarts_countdown(make_session, fake_clock):
    session = make_session()
    session.start()
    session.complete_set()
    fake_clock.tick(30)
    session.save_recovery_state()
    session.teardown()

    recovered = WorkoutSession.load_from_recovery(session.recovery_base, clock=fake_clock)

    assert recovered.phase == PHASE_WORKOUT
    assert recovered.is_resting
    assert recovered.rest_time_left == 90
    assert recovered.rest_timer.running
    assert recovered.current_set == 1
    assert len(recovered.completed_sets) == 1
    fake_clock.tick(90)
    assert not recovered.is_resting


def test_saved_session_not_recovered(make_session):
    session = make_session()
    session.start()
    session.saved = True
    session.save_recovery_state()
    assert WorkoutSession.load_from_recovery(session.recovery_base) is None


def test_nothing_to_recover(tmp_path):
    assert WorkoutSession.load_from_recovery(tmp_path / "missing") is None


def test_unknown_phase_falls_back_to_overview(make_session, fake_clock):
    state = make_session().to_dict()
    state["phase"] = "paused"
    state["current_exercise"] = 10
    recovered = WorkoutSession.from_dict(state, clock=fake_clock)
    assert recovered.phase == PHASE_OVERVIEW
    assert recovered.current_exercise == 2


def test_clear_recovery_files(make_session):
    session = make_session()
    session.start()
    session.clear_recovery_files()
    session.clear_recovery_files()
    assert WorkoutSession.load_recovery_state(session.recovery_base) is None
