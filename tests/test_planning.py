from backend.catalog import DEFAULT_EXERCISES, get_template
from backend.exercise import ExerciseInstance
from backend.planning import (
    apply_exercise_history,
    build_exercise_list,
    compound_bonus,
    muscle_group_priority,
    optimize_exercise_order,
    optimize_exercises_for_time,
    workout_time_breakdown,
)


def test_muscle_group_priority():
    assert muscle_group_priority("Chest", "build_muscle") == 1
    assert muscle_group_priority("Quads", "strength") == 1
    assert muscle_group_priority("Chest", "fitness") == 1
    assert muscle_group_priority("Forearms", "build_muscle") == 10


def test_compound_bonus_uses_keywords():
    assert compound_bonus("Romanian Deadlift") == 0
    assert compound_bonus("incline bench press") == 0
    assert compound_bonus("Lateral Raises") == 100


def test_optimize_order_for_goal(sample_exercises):
    curl, row, bench = reversed(sample_exercises)
    ordered = optimize_exercise_order([curl, row, bench], "build_muscle")
    assert [ex.name for ex in ordered] == ["Bench Press", "Barbell Row", "Barbell Curl"]


def test_optimize_order_is_stable():
    first = ExerciseInstance(id="a", name="Cable Fly", muscle_group="Chest")
    second = ExerciseInstance(id="b", name="Dumbbell Fly", muscle_group="Chest")
    ordered = optimize_exercise_order([first, second], "build_muscle")
    assert [ex.id for ex in ordered] == ["a", "b"]


def test_time_breakdown(sample_exercises):
    breakdown = workout_time_breakdown(sample_exercises)
    assert breakdown["working_time"] == 315
    assert breakdown["rest_time"] == 390
    assert breakdown["transition_time"] == 60
    assert breakdown["total_time"] == 315 + 390 + 60 + 300


def test_time_breakdown_empty():
    assert workout_time_breakdown([])["total_time"] == 0


def test_fit_to_time_spreads_rest(sample_exercises):
    optimized = optimize_exercises_for_time(sample_exercises, 20)
    assert [ex.sets for ex in optimized] == [3, 2, 2]
    assert {ex.rest_time for ex in optimized} == {131}
    # the input list is left untouched
    assert sample_exercises[0].rest_time == 120


def test_fit_to_time_removes_sets_when_short(sample_exercises):
    optimized = optimize_exercises_for_time(sample_exercises, 10)
    assert [ex.sets for ex in optimized] == [2, 2, 2]
    assert {ex.rest_time for ex in optimized} == {30}


def test_fit_to_time_adds_sets_when_long(sample_exercises):
    optimized = optimize_exercises_for_time(sample_exercises, 60)
    assert [ex.sets for ex in optimized] == [5, 5, 5]
    assert {ex.rest_time for ex in optimized} == {180}


def test_apply_history(bench_press):
    apply_exercise_history(
        [bench_press],
        {"Bench Press": {"last_weight": 85, "last_reps": [5, 5, 4], "e1rm_history": [99.0]}},
    )
    assert bench_press.last_weight == 85
    assert bench_press.last_reps == [5, 5, 4]
    assert bench_press.history == [99.0]


def test_apply_history_with_single_rep_count(bench_press):
    apply_exercise_history([bench_press], {"Bench Press": {"last_weight": 70, "last_reps": 8}})
    assert bench_press.last_reps == [8, 8, 8]


def test_build_from_template():
    exercises = build_exercise_list(get_template("push_a"), available_time=60)
    assert [ex.name for ex in exercises] == [
        "Barbell Bench Press",
        "Incline Dumbbell Press",
        "Overhead Press",
        "Lateral Raises",
        "Rope Pushdowns",
    ]
    assert all(30 <= ex.rest_time <= 180 for ex in exercises)
    assert exercises[0].equipment == "Barbell"
    assert "Bench Press" in exercises[0].alternatives


def test_build_defaults_without_template():
    exercises = build_exercise_list(None, available_time=45)
    assert [ex.name for ex in exercises] == [e["name"] for e in DEFAULT_EXERCISES[:3]]
