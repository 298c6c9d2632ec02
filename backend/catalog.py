"""Static exercise and workout reference data.

Everything in this module is plain data.  Templates list the exercises of a
workout in their prescribed order; :mod:`backend.planning` turns a template
into the mutable exercise list used by an active session.
"""

from __future__ import annotations

# Exercise library.  ``type`` is either ``compound`` or ``isolation``.
EXERCISES: list[dict] = [
    {"name": "Bench Press", "muscle_group": "Chest", "type": "compound", "equipment": "Barbell"},
    {"name": "Barbell Bench Press", "muscle_group": "Chest", "type": "compound", "equipment": "Barbell"},
    {"name": "Incline Dumbbell Press", "muscle_group": "Chest", "type": "compound", "equipment": "Dumbbells"},
    {"name": "Incline Barbell Press", "muscle_group": "Chest", "type": "compound", "equipment": "Barbell"},
    {"name": "Close Grip Bench Press", "muscle_group": "Triceps", "type": "compound", "equipment": "Barbell"},
    {"name": "Dumbbell Fly", "muscle_group": "Chest", "type": "isolation", "equipment": "Dumbbells"},
    {"name": "Cable Fly", "muscle_group": "Chest", "type": "isolation", "equipment": "Cable"},
    {"name": "Push Ups", "muscle_group": "Chest", "type": "compound", "equipment": "Bodyweight"},
    {"name": "Dips", "muscle_group": "Chest", "type": "compound", "equipment": "Bodyweight"},
    {"name": "Pull Ups", "muscle_group": "Back", "type": "compound", "equipment": "Bodyweight"},
    {"name": "Barbell Row", "muscle_group": "Back", "type": "compound", "equipment": "Barbell"},
    {"name": "Deadlift", "muscle_group": "Back", "type": "compound", "equipment": "Barbell"},
    {"name": "Lat Pulldown", "muscle_group": "Back", "type": "compound", "equipment": "Cable"},
    {"name": "Dumbbell Row", "muscle_group": "Back", "type": "compound", "equipment": "Dumbbells"},
    {"name": "Seated Cable Row", "muscle_group": "Back", "type": "compound", "equipment": "Cable"},
    {"name": "Straight Arm Pulldown", "muscle_group": "Back", "type": "isolation", "equipment": "Cable"},
    {"name": "Overhead Press", "muscle_group": "Shoulders", "type": "compound", "equipment": "Barbell"},
    {"name": "Seated Dumbbell Press", "muscle_group": "Shoulders", "type": "compound", "equipment": "Dumbbells"},
    {"name": "Lateral Raises", "muscle_group": "Shoulders", "type": "isolation", "equipment": "Dumbbells"},
    {"name": "Rear Delt Fly", "muscle_group": "Shoulders", "type": "isolation", "equipment": "Dumbbells"},
    {"name": "Face Pulls", "muscle_group": "Shoulders", "type": "isolation", "equipment": "Cable"},
    {"name": "Barbell Shrugs", "muscle_group": "Shoulders", "type": "isolation", "equipment": "Barbell"},
    {"name": "Barbell Curl", "muscle_group": "Biceps", "type": "isolation", "equipment": "Barbell"},
    {"name": "EZ Bar Curl", "muscle_group": "Biceps", "type": "isolation", "equipment": "EZ Bar"},
    {"name": "Hammer Curls", "muscle_group": "Biceps", "type": "isolation", "equipment": "Dumbbells"},
    {"name": "Incline Dumbbell Curl", "muscle_group": "Biceps", "type": "isolation", "equipment": "Dumbbells"},
    {"name": "Preacher Curl", "muscle_group": "Biceps", "type": "isolation", "equipment": "EZ Bar"},
    {"name": "Skull Crushers", "muscle_group": "Triceps", "type": "isolation", "equipment": "EZ Bar"},
    {"name": "Rope Pushdowns", "muscle_group": "Triceps", "type": "isolation", "equipment": "Cable"},
    {"name": "Tricep Pushdown", "muscle_group": "Triceps", "type": "isolation", "equipment": "Cable"},
    {"name": "Overhead Tricep Extension", "muscle_group": "Triceps", "type": "isolation", "equipment": "Cable"},
    {"name": "Squat", "muscle_group": "Quads", "type": "compound", "equipment": "Barbell"},
    {"name": "Barbell Back Squat", "muscle_group": "Quads", "type": "compound", "equipment": "Barbell"},
    {"name": "Leg Press", "muscle_group": "Quads", "type": "compound", "equipment": "Machine"},
    {"name": "Bulgarian Split Squat", "muscle_group": "Quads", "type": "compound", "equipment": "Dumbbells"},
    {"name": "Walking Lunge", "muscle_group": "Quads", "type": "compound", "equipment": "Dumbbells"},
    {"name": "Leg Extension", "muscle_group": "Quads", "type": "isolation", "equipment": "Machine"},
    {"name": "Romanian Deadlift", "muscle_group": "Hamstrings/Glutes", "type": "compound", "equipment": "Barbell"},
    {"name": "Hip Thrust", "muscle_group": "Hamstrings/Glutes", "type": "compound", "equipment": "Barbell"},
    {"name": "Lying Leg Curl", "muscle_group": "Hamstrings/Glutes", "type": "isolation", "equipment": "Machine"},
    {"name": "Seated Leg Curl", "muscle_group": "Hamstrings/Glutes", "type": "isolation", "equipment": "Machine"},
    {"name": "Standing Calf Raises", "muscle_group": "Calves", "type": "isolation", "equipment": "Machine"},
    {"name": "Seated Calf Raises", "muscle_group": "Calves", "type": "isolation", "equipment": "Machine"},
    {"name": "Hanging Leg Raises", "muscle_group": "Core", "type": "isolation", "equipment": "Bodyweight"},
    {"name": "Cable Crunch", "muscle_group": "Core", "type": "isolation", "equipment": "Cable"},
    {"name": "Plank", "muscle_group": "Core", "type": "isolation", "equipment": "Bodyweight"},
]

_EXERCISES_BY_NAME = {ex["name"]: ex for ex in EXERCISES}

# Names containing any of these keywords sort ahead of isolation work.
COMPOUND_KEYWORDS = [
    "Bench Press",
    "Squat",
    "Deadlift",
    "Overhead Press",
    "Barbell Row",
    "Pull-up",
    "Dip",
    "Lunge",
    "Romanian Deadlift",
]

# Muscle group priority per goal, lower numbers first.  Groups missing from a
# table fall back to ``UNMAPPED_PRIORITY``.
GOAL_MUSCLE_PRIORITIES: dict[str, dict[str, int]] = {
    "build_muscle": {
        "Chest": 1,
        "Back": 2,
        "Quads": 3,
        "Hamstrings/Glutes": 4,
        "Shoulders": 5,
        "Triceps": 6,
        "Biceps": 7,
        "Calves": 8,
        "Core": 9,
    },
    "strength": {
        "Quads": 1,
        "Back": 2,
        "Chest": 3,
        "Hamstrings/Glutes": 4,
        "Shoulders": 5,
        "Core": 6,
        "Triceps": 7,
        "Biceps": 8,
        "Calves": 9,
    },
    "lose_fat": {
        "Quads": 1,
        "Back": 2,
        "Chest": 3,
        "Hamstrings/Glutes": 4,
        "Shoulders": 5,
        "Core": 6,
        "Triceps": 7,
        "Biceps": 8,
        "Calves": 9,
    },
    "default": {
        "Chest": 1,
        "Back": 2,
        "Quads": 3,
        "Shoulders": 4,
        "Hamstrings/Glutes": 5,
        "Core": 6,
        "Triceps": 7,
        "Biceps": 8,
        "Calves": 9,
    },
}
UNMAPPED_PRIORITY = 10
ISOLATION_PENALTY = 100

RPE_SCALE = [
    {"value": 1, "label": "Very Light", "description": "Almost no effort, like a warm-up"},
    {"value": 2, "label": "Light", "description": "Easy effort, can talk easily"},
    {"value": 3, "label": "Light-Moderate", "description": "Slightly challenging"},
    {"value": 4, "label": "Moderate", "description": "Starting to feel it"},
    {"value": 5, "label": "Moderate", "description": "Challenging but sustainable"},
    {"value": 6, "label": "Moderate-Hard", "description": "Getting tough, 4+ reps left"},
    {"value": 7, "label": "Hard", "description": "Difficult, 3 reps in reserve"},
    {"value": 8, "label": "Very Hard", "description": "Very challenging, 2 reps left"},
    {"value": 9, "label": "Near Max", "description": "Almost failure, 1 rep left"},
    {"value": 10, "label": "Maximum", "description": "Absolute failure, no more reps"},
]

# Used when a workout is started without a template.
DEFAULT_EXERCISES: list[dict] = [
    {"id": "bench-press", "name": "Bench Press", "sets": 4, "target_reps": 10, "suggested_weight": 60, "rest_time": 120, "muscle_group": "Chest"},
    {"id": "incline-db-press", "name": "Incline Dumbbell Press", "sets": 3, "target_reps": 12, "suggested_weight": 20, "rest_time": 90, "muscle_group": "Chest"},
    {"id": "cable-fly", "name": "Cable Fly", "sets": 3, "target_reps": 15, "suggested_weight": 15, "rest_time": 60, "muscle_group": "Chest"},
    {"id": "tricep-pushdown", "name": "Tricep Pushdown", "sets": 3, "target_reps": 12, "suggested_weight": 25, "rest_time": 60, "muscle_group": "Triceps"},
]

WORKOUT_TEMPLATES: dict[str, dict] = {
    "push_a": {
        "id": "push_a",
        "name": "Push Day A",
        "focus": "Chest, Shoulders & Triceps",
        "exercises": [
            {"id": "bench", "name": "Barbell Bench Press", "sets": 4, "target_reps": 6, "rest_time": 180, "muscle_group": "Chest"},
            {"id": "incline_db", "name": "Incline Dumbbell Press", "sets": 3, "target_reps": 10, "rest_time": 120, "muscle_group": "Chest"},
            {"id": "ohp", "name": "Overhead Press", "sets": 3, "target_reps": 8, "rest_time": 150, "muscle_group": "Shoulders"},
            {"id": "lateral", "name": "Lateral Raises", "sets": 3, "target_reps": 15, "rest_time": 60, "muscle_group": "Shoulders"},
            {"id": "pushdown", "name": "Rope Pushdowns", "sets": 3, "target_reps": 12, "rest_time": 60, "muscle_group": "Triceps"},
            {"id": "hanging_leg_raise", "name": "Hanging Leg Raises", "sets": 3, "target_reps": 12, "rest_time": 60, "muscle_group": "Core"},
        ],
    },
    "pull_a": {
        "id": "pull_a",
        "name": "Pull Day A",
        "focus": "Back Width & Biceps",
        "exercises": [
            {"id": "pullup", "name": "Pull Ups", "sets": 4, "target_reps": 8, "rest_time": 150, "muscle_group": "Back"},
            {"id": "row", "name": "Barbell Row", "sets": 4, "target_reps": 8, "rest_time": 150, "muscle_group": "Back"},
            {"id": "lat_pull", "name": "Lat Pulldown", "sets": 3, "target_reps": 10, "rest_time": 90, "muscle_group": "Back"},
            {"id": "face_pull", "name": "Face Pulls", "sets": 3, "target_reps": 15, "rest_time": 60, "muscle_group": "Shoulders"},
            {"id": "curl", "name": "Barbell Curl", "sets": 3, "target_reps": 10, "rest_time": 60, "muscle_group": "Biceps"},
            {"id": "hammer", "name": "Hammer Curls", "sets": 3, "target_reps": 12, "rest_time": 60, "muscle_group": "Biceps"},
        ],
    },
    "legs_a": {
        "id": "legs_a",
        "name": "Leg Day A",
        "focus": "Quad Dominant",
        "exercises": [
            {"id": "squat", "name": "Barbell Back Squat", "sets": 4, "target_reps": 6, "rest_time": 240, "muscle_group": "Quads"},
            {"id": "leg_press", "name": "Leg Press", "sets": 3, "target_reps": 10, "rest_time": 150, "muscle_group": "Quads"},
            {"id": "rdl", "name": "Romanian Deadlift", "sets": 3, "target_reps": 10, "rest_time": 120, "muscle_group": "Hamstrings/Glutes"},
            {"id": "leg_ext", "name": "Leg Extension", "sets": 3, "target_reps": 12, "rest_time": 60, "muscle_group": "Quads"},
            {"id": "leg_curl", "name": "Lying Leg Curl", "sets": 3, "target_reps": 12, "rest_time": 60, "muscle_group": "Hamstrings/Glutes"},
            {"id": "calf", "name": "Standing Calf Raises", "sets": 4, "target_reps": 15, "rest_time": 60, "muscle_group": "Calves"},
        ],
    },
    "upper_a": {
        "id": "upper_a",
        "name": "Upper Body A",
        "focus": "Horizontal Push/Pull",
        "exercises": [
            {"id": "bench", "name": "Barbell Bench Press", "sets": 4, "target_reps": 6, "rest_time": 180, "muscle_group": "Chest"},
            {"id": "row", "name": "Barbell Row", "sets": 4, "target_reps": 8, "rest_time": 150, "muscle_group": "Back"},
            {"id": "db_press", "name": "Seated Dumbbell Press", "sets": 3, "target_reps": 10, "rest_time": 120, "muscle_group": "Shoulders"},
            {"id": "lat_pull", "name": "Lat Pulldown", "sets": 3, "target_reps": 10, "rest_time": 90, "muscle_group": "Back"},
            {"id": "curl", "name": "EZ Bar Curl", "sets": 3, "target_reps": 10, "rest_time": 60, "muscle_group": "Biceps"},
            {"id": "pushdown", "name": "Rope Pushdowns", "sets": 3, "target_reps": 12, "rest_time": 60, "muscle_group": "Triceps"},
        ],
    },
}

# Program ids recommended for each onboarding goal.
GOAL_TO_PROGRAM = {
    "build_muscle": "upper_lower",
    "strength": "strength",
    "lose_fat": "fat_loss",
    "fitness": "full_body",
}

GOALS = ["build_muscle", "strength", "lose_fat", "fitness"]


def get_exercise(name: str) -> dict | None:
    """Return the library entry for ``name`` or ``None``."""

    return _EXERCISES_BY_NAME.get(name)


def get_template(template_id: str) -> dict | None:
    return WORKOUT_TEMPLATES.get(template_id)


def search_exercises(text: str, exclude: list[str] | None = None) -> list[dict]:
    """Return library exercises whose name contains ``text``.

    Matching is case-insensitive.  Names listed in ``exclude`` are skipped so
    the add-exercise picker never offers an exercise already in the workout.
    """

    needle = text.lower()
    skip = set(exclude or [])
    return [
        ex
        for ex in EXERCISES
        if needle in ex["name"].lower() and ex["name"] not in skip
    ]


def alternatives_for(muscle_group: str, limit: int = 5) -> list[str]:
    """Return up to ``limit`` exercise names training ``muscle_group``."""

    return [ex["name"] for ex in EXERCISES if ex["muscle_group"] == muscle_group][
        :limit
    ]
