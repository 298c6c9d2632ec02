import pytest

from backend.validation import (
    parse_weight,
    sanitize_username,
    suggested_goal_weight,
    to_kg,
    validate_registration,
    validate_weigh_in,
    validate_weight,
    validate_weight_goal,
    weekly_change,
)


def test_parse_weight():
    assert parse_weight("82.5") == 82.5
    assert parse_weight("82,5 kg") == 825.0
    assert parse_weight(70) == 70.0
    assert parse_weight("") is None
    assert parse_weight(None) is None


def test_validate_weight_range():
    assert validate_weight(None) is None
    assert validate_weight(80) is None
    message = validate_weight(20)
    assert message.is_error
    assert message.message == "Please enter a realistic weight (35-250kg)"
    assert validate_weight(251).is_error


def test_weekly_change():
    assert weekly_change(90, 82, 16) == -0.5
    assert weekly_change(70, 74, 0) == 4


@pytest.mark.parametrize(
    "goal, current, target, weeks, level",
    [
        ("lose_fat", 90, 82, 16, None),
        ("lose_fat", 90, 76, 16, "warning"),
        ("lose_fat", 90, 70, 16, "error"),
        ("lose_fat", 90, 95, 16, "error"),
        ("build_muscle", 70, 74, 16, None),
        ("build_muscle", 70, 76, 16, "warning"),
        ("strength", 70, 80, 16, "error"),
        ("build_muscle", 70, 65, 16, "error"),
        ("fitness", 70, 50, 12, None),
    ],
)
def test_goal_pace(goal, current, target, weeks, level):
    message = validate_weight_goal(goal, current, target, weeks)
    assert (message.level if message else None) == level


def test_goal_messages():
    message = validate_weight_goal("lose_fat", 90, 70, 16)
    assert message.message == "Losing 1.2kg/week is too aggressive. Max recommended: 1kg/week."
    message = validate_weight_goal("build_muscle", 70, 65, 16)
    assert message.message.startswith("Your goal weight is lower than current.")


def test_goal_ignores_missing_or_implausible_weights():
    assert validate_weight_goal("lose_fat", None, 80) is None
    assert validate_weight_goal("lose_fat", 90, 20) is None


def test_suggested_goal_weight():
    assert suggested_goal_weight("lose_fat", 80) == "72.0"
    assert suggested_goal_weight("build_muscle", 80) == "84.0"
    assert suggested_goal_weight("fitness", 80) == "80.0"
    assert suggested_goal_weight("lose_fat", 10) == ""


def test_weigh_in_in_pounds():
    weight_kg, message = validate_weigh_in("176.4", "lbs")
    assert message is None
    assert weight_kg == pytest.approx(80.0, abs=0.01)
    assert to_kg(80) == 80


def test_weigh_in_errors():
    assert validate_weigh_in("")[1].message == "Please enter your weight"
    weight_kg, message = validate_weigh_in("500")
    assert weight_kg is None
    assert message.is_error


def test_sanitize_username():
    assert sanitize_username("John.Doe-99!") == "johndoe99"
    assert len(sanitize_username("x" * 40)) == 20
    assert sanitize_username(None) == ""


def test_registration_valid():
    assert validate_registration("Ada", "Lovelace", "ada@example.com", "secret1", "secret1") == {}


def test_registration_errors():
    errors = validate_registration(" ", "", "not-an-email", "abc", "abd")
    assert set(errors) == {"first_name", "last_name", "email", "password", "confirm_password"}
    assert errors["email"].message == "Please enter a valid email"
    assert errors["password"].message == "Password must be at least 6 characters"
    assert errors["confirm_password"].message == "Passwords do not match"


def test_registration_requires_confirmation():
    errors = validate_registration("Ada", "L", "ada@example.com", "secret1", "")
    assert errors["confirm_password"].message == "Please confirm your password"
