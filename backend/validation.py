"""Input validation for onboarding, registration and weigh-ins.

Validators never raise for bad user input.  They return a
:class:`ValidationMessage` (or ``None`` when everything is fine) so screens can
show the text inline next to the field.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

from backend import DEFAULT_PROGRAM_WEEKS, MAX_WEIGHT_KG, MIN_WEIGHT_KG

LBS_PER_KG = 2.205
MIN_PASSWORD_LENGTH = 6
MAX_USERNAME_LENGTH = 20

LOSS_GOALS = ("lose_fat",)
GAIN_GOALS = ("build_muscle", "strength")

# Weekly change limits in kg: (error above, warning above)
LOSS_LIMITS = (1.0, 0.75)
GAIN_LIMITS = (0.5, 0.35)

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


@dataclass(frozen=True)
class ValidationMessage:
    level: str  # "error" or "warning"
    message: str

    @property
    def is_error(self) -> bool:
        return self.level == "error"


def parse_weight(text) -> float | None:
    """Return ``text`` as a number, ignoring anything but digits and dots."""

    if text is None:
        return None
    if isinstance(text, (int, float)):
        return float(text)
    cleaned = re.sub(r"[^0-9.]", "", str(text))
    try:
        return float(cleaned)
    except ValueError:
        return None


def is_valid_weight(weight: float | None) -> bool:
    return weight is not None and MIN_WEIGHT_KG <= weight <= MAX_WEIGHT_KG


def weight_range_message() -> ValidationMessage:
    return ValidationMessage(
        "error",
        f"Please enter a realistic weight ({MIN_WEIGHT_KG}-{MAX_WEIGHT_KG}kg)",
    )


def weekly_change(
    current: float, goal_weight: float, program_weeks: int = DEFAULT_PROGRAM_WEEKS
) -> float:
    """Return the required change in kg per week (negative when losing)."""

    return (goal_weight - current) / max(program_weeks, 1)


def validate_weight_goal(
    goal: str,
    current: float | None,
    goal_weight: float | None,
    program_weeks: int = DEFAULT_PROGRAM_WEEKS,
) -> ValidationMessage | None:
    """Check that ``goal_weight`` fits ``goal`` and a sustainable pace.

    Out-of-range weights are reported by :func:`validate_weight` and are
    ignored here.  Goals other than fat loss or muscle gain accept any target.
    """

    if not current or not goal_weight:
        return None
    if not is_valid_weight(current) or not is_valid_weight(goal_weight):
        return None

    diff = goal_weight - current
    abs_weekly = abs(weekly_change(current, goal_weight, program_weeks))

    if goal in LOSS_GOALS:
        if diff > 0:
            return ValidationMessage(
                "error",
                "Your goal weight is higher than current. "
                "For fat loss, set a lower target.",
            )
        error_limit, warning_limit = LOSS_LIMITS
        if abs_weekly > error_limit:
            return ValidationMessage(
                "error",
                f"Losing {abs_weekly:.1f}kg/week is too aggressive. "
                "Max recommended: 1kg/week.",
            )
        if abs_weekly > warning_limit:
            return ValidationMessage(
                "warning",
                f"{abs_weekly:.1f}kg/week is ambitious. "
                "Consider a slower pace for sustainability.",
            )
    elif goal in GAIN_GOALS:
        if diff < 0:
            return ValidationMessage(
                "error",
                "Your goal weight is lower than current. "
                "For muscle gain, set a higher target.",
            )
        error_limit, warning_limit = GAIN_LIMITS
        if abs_weekly > error_limit:
            return ValidationMessage(
                "error",
                f"Gaining {abs_weekly:.1f}kg/week may lead to excess fat. "
                "Max recommended: 0.5kg/week.",
            )
        if abs_weekly > warning_limit:
            return ValidationMessage(
                "warning",
                f"{abs_weekly:.1f}kg/week is ambitious. "
                "Slower gains = leaner results.",
            )
    return None


def validate_weight(weight: float | None) -> ValidationMessage | None:
    """Return an error when ``weight`` is entered but implausible."""

    if not weight:
        return None
    if not is_valid_weight(weight):
        return weight_range_message()
    return None


def suggested_goal_weight(goal: str, current: float | None) -> str:
    """Return a sensible target weight as text with one decimal."""

    if not current or not is_valid_weight(current):
        return ""
    if goal in LOSS_GOALS:
        return f"{current * 0.9:.1f}"
    if goal in GAIN_GOALS:
        return f"{current * 1.05:.1f}"
    return f"{current:.1f}"


def to_kg(weight: float, unit: str = "kg") -> float:
    return weight / LBS_PER_KG if unit == "lbs" else weight


def validate_weigh_in(weight, unit: str = "kg") -> tuple[float | None, ValidationMessage | None]:
    """Return ``(weight_kg, message)`` for a weigh-in entry.

    ``weight_kg`` is ``None`` whenever the entry cannot be saved.
    """

    value = parse_weight(weight)
    if not value:
        return None, ValidationMessage("error", "Please enter your weight")
    weight_kg = to_kg(value, unit)
    if not is_valid_weight(weight_kg):
        return None, weight_range_message()
    return weight_kg, None


def sanitize_username(text: str) -> str:
    """Lower-case ``text`` and keep only letters, digits and underscores."""

    return re.sub(r"[^a-z0-9_]", "", (text or "").lower())[:MAX_USERNAME_LENGTH]


def validate_registration(
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    confirm_password: str,
) -> dict[str, ValidationMessage]:
    """Return field name to error for a registration form."""

    errors: dict[str, ValidationMessage] = {}
    if not (first_name or "").strip():
        errors["first_name"] = ValidationMessage("error", "First name is required")
    if not (last_name or "").strip():
        errors["last_name"] = ValidationMessage("error", "Last name is required")

    email = (email or "").strip()
    if not email:
        errors["email"] = ValidationMessage("error", "Email is required")
    elif not _EMAIL_RE.search(email):
        errors["email"] = ValidationMessage("error", "Please enter a valid email")

    if not password:
        errors["password"] = ValidationMessage("error", "Password is required")
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = ValidationMessage(
            "error", f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    if not confirm_password:
        errors["confirm_password"] = ValidationMessage(
            "error", "Please confirm your password"
        )
    elif password != confirm_password:
        errors["confirm_password"] = ValidationMessage(
            "error", "Passwords do not match"
        )
    return errors
