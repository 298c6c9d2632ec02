from __future__ import annotations

"""Onboarding step collecting the training goal and body weight targets."""

from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivy.properties import BooleanProperty, ListProperty, StringProperty

from backend import settings as app_settings
from backend.catalog import GOALS
from backend.settings import PROGRAM_WEEK_OPTIONS
from backend.validation import (
    parse_weight,
    suggested_goal_weight,
    validate_weight,
    validate_weight_goal,
    weekly_change,
)

ERROR_COLOR = (0.94, 0.27, 0.27, 1)
WARNING_COLOR = (0.96, 0.62, 0.04, 1)


class WeightGoalScreen(MDScreen):
    """Validate current and goal weight as the user types."""

    goal = StringProperty("build_muscle")
    program_weeks = StringProperty("16")
    current_error = StringProperty("")
    goal_error = StringProperty("")
    message = StringProperty("")
    message_color = ListProperty(WARNING_COLOR)
    weekly_text = StringProperty("")
    suggestion = StringProperty("")
    can_continue = BooleanProperty(False)
    return_to = StringProperty("home")

    goals = GOALS
    week_options = [str(w) for w in PROGRAM_WEEK_OPTIONS]

    def on_pre_enter(self, *args):
        self.goal = app_settings.get_value("goal", self.goal)
        self.program_weeks = str(app_settings.get_value("program_weeks", 16))
        current = app_settings.get_value("current_weight")
        target = app_settings.get_value("goal_weight")
        if "current_weight" in self.ids and current:
            self.ids.current_weight.text = f"{current:g}"
        if "goal_weight" in self.ids and target:
            self.ids.goal_weight.text = f"{target:g}"
        self.validate()
        return super().on_pre_enter(*args)

    def _field(self, name: str) -> str:
        return self.ids[name].text if name in self.ids else ""

    def set_goal(self, goal: str):
        self.goal = goal
        self.validate()

    def set_program_weeks(self, weeks: str):
        self.program_weeks = weeks
        self.validate()

    def validate(self, *args):
        current = parse_weight(self._field("current_weight"))
        target = parse_weight(self._field("goal_weight"))
        weeks = int(self.program_weeks)

        current_msg = validate_weight(current)
        goal_msg = validate_weight(target)
        self.current_error = current_msg.message if current_msg else ""
        self.goal_error = goal_msg.message if goal_msg else ""
        self.suggestion = suggested_goal_weight(self.goal, current)

        result = validate_weight_goal(self.goal, current, target, weeks)
        self.message = result.message if result else ""
        self.message_color = ERROR_COLOR if result and result.is_error else WARNING_COLOR
        if current and target and not current_msg and not goal_msg:
            change = weekly_change(current, target, weeks)
            self.weekly_text = f"{'+' if change > 0 else ''}{change:.2f}kg/week"
        else:
            self.weekly_text = ""
        self.can_continue = bool(
            current
            and target
            and not current_msg
            and not goal_msg
            and not (result and result.is_error)
        )
        return self.can_continue

    def use_suggestion(self):
        if self.suggestion and "goal_weight" in self.ids:
            self.ids.goal_weight.text = self.suggestion
        self.validate()

    def save(self):
        if not self.validate():
            return False
        app_settings.set_value("goal", self.goal)
        app_settings.set_value("program_weeks", int(self.program_weeks))
        app_settings.set_value("current_weight", parse_weight(self._field("current_weight")))
        app_settings.set_value("goal_weight", parse_weight(self._field("goal_weight")))
        if self.manager:
            self.manager.current = self.return_to
        app = MDApp.get_running_app()
        if app and app.workout_session is not None:
            app.workout_session.goal = self.goal
        return True
