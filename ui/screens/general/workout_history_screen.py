from datetime import datetime
import logging

from kivymd.uix.screen import MDScreen
from kivymd.uix.list import TwoLineListItem
from kivy.app import App
from kivy.properties import StringProperty

from backend import settings as app_settings


class WorkoutHistoryScreen(MDScreen):
    """Display a list of past workouts.

    Attributes:
        return_to (str): Name of the screen to return to when the Back
            button is pressed. Defaults to ``"home"``.
    """

    return_to = StringProperty("home")

    def on_pre_enter(self, *args):
        """Populate the history list before the screen becomes visible."""
        self.populate()
        return super().on_pre_enter(*args)

    def populate(self) -> None:
        lst = self.ids.get("history_list")
        if not lst:
            return
        lst.clear_widgets()
        app = App.get_running_app()
        try:
            history = app.gateway.get_workout_history(app_settings.get_value("user_id"))
        except Exception:
            logging.exception("Failed to load workout history")
            history = []
        for entry in history:
            dt = datetime.fromtimestamp(entry["started_at"])
            volume = entry.get("total_volume") or 0
            minutes = entry.get("duration_minutes") or 0
            lst.add_widget(
                TwoLineListItem(
                    text=entry["workout_name"],
                    secondary_text=(
                        f"{dt.strftime('%H:%M %a %d/%m/%Y')} - {minutes} min - {volume:g} kg"
                    ),
                )
            )
