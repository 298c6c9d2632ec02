import logging

from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.uix.list import OneLineListItem, TwoLineListItem
from kivy.properties import StringProperty

from backend.sessions import finalize_session, validate_workout_session


class WorkoutSummaryScreen(MDScreen):
    """Screen showing the results of a completed workout."""

    headline = StringProperty("")
    status_text = StringProperty("")

    @property
    def session(self):
        app = MDApp.get_running_app()
        return app.workout_session if app else None

    def on_pre_enter(self, *args):
        self.populate()
        return super().on_pre_enter(*args)

    def populate(self):
        lst = self.ids.get("summary_list")
        session = self.session
        if lst is None or session is None:
            return
        lst.clear_widgets()
        stats = session.session_summary()
        self.headline = (
            f"{stats.duration_minutes} min - {stats.total_volume:g} kg - "
            f"{stats.total_reps} reps"
        )
        for text in (
            f"Average RPE: {stats.avg_rpe:g}",
            f"Working: {stats.working_minutes} min  Resting: {stats.resting_minutes} min",
            f"Efficiency: {stats.efficiency_percent}%",
            f"Calories (estimate): {stats.calories}",
        ):
            lst.add_widget(OneLineListItem(text=text))
        for pr in stats.personal_records:
            lst.add_widget(
                TwoLineListItem(
                    text=f"New {pr['type']} PR: {pr['exercise']}",
                    secondary_text=f"{pr['label']} ({pr['improvement_label']})",
                )
            )
        for item in stats.breakdown:
            sets = ", ".join(
                f"{d['weight']:g}x{d['reps']}" for d in item["set_details"]
            )
            lst.add_widget(
                TwoLineListItem(
                    text=f"{item['name']}  {item['sets']}/{item['target_sets']} sets",
                    secondary_text=f"{item['volume']:g} kg - {sets}",
                )
            )
        self.status_text = "" if not session.saved else "Saved"

    def save_workout(self):
        """Store the workout and return to the home screen."""

        app = MDApp.get_running_app()
        session = self.session
        if session is None:
            return
        errors = validate_workout_session(session)
        if errors and not session.saved:
            self.status_text = "\n".join(errors)
            return
        if not session.saved:
            try:
                result = finalize_session(session, app.gateway)
            except ValueError as exc:
                self.status_text = str(exc)
                return
            logging.info(
                "Workout saved with %d new personal records", len(result.new_records)
            )
        session.teardown()
        app.workout_session = None
        if self.manager:
            self.manager.current = "home"
