from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.uix.dialog import MDDialog
from kivymd.uix.button import MDFlatButton, MDRaisedButton
from kivymd.uix.list import TwoLineListItem

from backend.catalog import WORKOUT_TEMPLATES
from backend.workout_session import WorkoutSession


class HomeScreen(MDScreen):
    """Start screen listing workout templates.

    Offers to resume a session left behind by a crash or forced close.
    """

    _recovery_dialog = None

    def on_pre_enter(self, *args):
        self.populate()
        return super().on_pre_enter(*args)

    def on_enter(self, *args):
        """Attempt to restore any previous workout session."""
        app = MDApp.get_running_app()
        if app and app.workout_session is None:
            session = WorkoutSession.load_from_recovery(gateway=app.gateway)
            if session:
                self._show_recovery_dialog(session)
        return super().on_enter(*args)

    def populate(self):
        lst = self.ids.get("template_list")
        if lst is None:
            return
        lst.clear_widgets()
        for template_id, template in WORKOUT_TEMPLATES.items():
            lst.add_widget(
                TwoLineListItem(
                    text=template["name"],
                    secondary_text=template.get("focus", ""),
                    on_release=lambda _, tid=template_id: self.start_workout(tid),
                )
            )

    def start_workout(self, template_id=None):
        MDApp.get_running_app().start_workout(template_id)

    def _show_recovery_dialog(self, session: WorkoutSession) -> None:
        app = MDApp.get_running_app()

        def recover(*_):
            dialog.dismiss()
            app.workout_session = session
            app.show_session_phase()

        def discard(*_):
            session.teardown()
            session.clear_recovery_files()
            dialog.dismiss()

        dialog = MDDialog(
            text=f"Resume unfinished workout '{session.workout_name}'?",
            buttons=[
                MDFlatButton(text="No", on_release=discard),
                MDRaisedButton(text="Yes", on_release=recover),
            ],
        )
        dialog.open()
        self._recovery_dialog = dialog
