from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivy.clock import Clock
from kivy.properties import StringProperty


class RestScreen(MDScreen):
    """Screen shown between sets while the rest countdown runs.

    The countdown itself belongs to the session; this screen only polls it
    and returns to the active set once resting is over.
    """

    timer_label = StringProperty("00:00")
    next_exercise_name = StringProperty("")
    next_set_info = StringProperty("")
    rest_time_info = StringProperty("")
    _event = None

    @property
    def session(self):
        app = MDApp.get_running_app()
        return app.workout_session if app else None

    def on_enter(self, *args):
        session = self.session
        ex = session.current if session else None
        if ex is not None:
            self.next_exercise_name = ex.name
            self.next_set_info = f"set {session.current_set + 1} of {ex.sets}"
            self.rest_time_info = f"{ex.rest_time} seconds rest time"
        else:
            self.next_exercise_name = ""
            self.next_set_info = ""
            self.rest_time_info = ""
        self.update_timer(0)
        if self._event is None:
            self._event = Clock.schedule_interval(self.update_timer, 0.2)
        return super().on_enter(*args)

    def on_leave(self, *args):
        if self._event:
            self._event.cancel()
            self._event = None
        return super().on_leave(*args)

    def update_timer(self, dt):
        session = self.session
        remaining = session.rest_time_left if session and session.is_resting else 0
        minutes, seconds = divmod(int(remaining), 60)
        self.timer_label = f"{minutes:02d}:{seconds:02d}"
        if remaining <= 0 and self.manager:
            if self._event:
                self._event.cancel()
                self._event = None
            self.manager.current = "workout_active"

    def skip_rest(self):
        session = self.session
        if session:
            session.skip_rest()
        self.update_timer(0)

    def open_overview(self):
        session = self.session
        if session and session.open_overview():
            MDApp.get_running_app().show_session_phase()
