from kivymd.uix.screen import MDScreen
from kivy.properties import NumericProperty, StringProperty
from kivy.clock import Clock
from kivymd.app import MDApp
import time

from backend.catalog import RPE_SCALE
from backend.validation import parse_weight
from backend.workout_session import PHASE_WORKOUT
from ui.popups import ConfirmDialog


class WorkoutActiveScreen(MDScreen):
    """Screen for performing the current set.

    Shows a stopwatch for the set, the last session's numbers and editable
    weight, reps and RPE inputs pre-filled by the session.
    """

    elapsed = NumericProperty(0.0)
    formatted_time = StringProperty("00:00")
    exercise_name = StringProperty("")
    set_info = StringProperty("")
    last_session_info = StringProperty("")
    weight_text = StringProperty("0")
    reps_text = StringProperty("0")
    rpe = NumericProperty(5)
    rpe_label = StringProperty("")
    progress = NumericProperty(0)
    _event = None

    @property
    def session(self):
        app = MDApp.get_running_app()
        return app.workout_session if app else None

    def on_pre_enter(self, *args):
        """Prepare the workout display when entering the screen."""
        self.refresh()
        self.start_timer()
        return super().on_pre_enter(*args)

    def on_leave(self, *args):
        self.stop_timer()
        return super().on_leave(*args)

    def refresh(self):
        session = self.session
        if session is None or session.current is None:
            return
        ex = session.current
        self.exercise_name = ex.name
        self.set_info = f"Set {session.current_set + 1} of {ex.sets}"
        if ex.last_weight:
            reps = ex.target_reps
            if session.current_set < len(ex.last_reps):
                reps = ex.last_reps[session.current_set]
            self.last_session_info = f"Last time: {ex.last_weight:g}kg x {reps}"
        else:
            self.last_session_info = f"Target: {ex.target_reps} reps"
        values = session.current_input
        self.weight_text = f"{values.get('weight', 0):g}"
        self.reps_text = str(values.get("reps", 0))
        self.set_rpe(values.get("rpe", 5))
        self.progress = session.progress_percent

    def start_timer(self, *args):
        """Start updating the stopwatch from the session's set start."""
        self.stop_timer()
        self._event = Clock.schedule_interval(self._update_elapsed, 0.1)
        self._update_elapsed(0)

    def stop_timer(self, *args):
        if self._event:
            self._event.cancel()
            self._event = None

    def _update_elapsed(self, dt):
        session = self.session
        start = session.current_set_start_time if session else None
        self.elapsed = max(0.0, time.time() - start) if start else 0.0
        minutes, seconds = divmod(int(self.elapsed), 60)
        self.formatted_time = f"{minutes:02d}:{seconds:02d}"

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def adjust_weight(self, delta: float):
        session = self.session
        if session is None:
            return
        values = session.set_current_input(
            weight=max(0, session.current_input.get("weight", 0) + delta)
        )
        self.weight_text = f"{values['weight']:g}"

    def adjust_reps(self, delta: int):
        session = self.session
        if session is None:
            return
        values = session.set_current_input(
            reps=max(0, session.current_input.get("reps", 0) + delta)
        )
        self.reps_text = str(values["reps"])

    def set_rpe(self, value):
        value = max(1, min(10, int(value)))
        self.rpe = value
        entry = RPE_SCALE[value - 1]
        self.rpe_label = f"RPE {value} - {entry['label']}"
        if self.session is not None:
            self.session.set_current_input(rpe=value)

    def _apply_text_inputs(self):
        ids = self.ids
        weight = parse_weight(ids.weight_input.text if "weight_input" in ids else self.weight_text)
        reps = parse_weight(ids.reps_input.text if "reps_input" in ids else self.reps_text)
        self.session.set_current_input(weight=weight, reps=reps)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def complete_set(self):
        session = self.session
        if session is None or session.phase != PHASE_WORKOUT:
            return
        self._apply_text_inputs()
        session.complete_set()
        MDApp.get_running_app().show_session_phase()

    def open_overview(self):
        session = self.session
        if session and session.open_overview():
            MDApp.get_running_app().show_session_phase()

    def confirm_end(self):
        def end():
            session = self.session
            if session and session.end_early():
                MDApp.get_running_app().show_session_phase()

        ConfirmDialog("End workout now? Remaining sets will be skipped.", end, "End").open()
