from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDIconButton
from kivymd.uix.list import OneLineListItem, TwoLineListItem
from kivy.metrics import dp
from kivy.properties import NumericProperty, StringProperty

from backend.planning import workout_time_breakdown
from backend.workout_session import PHASE_OVERVIEW, PHASE_WORKOUT_OVERVIEW
from ui.popups import ConfirmDialog, EditSetDialog, ExercisePickerPopup


class WorkoutOverviewScreen(MDScreen):
    """Exercise list shown before starting and while browsing mid-workout.

    Exercises can be added, removed, swapped, reordered and have sets added
    or removed in both phases.  During a workout, tapping an exercise jumps to
    its first set that is not yet completed, and tapping a completed set
    opens a dialog to correct its weight, reps or RPE.
    """

    title = StringProperty("")
    primary_text = StringProperty("Start Workout")
    time_info = StringProperty("")
    progress = NumericProperty(0)

    def on_pre_enter(self, *args):
        self.populate()
        return super().on_pre_enter(*args)

    @property
    def session(self):
        app = MDApp.get_running_app()
        return app.workout_session if app else None

    def populate(self):
        session = self.session
        lst = self.ids.get("exercise_list")
        if lst is None:
            return
        lst.clear_widgets()
        if session is None:
            return
        self.title = session.workout_name
        self.progress = session.progress_percent
        if session.phase == PHASE_OVERVIEW:
            self.primary_text = "Start Workout"
            estimate = workout_time_breakdown(session.exercises)["total_time"]
            self.time_info = (
                f"{len(session.exercises)} exercises - "
                f"{session.total_sets} sets - ~{round(estimate / 60)} min"
            )
        else:
            self.primary_text = "Back to Workout"
            self.time_info = (
                f"{len(session.completed_sets)} of {session.total_sets} sets done"
            )
        for idx, exercise in enumerate(session.exercises):
            lst.add_widget(self._build_row(idx, exercise))
            done = sorted(session.completed_for(exercise.id), key=lambda s: s.set_index)
            for record in done:
                lst.add_widget(self._build_set_row(record))

    def _build_row(self, index, exercise):
        session = self.session
        done = len(session.completed_for(exercise.id))
        weight = exercise.suggested_weight or exercise.last_weight
        details = f"{exercise.sets} x {exercise.target_reps}"
        if weight:
            details += f" @ {weight:g}kg"
        if session.phase != PHASE_OVERVIEW:
            details += f"  ({done}/{exercise.sets} done)"
        name = exercise.name
        if index == session.current_exercise and session.phase != PHASE_OVERVIEW:
            name = "> " + name

        row = MDBoxLayout(orientation="horizontal", size_hint_y=None, height=dp(72))
        row.add_widget(
            TwoLineListItem(
                text=name,
                secondary_text=details,
                on_release=lambda *_, i=index: self.jump_to(i),
            )
        )
        for icon, callback in (
            ("arrow-up", lambda *_, i=index: self.move(i, "up")),
            ("arrow-down", lambda *_, i=index: self.move(i, "down")),
            ("minus", lambda *_, i=index: self.remove_set(i)),
            ("plus", lambda *_, i=index: self.add_set(i)),
            ("swap-horizontal", lambda *_, i=index: self.swap(i)),
            ("delete", lambda *_, i=index: self.remove(i)),
        ):
            row.add_widget(MDIconButton(icon=icon, on_release=callback))
        return row

    def _build_set_row(self, record):
        return OneLineListItem(
            text=(
                f"    Set {record.set_index + 1}: {record.weight:g}kg x {record.reps}"
                f" @ RPE {record.rpe}"
            ),
            on_release=lambda *_, eid=record.exercise_id, si=record.set_index: (
                self.edit_set(eid, si)
            ),
        )

    def primary_action(self):
        session = self.session
        if session is None:
            return
        if session.phase == PHASE_OVERVIEW:
            session.start()
        elif session.phase == PHASE_WORKOUT_OVERVIEW:
            session.resume()
        MDApp.get_running_app().show_session_phase()

    def jump_to(self, index: int):
        session = self.session
        if session is None or session.phase != PHASE_WORKOUT_OVERVIEW:
            return False
        exercise = session.exercises[index]
        for set_idx in range(exercise.sets):
            if session.skip_to(index, set_idx):
                MDApp.get_running_app().show_session_phase()
                return True
        return False

    def open_add_exercise(self):
        session = self.session
        if session is None:
            return
        popup = ExercisePickerPopup(
            self.add_exercise, exclude=[ex.name for ex in session.exercises]
        )
        popup.open()

    def add_exercise(self, name: str):
        if self.session and self.session.add_exercise(name):
            self.populate()

    def swap(self, index: int):
        session = self.session
        if session is None:
            return
        current = session.exercises[index]
        popup = ExercisePickerPopup(
            lambda name, i=index: self._swap_to(i, name),
            title=f"Swap {current.name}",
            exclude=[ex.name for ex in session.exercises],
        )
        popup.open()

    def _swap_to(self, index: int, name: str):
        if self.session and self.session.swap_exercise(index, name):
            self.populate()

    def remove(self, index: int):
        session = self.session
        if session is None or len(session.exercises) <= 1:
            return
        name = session.exercises[index].name

        def confirm():
            if session.remove_exercise(index):
                self.populate()

        ConfirmDialog(f"Remove {name} from this workout?", confirm, "Remove").open()

    def move(self, index: int, direction: str):
        if self.session and self.session.move_exercise(index, direction):
            self.populate()

    def add_set(self, index: int):
        if self.session and self.session.add_set(index):
            self.populate()

    def remove_set(self, index: int):
        if self.session and self.session.remove_set(index):
            self.populate()

    def edit_set(self, exercise_id: str, set_index: int):
        session = self.session
        if session is None:
            return False
        record = session.find_completed(exercise_id, set_index)
        if record is None:
            return False
        dialog = EditSetDialog(
            record,
            lambda weight, reps, rpe, eid=exercise_id, si=set_index: self.save_set(
                eid, si, weight, reps, rpe
            ),
        )
        dialog.open()
        return True

    def save_set(self, exercise_id: str, set_index: int, weight, reps, rpe):
        if self.session and self.session.update_completed_set(
            exercise_id, set_index, weight=weight, reps=reps, rpe=rpe
        ):
            self.populate()
            return True
        return False

    def leave(self):
        """Return home, discarding a workout that has not started."""

        app = MDApp.get_running_app()
        session = self.session
        if session is not None and session.phase == PHASE_OVERVIEW:
            session.teardown()
            session.clear_recovery_files()
            app.workout_session = None
            if self.manager:
                self.manager.current = "home"
        else:
            self.primary_action()
