# Popup dialogs shared by the workout screens
from __future__ import annotations

from kivy.metrics import dp
from kivy.uix.scrollview import ScrollView
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDFlatButton, MDRaisedButton
from kivymd.uix.dialog import MDDialog
from kivymd.uix.list import MDList, TwoLineListItem
from kivymd.uix.textfield import MDTextField

from backend.catalog import search_exercises
from backend.validation import parse_weight


class ExercisePickerPopup(MDDialog):
    """Searchable list of library exercises.

    ``select_callback`` is called with the chosen exercise name.  Names in
    ``exclude`` are not offered.
    """

    def __init__(self, select_callback, title: str = "Add Exercise", exclude=None, **kwargs):
        self.select_callback = select_callback
        self.exclude = list(exclude or [])
        content = self._build_widgets()
        super().__init__(
            title=title,
            type="custom",
            content_cls=content,
            buttons=[MDFlatButton(text="Cancel", on_release=lambda *_: self.dismiss())],
            **kwargs,
        )
        self.populate()

    def _build_widgets(self):
        box = MDBoxLayout(
            orientation="vertical", spacing="8dp", size_hint_y=None, height=dp(400)
        )
        self.search_field = MDTextField(hint_text="Search exercises")
        self.search_field.bind(text=lambda *_: self.populate())
        box.add_widget(self.search_field)
        self.exercise_list = MDList()
        scroll = ScrollView(do_scroll_y=True)
        scroll.add_widget(self.exercise_list)
        box.add_widget(scroll)
        return box

    def populate(self):
        self.exercise_list.clear_widgets()
        for ex in search_exercises(self.search_field.text, self.exclude):
            self.exercise_list.add_widget(
                TwoLineListItem(
                    text=ex["name"],
                    secondary_text=f"{ex['muscle_group']} - {ex['equipment']}",
                    on_release=lambda _, name=ex["name"]: self._choose(name),
                )
            )

    def _choose(self, name: str):
        self.dismiss()
        self.select_callback(name)


class ConfirmDialog(MDDialog):
    """Yes/No confirmation calling ``confirm_callback`` when accepted."""

    def __init__(self, text: str, confirm_callback, confirm_text: str = "Yes", **kwargs):
        self.confirm_callback = confirm_callback
        super().__init__(
            text=text,
            buttons=[
                MDFlatButton(text="Cancel", on_release=lambda *_: self.dismiss()),
                MDRaisedButton(text=confirm_text, on_release=self._confirm),
            ],
            **kwargs,
        )

    def _confirm(self, *_):
        self.dismiss()
        self.confirm_callback()



class EditSetDialog(MDDialog):
    """Weight, reps and RPE fields for correcting a completed set.

    ``save_callback`` receives ``(weight, reps, rpe)``; a field that cannot
    be read as a number is passed as ``None`` and left unchanged.
    """

    def __init__(self, record, save_callback, **kwargs):
        self.record = record
        self.save_callback = save_callback
        content = self._build_widgets()
        super().__init__(
            title=f"Edit set {record.set_index + 1}",
            type="custom",
            content_cls=content,
            buttons=[
                MDFlatButton(text="Cancel", on_release=lambda *_: self.dismiss()),
                MDRaisedButton(text="Save", on_release=self._save),
            ],
            **kwargs,
        )

    def _build_widgets(self):
        box = MDBoxLayout(
            orientation="vertical", spacing="8dp", size_hint_y=None, height=dp(200)
        )
        self.weight_field = MDTextField(
            hint_text="Weight (kg)",
            text=f"{self.record.weight:g}",
            input_filter="float",
        )
        self.reps_field = MDTextField(
            hint_text="Reps", text=str(self.record.reps), input_filter="int"
        )
        self.rpe_field = MDTextField(
            hint_text="RPE (1-10)", text=str(self.record.rpe), input_filter="int"
        )
        for field in (self.weight_field, self.reps_field, self.rpe_field):
            box.add_widget(field)
        return box

    def values(self):
        weight = parse_weight(self.weight_field.text)
        reps = parse_weight(self.reps_field.text)
        rpe = parse_weight(self.rpe_field.text)
        return (
            weight,
            int(reps) if reps is not None else None,
            int(rpe) if rpe is not None else None,
        )

    def _save(self, *_):
        values = self.values()
        self.dismiss()
        self.save_callback(*values)
