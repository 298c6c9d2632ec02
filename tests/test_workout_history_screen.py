import importlib.util
import os
import pytest

os.environ.setdefault("KIVY_WINDOW", "mock")

kivy_available = (
    importlib.util.find_spec("kivy") is not None
    and importlib.util.find_spec("kivymd") is not None
)

if kivy_available:
    from kivy.app import App
    from kivy.properties import ObjectProperty
    import ui.screens.general.workout_history_screen as w
    from ui.screens.general.workout_history_screen import WorkoutHistoryScreen

    class _DummyApp:
        theme_cls = object()
        gateway = None

        def property(self, name, default=None):
            return ObjectProperty(None)

    @pytest.fixture(autouse=True)
    def _provide_app(monkeypatch):
        monkeypatch.setattr(App, "get_running_app", lambda: _DummyApp())
        yield


class _FakeList:
    def __init__(self):
        self.children = []

    def clear_widgets(self):
        self.children = []

    def add_widget(self, widget):
        self.children.insert(0, widget)


@pytest.mark.skipif(not kivy_available, reason="Kivy and KivyMD are required")
def test_history_entries_include_day_and_totals(monkeypatch):
    class DummyDateTime:
        @classmethod
        def fromtimestamp(cls, ts):
            from datetime import datetime
            return datetime(2025, 8, 11, 14, 29)

    class Gateway:
        def get_workout_history(self, user_id):
            return [
                {"workout_name": "Leg Day A", "started_at": 0, "duration_minutes": 52, "total_volume": 8450.0}
            ]

    monkeypatch.setattr(_DummyApp, "gateway", Gateway())
    monkeypatch.setattr(w, "datetime", DummyDateTime)
    monkeypatch.setattr(w, "TwoLineListItem", lambda **kw: kw)

    screen = WorkoutHistoryScreen()
    screen.ids["history_list"] = _FakeList()
    screen.populate()

    item = screen.ids["history_list"].children[0]
    assert item["text"] == "Leg Day A"
    assert item["secondary_text"] == "14:29 Mon 11/08/2025 - 52 min - 8450 kg"


@pytest.mark.skipif(not kivy_available, reason="Kivy and KivyMD are required")
def test_history_failure_shows_empty_list(monkeypatch, caplog):
    class Gateway:
        def get_workout_history(self, user_id):
            raise ConnectionError("offline")

    monkeypatch.setattr(_DummyApp, "gateway", Gateway())
    screen = WorkoutHistoryScreen()
    screen.ids["history_list"] = _FakeList()

    screen.populate()

    assert screen.ids["history_list"].children == []
    assert "Failed to load workout history" in caplog.text
