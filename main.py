from kivymd.app import MDApp
from kivy.lang import Builder
from kivy.core.window import Window
from pathlib import Path
import logging
import os
import sys

import core
from core import DEFAULT_DB_PATH, PersistenceGateway
from backend.workout_session import (
    PHASE_COMPLETE,
    PHASE_OVERVIEW,
    PHASE_WORKOUT_OVERVIEW,
)
from ui.screens import (  # noqa: F401 - classes referenced from main.kv
    HomeScreen,
    RestScreen,
    WeighInScreen,
    WeightGoalScreen,
    WorkoutActiveScreen,
    WorkoutHistoryScreen,
    WorkoutOverviewScreen,
    WorkoutSummaryScreen,
)


if os.name == "nt" or sys.platform.startswith("win"):
    Window.size = (280, 280 * (20 / 9))


class FitTrackApp(MDApp):
    workout_session = None
    gateway: PersistenceGateway | None = None

    def build(self):
        self.gateway = PersistenceGateway(DEFAULT_DB_PATH)
        return Builder.load_file(str(Path(__file__).with_name("main.kv")))

    def start_workout(self, template_id: str | None = None):
        """Create a :class:`WorkoutSession` and show its overview.

        ``template_id`` selects one of the built-in templates; ``None`` uses
        the default exercise list.
        """

        if self.workout_session is not None:
            self.workout_session.teardown()
        self.workout_session = core.create_workout_session(
            template_id, gateway=self.gateway
        )
        logging.info("Prepared workout %s", self.workout_session.workout_name)
        self.show_session_phase()

    def screen_for_phase(self) -> str:
        session = self.workout_session
        if session is None:
            return "home"
        if session.phase in (PHASE_OVERVIEW, PHASE_WORKOUT_OVERVIEW):
            return "workout_overview"
        if session.phase == PHASE_COMPLETE:
            return "workout_summary"
        return "rest" if session.is_resting else "workout_active"

    def show_session_phase(self):
        """Switch to the screen matching the session's current phase."""

        if self.root:
            self.root.current = self.screen_for_phase()

    def on_stop(self):
        if self.workout_session is not None:
            self.workout_session.teardown()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    FitTrackApp().run()
