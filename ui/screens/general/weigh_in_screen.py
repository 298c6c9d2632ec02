from kivymd.app import MDApp
from kivymd.uix.screen import MDScreen
from kivy.properties import StringProperty

import core
from backend import settings as app_settings
from backend.validation import validate_weigh_in


class WeighInScreen(MDScreen):
    """Record today's body weight in kilograms or pounds."""

    unit = StringProperty("kg")
    error_text = StringProperty("")
    status_text = StringProperty("")

    def on_pre_enter(self, *args):
        self.unit = app_settings.get_value("units", "kg")
        self.error_text = ""
        self.status_text = ""
        return super().on_pre_enter(*args)

    def toggle_unit(self):
        self.unit = "lbs" if self.unit == "kg" else "kg"
        app_settings.set_value("units", self.unit)

    def save(self):
        text = self.ids.weight_input.text if "weight_input" in self.ids else ""
        weight_kg, error = validate_weigh_in(text, self.unit)
        if error:
            self.error_text = error.message
            return False
        self.error_text = ""
        app = MDApp.get_running_app()
        user_id = app_settings.get_value("user_id")
        if core.log_weigh_in(app.gateway, user_id, weight_kg):
            self.status_text = f"Logged {weight_kg:.1f} kg"
        else:
            self.status_text = "Could not save weigh-in"
        return True
