import json

import pytest

from backend import settings


def test_defaults_written_on_first_load():
    assert settings.get_value("user_id") == "local"
    assert settings.get_value("goal") == "build_muscle"
    assert settings.get_value("program_weeks") == 16
    assert settings.SETTINGS_PATH.exists()


def test_get_value_default_for_unset():
    assert settings.get_value("current_weight") is None
    assert settings.get_value("current_weight", 70) == 70
    assert settings.get_value("missing", "x") == "x"


def test_set_value_persists():
    settings.set_value("goal", "strength")
    settings.set_value("theme", "dark")
    settings.clear_cache()
    assert settings.get_value("goal") == "strength"
    assert settings.get_value("theme") == "dark"


def test_set_value_rejects_invalid_choices():
    with pytest.raises(ValueError):
        settings.set_value("program_weeks", 10)
    with pytest.raises(ValueError):
        settings.set_value("units", "stone")


def test_missing_keys_filled_from_defaults():
    settings.SETTINGS_PATH.write_text(
        json.dumps([{"key": "goal", "value": "lose_fat", "type": "choice"}])
    )
    assert settings.get_value("goal") == "lose_fat"
    assert settings.get_value("available_time") == 60


def test_unreadable_file_falls_back_to_defaults(caplog):
    settings.SETTINGS_PATH.write_text("[broken")
    assert settings.get_value("units") == "kg"
    assert "Could not read settings" in caplog.text
