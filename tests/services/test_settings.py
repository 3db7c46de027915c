import pytest

from fieldforce.config import FieldForceSettings, get_settings_module, load_settings


@pytest.mark.parametrize(
    "env,expected",
    [
        ("production", "fieldforce.config.production"),
        ("PROD", "fieldforce.config.production"),
        ("testing", "fieldforce.config.testing"),
        ("anything", "fieldforce.config.development"),
    ],
)
def test_settings_module_from_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_defaults_from_testing_module():
    settings = FieldForceSettings.from_module(load_settings("fieldforce.config.testing"))
    assert settings.checkout_status_policy in {"reevaluate", "keep"}
    assert settings.gemini_api_key == ""
    assert settings.stale_after.total_seconds() == settings.stale_after_minutes * 60


def test_dataclass_defaults():
    settings = FieldForceSettings()
    assert settings.geofence_tolerance_meters == 20.0
    assert settings.checkout_status_policy == "reevaluate"
    assert settings.stale_after_minutes == 10
    assert settings.live_window_minutes == 120
    assert settings.tracking_interval_seconds == 15.0
    assert settings.position_timeout_seconds == 20.0
    assert settings.live_refresh_seconds == 10.0
