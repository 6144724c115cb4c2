from __future__ import annotations

import pytest

from config import get_settings_module


@pytest.mark.parametrize(
    "app_env, mutabaah_env, expected",
    [
        (None, None, "config.development"),
        ("production", None, "config.production"),
        ("Test", None, "config.testing"),
        ("production", "testing", "config.testing"),
        ("staging", None, "config.development"),
    ],
)
def test_settings_module_selection(monkeypatch, app_env, mutabaah_env, expected):
    for name, value in (("APP_ENV", app_env), ("MUTABAAH_ENV", mutabaah_env)):
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)

    assert get_settings_module() == expected
