import importlib

import pytest

from config import get_settings_module


@pytest.mark.parametrize(
    "env, expected",
    [
        ("production", "config.production"),
        ("prod", "config.production"),
        ("TESTING", "config.testing"),
        ("test", "config.testing"),
        ("development", "config.development"),
        ("whatever", "config.development"),
    ],
)
def test_settings_module_from_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_default_is_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_settings_module() == "config.development"


def test_testing_settings_use_memory_store():
    settings = importlib.import_module("config.testing")
    assert settings.STORE_BACKEND == "memory"
    assert settings.TESTING is True
