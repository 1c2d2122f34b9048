import logging

import pytest

import atm_config


def test_http_bind_defaults(monkeypatch):
    monkeypatch.delenv("ATM_HOST", raising=False)
    monkeypatch.delenv("ATM_PORT", raising=False)
    assert atm_config.get_http_bind() == ("127.0.0.1", 5000)


def test_http_bind_from_env(monkeypatch):
    monkeypatch.setenv("ATM_HOST", "0.0.0.0")
    monkeypatch.setenv("ATM_PORT", "8080")
    assert atm_config.get_http_bind() == ("0.0.0.0", 8080)


@pytest.mark.parametrize("value,expected", [
    ("1", True),
    ("true", True),
    (" YES ", True),
    ("0", False),
    ("no", False),
    ("", False),
])
def test_debug_from_env(monkeypatch, value, expected):
    monkeypatch.setenv("ATM_DEBUG", value)
    assert atm_config.get_debug() is expected


def test_debug_default(monkeypatch):
    monkeypatch.delenv("ATM_DEBUG", raising=False)
    assert atm_config.get_debug() is False


def test_max_sessions(monkeypatch):
    monkeypatch.delenv("ATM_MAX_SESSIONS", raising=False)
    assert atm_config.get_max_sessions() == 1000
    monkeypatch.setenv("ATM_MAX_SESSIONS", "5")
    assert atm_config.get_max_sessions() == 5


def test_configure_logging_sets_level(monkeypatch):
    root = logging.getLogger()
    previous = root.level
    monkeypatch.setenv("ATM_LOG_LEVEL", "debug")
    try:
        atm_config.configure_logging()
        assert root.level == logging.DEBUG
        monkeypatch.setenv("ATM_LOG_LEVEL", "warning")
        atm_config.configure_logging()
        assert root.level == logging.WARNING
    finally:
        root.setLevel(previous)
