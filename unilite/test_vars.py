import importlib

import pytest


@pytest.fixture
def reload_vars(monkeypatch):
    import unilite.vars as vars_module

    yield lambda: importlib.reload(vars_module)
    monkeypatch.undo()
    importlib.reload(vars_module)


def test_origin_base_url_trailing_slash_stripped(monkeypatch, reload_vars):
    monkeypatch.setenv("ORIGIN_BASE_URL", "https://erp.example.edu/")
    vars_module = reload_vars()
    assert vars_module.ORIGIN_BASE_URL == "https://erp.example.edu"


def test_numeric_settings_parsed(monkeypatch, reload_vars):
    monkeypatch.setenv("PROXY_TIMEOUT", "12.5")
    monkeypatch.setenv("PROXY_MAX_REDIRECTS", "4")
    monkeypatch.setenv("SESSION_TTL_SECONDS", "60")
    vars_module = reload_vars()
    assert vars_module.PROXY_TIMEOUT == 12.5
    assert vars_module.PROXY_MAX_REDIRECTS == 4
    assert vars_module.SESSION_TTL_SECONDS == 60


def test_defaults(monkeypatch, reload_vars):
    for name in ("ORIGIN_BASE_URL", "SESSION_TTL_SECONDS", "MOCK_ORIGIN_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    vars_module = reload_vars()
    assert vars_module.ORIGIN_BASE_URL == "https://gietuerp.in"
    assert vars_module.SESSION_TTL_SECONDS == 24 * 60 * 60
    assert vars_module.MOCK_ORIGIN_ENABLED is True
    assert vars_module.PROXY_PATH == "/proxy"


def test_mock_origin_can_be_disabled(monkeypatch, reload_vars):
    monkeypatch.setenv("MOCK_ORIGIN_ENABLED", "False")
    assert reload_vars().MOCK_ORIGIN_ENABLED is False
