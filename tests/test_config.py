"""Tests for configuration validation at import time."""

import importlib

import pytest

from edgelocate import config


@pytest.fixture
def reload_config(monkeypatch):
    yield
    monkeypatch.delenv("LOCATION_FALLBACK_URL", raising=False)
    monkeypatch.delenv("LOCATION_FALLBACK_TIMEOUT", raising=False)
    importlib.reload(config)


@pytest.mark.parametrize(
    "url",
    [
        pytest.param("https://geo.test/lookup", id="no-placeholder"),
        pytest.param("https://geo.test/{ip}/{key}", id="named-extra"),
        pytest.param("https://geo.test/{ip}/{0}", id="positional-extra"),
        pytest.param("https://geo.test/{ip}/{", id="unbalanced"),
    ],
)
def test_invalid_fallback_url_template_fails_startup(monkeypatch, reload_config, url):
    monkeypatch.setenv("LOCATION_FALLBACK_URL", url)

    with pytest.raises(RuntimeError, match="LOCATION_FALLBACK_URL"):
        importlib.reload(config)


def test_custom_fallback_url_template_is_accepted(monkeypatch, reload_config):
    monkeypatch.setenv("LOCATION_FALLBACK_URL", "https://geo.test/{ip}?fields=city")

    importlib.reload(config)

    assert config.LOCATION_FALLBACK_URL == "https://geo.test/{ip}?fields=city"


@pytest.mark.parametrize("timeout", ["0", "-1", "soon"])
def test_invalid_fallback_timeout_fails_startup(monkeypatch, reload_config, timeout):
    monkeypatch.setenv("LOCATION_FALLBACK_TIMEOUT", timeout)

    with pytest.raises(RuntimeError, match="LOCATION_FALLBACK_TIMEOUT"):
        importlib.reload(config)
