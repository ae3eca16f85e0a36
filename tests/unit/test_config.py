"""Tests for configuration defaults and validation"""
import importlib

import pytest

import src.config as config


@pytest.fixture
def reload_config(monkeypatch):
    """Reload src.config with patched environment, restoring it afterwards"""
    def _reload(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        return importlib.reload(config)

    yield _reload
    monkeypatch.undo()
    importlib.reload(config)


def test_canonical_defaults(reload_config, monkeypatch):
    for key in ("XP_GROWTH_FACTOR", "INITIAL_XP_TO_NEXT_LEVEL", "POPUP_DURATION_MS",
                "LEVEL_UP_DURATION_MS", "MAJOR_AWARD_THRESHOLD"):
        monkeypatch.delenv(key, raising=False)
    cfg = reload_config()

    assert cfg.XP_GROWTH_FACTOR == 1.3
    assert cfg.INITIAL_XP_TO_NEXT_LEVEL == 500
    assert cfg.POPUP_DURATION_MS == 1200
    assert cfg.LEVEL_UP_DURATION_MS == 3000
    assert cfg.MAJOR_AWARD_THRESHOLD == 100
    cfg.validate_config()


def test_growth_factor_must_exceed_one(reload_config):
    cfg = reload_config(XP_GROWTH_FACTOR="1.0")

    with pytest.raises(ValueError, match="XP_GROWTH_FACTOR"):
        cfg.validate_config()


def test_durations_must_be_positive(reload_config):
    cfg = reload_config(POPUP_DURATION_MS="0")

    with pytest.raises(ValueError, match="POPUP_DURATION_MS"):
        cfg.validate_config()
