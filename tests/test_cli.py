from cli import config_from_env
from config import GAME_CONFIG


def test_env_overrides_limits(monkeypatch) -> None:
    monkeypatch.setenv("MAX_ATTEMPTS", "5")
    monkeypatch.setenv("MAX_STEPS", "8")
    cfg = config_from_env()
    assert cfg.max_attempts == 5
    assert cfg.max_steps == 8
    assert cfg.max_rejections_per_attempt == GAME_CONFIG.max_rejections_per_attempt


def test_bad_env_values_are_ignored(monkeypatch) -> None:
    monkeypatch.setenv("MAX_ATTEMPTS", "zero")
    monkeypatch.setenv("MAX_STEPS", "0")
    assert config_from_env() == GAME_CONFIG
