from pathlib import Path

import pytest

from threemensmorris.config import DEFAULT_FPS, GameConfig, log_path
from threemensmorris.errors import ConfigError
from threemensmorris.motion import DEFAULT_SPEED


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("TMM_LOG_FILE", "TMM_LOG_DIR", "TMM_SPEED", "TMM_FPS"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


def test_log_path_falls_back_to_cwd(tmp_path: Path, clean_env):
    clean_env.chdir(tmp_path)
    assert log_path() == tmp_path / "game.log"


def test_log_path_env_order(tmp_path: Path, clean_env):
    clean_env.setenv("TMM_LOG_DIR", str(tmp_path / "d"))
    assert log_path() == tmp_path / "d" / "game.log"
    clean_env.setenv("TMM_LOG_FILE", str(tmp_path / "x.log"))
    assert log_path() == tmp_path / "x.log"


def test_from_env_defaults(tmp_path: Path, clean_env):
    clean_env.chdir(tmp_path)
    cfg = GameConfig.from_env()
    assert cfg.speed == DEFAULT_SPEED
    assert cfg.fps == DEFAULT_FPS
    assert cfg.window_size == (600, 800)
    assert cfg.log_file == tmp_path / "game.log"


def test_from_env_values_and_overrides(clean_env):
    clean_env.setenv("TMM_SPEED", "250.5")
    clean_env.setenv("TMM_FPS", "30")
    cfg = GameConfig.from_env()
    assert cfg.speed == 250.5 and cfg.fps == 30
    cfg2 = cfg.with_overrides(speed=100, fps=120, log_file=Path("other.log"))
    assert (cfg2.speed, cfg2.fps, cfg2.log_file) == (100.0, 120, Path("other.log"))
    assert cfg.with_overrides() == cfg


@pytest.mark.parametrize("var,value", [
    ("TMM_SPEED", "fast"),
    ("TMM_SPEED", "nan"),
    ("TMM_SPEED", "inf"),
    ("TMM_SPEED", "-inf"),
    ("TMM_FPS", "0"),
    ("TMM_FPS", "1.5"),
])
def test_bad_env_values_raise(clean_env, var, value):
    clean_env.setenv(var, value)
    with pytest.raises(ConfigError):
        GameConfig.from_env()


def test_bad_overrides_raise():
    with pytest.raises(ConfigError):
        GameConfig().with_overrides(speed=0)
    with pytest.raises(ConfigError):
        GameConfig().with_overrides(fps=-1)


@pytest.mark.parametrize("speed", [float("nan"), float("inf")])
def test_non_finite_speed_override_raises(speed):
    with pytest.raises(ConfigError):
        GameConfig().with_overrides(speed=speed)
