from __future__ import annotations

import pytest

from server.__main__ import load_config
from server.config import ConfigError, ServerConfig


def test_defaults() -> None:
    cfg = ServerConfig.from_env({})
    assert cfg.port == 8080
    assert cfg.save_path == "qtable.json"
    assert cfg.save_interval == 30.0
    assert (cfg.alpha, cfg.gamma, cfg.epsilon) == (0.12, 0.96, 0.25)
    assert (cfg.epsilon_decay, cfg.epsilon_floor) == (0.9995, 0.01)


def test_env_overrides() -> None:
    cfg = ServerConfig.from_env({
        "WS_PORT": "9000",
        "QTABLE_PATH": "/tmp/q.json",
        "SAVE_INTERVAL": "5",
        "ALPHA": "0.5",
        "GAMMA": "0.9",
        "EPSILON": "0.1",
    })
    assert cfg.port == 9000
    assert cfg.save_path == "/tmp/q.json"
    assert cfg.save_interval == 5.0
    assert (cfg.alpha, cfg.gamma, cfg.epsilon) == (0.5, 0.9, 0.1)


def test_http_port_is_fallback() -> None:
    assert ServerConfig.from_env({"HTTP_PORT": "8181"}).port == 8181
    assert ServerConfig.from_env({"HTTP_PORT": "8181", "WS_PORT": "8282"}).port == 8282


def test_blank_env_is_ignored() -> None:
    assert ServerConfig.from_env({"ALPHA": "  "}).alpha == 0.12


def test_flags_override_env() -> None:
    cfg = load_config(["--alpha", "0.3", "--port", "7000"], environ={"ALPHA": "0.9", "GAMMA": "0.5"})
    assert cfg.alpha == 0.3
    assert cfg.port == 7000
    assert cfg.gamma == 0.5


@pytest.mark.parametrize(
    "env",
    [
        {"ALPHA": "fast"},
        {"ALPHA": "0"},
        {"GAMMA": "1.5"},
        {"EPSILON": "0"},
        {"EPSILON_DECAY": "1"},
        {"EPSILON_FLOOR": "-0.1"},
        {"WS_PORT": "70000"},
        {"SAVE_INTERVAL": "0"},
        {"LOG_LEVEL": "LOUD"},
        {"EPSILON": "0.005"},
        {"EPSILON": "0.05", "EPSILON_FLOOR": "0.1"},
    ],
)
def test_invalid_values_raise(env: dict) -> None:
    with pytest.raises(ConfigError):
        ServerConfig.from_env(env)


def test_unknown_setting() -> None:
    with pytest.raises(ConfigError):
        ServerConfig().override(beta=1)


def test_epsilon_equal_to_floor_is_allowed() -> None:
    cfg = ServerConfig.from_env({"EPSILON": "0.01", "EPSILON_FLOOR": "0.01"})
    assert cfg.epsilon == cfg.epsilon_floor
