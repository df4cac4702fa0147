#!/usr/bin/env python3
# server/config.py
#
# Server settings. Defaults below; environment variables override them and
# command-line flags (see server/__main__.py) override the environment.

import os
from dataclasses import dataclass, fields, replace

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigError(ValueError):
    pass


@dataclass
class ServerConfig:
    host: str = '0.0.0.0'
    port: int = 8080                # WebSocket and HTTP share one port
    save_path: str = 'qtable.json'
    save_interval: float = 30.0     # seconds between autosaves / epsilon decay
    alpha: float = 0.12             # learning rate
    gamma: float = 0.96             # discount factor
    epsilon: float = 0.25           # initial exploration rate
    epsilon_decay: float = 0.9995   # per autosave tick
    epsilon_floor: float = 0.01
    heartbeat: float = 30.0         # websocket ping interval, seconds
    log_level: str = 'INFO'

    # field -> env var(s), first one set wins
    ENV_VARS = {
        'host': ('BOT_RL_HOST',),
        'port': ('WS_PORT', 'HTTP_PORT'),
        'save_path': ('QTABLE_PATH',),
        'save_interval': ('SAVE_INTERVAL',),
        'alpha': ('ALPHA',),
        'gamma': ('GAMMA',),
        'epsilon': ('EPSILON',),
        'epsilon_decay': ('EPSILON_DECAY',),
        'epsilon_floor': ('EPSILON_FLOOR',),
        'heartbeat': ('HEARTBEAT_INTERVAL',),
        'log_level': ('LOG_LEVEL',),
    }

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        overrides = {}
        for name, env_names in cls.ENV_VARS.items():
            for env_name in env_names:
                raw = environ.get(env_name)
                if raw is not None and raw.strip() != '':
                    overrides[name] = raw.strip()
                    break
        return cls().override(**overrides)

    def override(self, **values):
        """Return a copy with `values` applied (strings are coerced to the field type) and validated."""
        types = {f.name: f.type for f in fields(self)}
        coerced = {}
        for name, value in values.items():
            if value is None:
                continue
            if name not in types:
                raise ConfigError(f"unknown setting {name!r}")
            coerced[name] = _coerce(name, value, types[name])
        cfg = replace(self, **coerced)
        cfg.validate()
        return cfg

    def validate(self):
        if not 1 <= self.port <= 65535:
            raise ConfigError(f"port must be in 1..65535, got {self.port}")
        if not 0 < self.alpha <= 1:
            raise ConfigError(f"alpha must be in (0, 1], got {self.alpha}")
        if not 0 <= self.gamma <= 1:
            raise ConfigError(f"gamma must be in [0, 1], got {self.gamma}")
        if not 0 < self.epsilon <= 1:
            raise ConfigError(f"epsilon must be in (0, 1], got {self.epsilon}")
        if not 0 < self.epsilon_floor <= 1:
            raise ConfigError(f"epsilon_floor must be in (0, 1], got {self.epsilon_floor}")
        if not 0 < self.epsilon_decay < 1:
            raise ConfigError(f"epsilon_decay must be in (0, 1), got {self.epsilon_decay}")
        if self.epsilon < self.epsilon_floor:
            raise ConfigError(f"epsilon ({self.epsilon}) must not be below epsilon_floor ({self.epsilon_floor})")
        if not (self.save_interval > 0 and self.heartbeat > 0):
            raise ConfigError("save_interval and heartbeat must be positive")
        if not self.save_path:
            raise ConfigError("save_path must not be empty")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")


def _coerce(name, value, kind):
    kind = {'int': int, 'float': float, 'str': str}.get(kind, kind)
    if kind is float and isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, kind) and not isinstance(value, bool):
        return value
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigError(f"invalid value for {name}: {value!r}") from None
