from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_GPIO_BACKEND_ENV = "POT_GPIO_BACKEND"
_PIN_A_ENV = "POT_PIN_A"
_PIN_B_ENV = "POT_PIN_B"
_SETTLE_MS_ENV = "POT_SETTLE_MS"
_MAX_COUNT_ENV = "POT_MAX_COUNT"
_RAW_MIN_ENV = "POT_RAW_MIN"
_RAW_MAX_ENV = "POT_RAW_MAX"
_CURVE_ENV = "POT_CURVE"
_DB_MIN_ENV = "POT_DB_MIN"
_DB_MAX_ENV = "POT_DB_MAX"
_RATE_LIMIT_ENABLED_ENV = "POT_RATE_LIMIT_ENABLED"
_RATE_UP_ENV = "POT_RATE_UP"
_RATE_DOWN_ENV = "POT_RATE_DOWN"
_SAMPLE_INTERVAL_ENV = "POT_SAMPLE_INTERVAL"
_OSC_ENABLED_ENV = "OSC_ENABLED"
_OSC_HOST_ENV = "OSC_HOST"
_OSC_PORT_ENV = "OSC_PORT"
_OSC_ADDRESS_ENV = "OSC_ADDRESS"
_HTTP_HOST_ENV = "HTTP_HOST"
_HTTP_PORT_ENV = "HTTP_PORT"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_GPIO_BACKENDS = {"rpi", "mock"}
_CURVES = {"linear", "logarithmic", "exponential"}
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    gpio_backend: str
    pin_a: int
    pin_b: int
    settle_ms: float
    max_count: int
    raw_min: int
    raw_max: int
    curve: str
    db_min: float
    db_max: float
    rate_limit_enabled: bool
    rate_up: float
    rate_down: float
    sample_interval: float
    osc_enabled: bool
    osc_host: str
    osc_port: int
    osc_address: str
    http_host: str
    http_port: int
    log_level: str


def _read_raw(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    return candidate or None


def _read_str_env(name: str, default: str) -> str:
    candidate = _read_raw(name)
    return candidate if candidate is not None else default


def _read_choice_env(name: str, choices: set[str], default: str) -> str:
    candidate = _read_raw(name)
    if candidate is None:
        return default
    lowered = candidate.lower()
    return lowered if lowered in choices else default


def _read_int_env(name: str, default: int, minimum: int | None = None) -> int:
    candidate = _read_raw(name)
    if candidate is None:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    if minimum is not None and parsed < minimum:
        return default
    return parsed


def _read_float_env(name: str, default: float, positive: bool = False) -> float:
    candidate = _read_raw(name)
    if candidate is None:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    if positive and parsed <= 0:
        return default
    return parsed


def _read_bool_env(name: str, default: bool) -> bool:
    candidate = _read_raw(name)
    if candidate is None:
        return default
    lowered = candidate.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def _read_log_level(default: str) -> str:
    candidate = _read_raw(_LOG_LEVEL_ENV)
    if candidate is None:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        gpio_backend=_read_choice_env(_GPIO_BACKEND_ENV, _GPIO_BACKENDS, "rpi"),
        pin_a=_read_int_env(_PIN_A_ENV, 18, minimum=0),
        pin_b=_read_int_env(_PIN_B_ENV, 24, minimum=0),
        settle_ms=_read_float_env(_SETTLE_MS_ENV, 4.0, positive=True),
        max_count=_read_int_env(_MAX_COUNT_ENV, 1_000_000, minimum=1),
        raw_min=_read_int_env(_RAW_MIN_ENV, 0, minimum=0),
        raw_max=_read_int_env(_RAW_MAX_ENV, 100_000, minimum=0),
        curve=_read_choice_env(_CURVE_ENV, _CURVES, "logarithmic"),
        db_min=_read_float_env(_DB_MIN_ENV, -60.0),
        db_max=_read_float_env(_DB_MAX_ENV, 0.0),
        rate_limit_enabled=_read_bool_env(_RATE_LIMIT_ENABLED_ENV, True),
        rate_up=_read_float_env(_RATE_UP_ENV, 0.05, positive=True),
        rate_down=_read_float_env(_RATE_DOWN_ENV, 0.30, positive=True),
        sample_interval=_read_float_env(_SAMPLE_INTERVAL_ENV, 1.0, positive=True),
        osc_enabled=_read_bool_env(_OSC_ENABLED_ENV, True),
        osc_host=_read_str_env(_OSC_HOST_ENV, "127.0.0.1"),
        osc_port=_read_int_env(_OSC_PORT_ENV, 10023, minimum=1),
        osc_address=_read_str_env(_OSC_ADDRESS_ENV, "/ch/01/mix/fader"),
        http_host=_read_str_env(_HTTP_HOST_ENV, "0.0.0.0"),
        http_port=_read_int_env(_HTTP_PORT_ENV, 3000, minimum=1),
        log_level=_read_log_level("INFO"),
    )
