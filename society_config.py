"""
Engine Configuration
Explicit settings for handicap allowance, grouping and tee times

Defaults live here and nowhere else. The engine functions take every value
as an argument; this struct is how a caller (the CLI) collects them from a
JSON file and GOLF_SOCIETY_* environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from society_models import finite_or_none
from tee_grouping import HANDICAP_BASES, parse_tee_time

logger = logging.getLogger(__name__)

ENV_PREFIX = "GOLF_SOCIETY_"

# Environment variable suffix -> config field
ENV_FIELDS = {
    "ALLOWANCE": "allowance",
    "GROUP_SIZE": "group_size",
    "DESCENDING": "descending",
    "HANDICAP_BASIS": "handicap_basis",
    "START_TIME": "start_time",
    "TEE_INTERVAL": "interval_minutes",
}

DEFAULT_ALLOWANCE = 0.95

# Recommended allowances by competition format
FORMAT_ALLOWANCES = (
    (("fourball", "better_ball", "betterball"), 0.85),
    (("foursomes",), 0.50),
    (("scramble",), 0.75),
)


class ConfigError(ValueError):
    """A configuration value that can't be used."""


@dataclass(frozen=True)
class EngineConfig:
    allowance: float = DEFAULT_ALLOWANCE
    group_size: int = 4
    descending: bool = True
    handicap_basis: str = "playing"
    start_time: Optional[str] = None
    interval_minutes: int = 10

    def validate(self):
        allowance = finite_or_none(self.allowance)
        if allowance is None or not 0 < allowance <= 1:
            raise ConfigError(f"allowance must be a fraction in (0, 1], got {self.allowance!r}")
        if self.group_size < 1:
            raise ConfigError(f"group_size must be at least 1, got {self.group_size}")
        if self.handicap_basis not in HANDICAP_BASES:
            raise ConfigError(f"handicap_basis must be one of {sorted(HANDICAP_BASES)}, got {self.handicap_basis!r}")
        if self.start_time is not None and parse_tee_time(self.start_time) is None:
            raise ConfigError(f"start_time must be HH:MM, got {self.start_time!r}")
        return self


def allowance_from_percent(percent):
    """95 -> 0.95"""
    value = finite_or_none(percent)
    if value is None:
        return None
    return value / 100


def recommended_allowance(format_name):
    """
    Recommended handicap allowance for a competition format.

    Fourball/better ball 85%, foursomes 50%, scramble 75%, individual
    stroke play and Stableford 95%.
    """
    if not format_name:
        return DEFAULT_ALLOWANCE
    normalized = str(format_name).lower()
    for keywords, allowance in FORMAT_ALLOWANCES:
        if any(keyword in normalized for keyword in keywords):
            return allowance
    return DEFAULT_ALLOWANCE


def _parse_bool(value):
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "y", "on"):
        return True
    if text in ("0", "false", "no", "n", "off"):
        return False
    raise ConfigError(f"Expected a boolean, got {value!r}")


def _coerce(name, value):
    """Convert a raw file/env value to the type of the config field"""
    try:
        if name == "allowance":
            allowance = float(value)
            # Accept percentages such as 95
            return allowance_from_percent(allowance) if allowance > 1 else allowance
        if name in ("group_size", "interval_minutes"):
            return int(value)
        if name == "descending":
            return _parse_bool(value)
        if name == "start_time":
            return None if value in (None, "") else str(value)
        return str(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {name}: {value!r} ({e})") from e


def load_config(path=None, environ=None, **overrides):
    """
    Build an EngineConfig.

    Precedence (lowest to highest): defaults, JSON file at path,
    GOLF_SOCIETY_* environment variables, keyword overrides (None values
    are ignored so CLI flags can be passed straight through).

    Raises:
        ConfigError: unknown key or invalid value
    """
    environ = os.environ if environ is None else environ
    known = {f.name for f in fields(EngineConfig)}
    values = {}

    if path:
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a JSON object")
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"{path}: unknown settings {unknown}")
        values.update(data)
        logger.debug("Loaded config file %s", path)

    for suffix, name in ENV_FIELDS.items():
        key = ENV_PREFIX + suffix
        if key in environ:
            values[name] = environ[key]

    for name, value in overrides.items():
        if name not in known:
            raise ConfigError(f"Unknown setting {name!r}")
        if value is not None:
            values[name] = value

    config = replace(EngineConfig(), **{name: _coerce(name, value) for name, value in values.items()})
    return config.validate()
