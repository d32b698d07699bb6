"""
Calculator configuration.

Settings are read from a YAML document such as::

    working_precision: 60
    auto_decimal_places: 12
    show_other_info: false
    variables:
      g0: 9.80665 m/s^2
      c: 299792458 m/s

The file is looked up at ``$UNITCALC_CONFIG`` or
``~/.config/unitcalc/config.yaml``; a missing file means defaults.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .errors import (
    error_config_invalid_value,
    error_config_unknown_key,
    error_config_unreadable,
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "UNITCALC_CONFIG"

MIN_WORKING_PRECISION = 10
MAX_WORKING_PRECISION = 1000


@dataclass
class CalcConfig:
    """Calculator settings with their defaults."""
    working_precision: int = 40         # decimal digits for transcendental functions
    auto_decimal_places: int = 10       # digits shown for approximate results
    show_other_info: bool = True        # print secondary renderings in the CLI
    variables: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self._check_int("working_precision", MIN_WORKING_PRECISION, MAX_WORKING_PRECISION)
        self._check_int("auto_decimal_places", 0, MAX_WORKING_PRECISION)
        if not isinstance(self.show_other_info, bool):
            raise error_config_invalid_value("show_other_info", "expected true or false")
        if not isinstance(self.variables, dict):
            raise error_config_invalid_value("variables", "expected a mapping of names to expressions")
        for name, source in self.variables.items():
            if not isinstance(name, str) or not isinstance(source, (str, int, float)):
                raise error_config_invalid_value(
                    "variables", f"'{name}' must map to an expression string")
        self.variables = {name: str(source) for name, source in self.variables.items()}

    def _check_int(self, key: str, low: int, high: int) -> None:
        value = getattr(self, key)
        if isinstance(value, bool) or not isinstance(value, int):
            raise error_config_invalid_value(key, "expected an integer")
        if not low <= value <= high:
            raise error_config_invalid_value(key, f"must be between {low} and {high}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CalcConfig":
        known = set(cls.__dataclass_fields__)
        for key in data:
            if key not in known:
                raise error_config_unknown_key(str(key))
        return cls(**data)


def default_config_path() -> Path:
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".config" / "unitcalc" / "config.yaml"


def load_config(path: Optional[Union[str, Path]] = None) -> CalcConfig:
    """
    Load configuration from ``path`` (or the default location).

    A missing file yields the defaults. A file that is not valid YAML, is
    not a mapping, or contains unknown keys or bad values raises ConfigError.
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        logger.debug("no configuration at %s, using defaults", config_path)
        return CalcConfig()

    try:
        with config_path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp)
    except yaml.YAMLError as e:
        raise error_config_unreadable(str(config_path), str(e)) from e
    except OSError as e:
        raise error_config_unreadable(str(config_path), e.strerror or str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise error_config_unreadable(str(config_path), "expected a mapping at the top level")

    logger.debug("loaded configuration from %s", config_path)
    return CalcConfig.from_dict(data)
