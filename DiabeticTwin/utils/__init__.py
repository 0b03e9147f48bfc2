"""Utility module for the DiabeticTwin library.

Key Contents:
    - `metrics.py`: time-in-range, variability and range-fraction
      statistics over glucose series, plus the half-up rounding used when
      engines report values.
    - `config.py`: loading and accessing configuration parameters from
      YAML or JSON files.
"""

from .config import ConfigManager, load_config, get_config_value
from .metrics import (
    round_half_up,
    calculate_tir,
    calculate_variability,
    calculate_time_below_range,
    calculate_time_above_range,
)

__all__ = [
    "ConfigManager",
    "load_config",
    "get_config_value",
    "round_half_up",
    "calculate_tir",
    "calculate_variability",
    "calculate_time_below_range",
    "calculate_time_above_range",
]
