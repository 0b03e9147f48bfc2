# DiabeticTwin Metrics
# Summary statistics over glucose series and the rounding helpers shared
# by the calculation engines.

import math
import numpy as np
from typing import Sequence

# General helper for safe division
def _safe_divide(numerator: float, denominator: float,
                 default_val: float = 0.0) -> float:
    """Safely divides two numbers. Returns `default_val` if denominator is zero."""
    return numerator / denominator if denominator != 0 else default_val

def round_half_up(value: float, ndigits: int = 0) -> float:
    """Rounds halves toward positive infinity (``2.5 -> 3``, ``-2.5 -> -2``).

    Python's built-in ``round`` uses banker's rounding, which would make
    reported doses and glucose values depend on the parity of the digit
    before the half.

    Args:
        value (float): Number to round.
        ndigits (int): Number of decimal places to keep. Defaults to 0.

    Returns:
        float: The rounded value. Callers wanting an ``int`` cast it.
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor

def calculate_tir(glucose_values: Sequence[float], lower_bound: float = 70.0,
                  upper_bound: float = 180.0) -> float:
    """Calculates Time In Range (TIR).

    TIR is the percentage of readings that fall within a target range
    (70-180 mg/dL by default, both bounds inclusive).

    Args:
        glucose_values (Sequence[float]): Glucose readings in mg/dL.
        lower_bound (float): Lower bound of the target range (inclusive).
        upper_bound (float): Upper bound of the target range (inclusive).

    Returns:
        float: TIR in percent. Returns 0.0 for an empty series.
    """
    if len(glucose_values) == 0:
        return 0.0

    values = np.asarray(glucose_values, dtype=float)
    in_range_count = np.sum((values >= lower_bound) & (values <= upper_bound))
    return float(_safe_divide(float(in_range_count), float(len(values))) * 100)

def calculate_variability(glucose_values: Sequence[float]) -> float:
    """Population standard deviation of a glucose series (mg/dL).

    Returns 0.0 for an empty series.
    """
    if len(glucose_values) == 0:
        return 0.0
    return float(np.std(np.asarray(glucose_values, dtype=float)))

def calculate_time_below_range(glucose_values: Sequence[float],
                               threshold: float = 70.0) -> float:
    """Percentage of readings strictly below `threshold`."""
    if len(glucose_values) == 0:
        return 0.0
    values = np.asarray(glucose_values, dtype=float)
    return float(np.sum(values < threshold) / len(values) * 100)

def calculate_time_above_range(glucose_values: Sequence[float],
                               threshold: float = 180.0) -> float:
    """Percentage of readings strictly above `threshold`."""
    if len(glucose_values) == 0:
        return 0.0
    values = np.asarray(glucose_values, dtype=float)
    return float(np.sum(values > threshold) / len(values) * 100)
