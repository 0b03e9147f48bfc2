"""Core forecasting components for DiabeticTwin.

Key Contents:
    - `GlucosePredictor`: 24-hour heuristic glucose forecast with trend,
      risk-zone and recommendation summaries, plus a simulated real-time
      reading for periodic refresh.
"""

from .glucose_predictor import GlucosePredictor, FORECAST_HOURS

__all__ = [
    "GlucosePredictor",
    "FORECAST_HOURS",
]
