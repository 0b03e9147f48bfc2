"""
DiabeticTwin: Educational Diabetes Digital Twin

Estimates near-future blood glucose and medication guidance from a user
profile using transparent, hand-tuned arithmetic. Three independent
engines do the work:

    - `GlucosePredictor`: 24-hour hourly glucose forecast with trend,
      risk-zone and recommendation summaries.
    - `FoodSafetyAnalyzer`: glucose impact and safety verdict for a food
      portion, plus an illustrative weekly meal plan.
    - `MedicationEngine`: insulin dose estimate with safety warnings, and
      threshold health alerts.

Example usage:
    >>> import DiabeticTwin as dt
    >>>
    >>> profile = dt.UserProfile(age=42, weight_kg=80,
    ...                          diabetes_type=dt.DiabetesType.TYPE_2,
    ...                          activity=dt.ActivityLevel.LIGHT,
    ...                          current_bg=165)
    >>> twin = dt.DigitalTwin()
    >>> assessment = twin.assess(profile, planned_carbs=40)
    >>> assessment.forecast.trends.time_in_range

Not a medical device. Outputs are for demonstration and education only.
"""

__version__ = "1.0.0"
__author__ = "DiabeticTwin Team"
__license__ = "MIT"

# The SDK must be imported before `core`: the predictor depends on the
# SDK data types.
from .sdk import (
    DigitalTwin,
    FoodSafetyAnalyzer,
    MedicationEngine,
    UserProfile,
    CurrentState,
    DiabetesType,
    ActivityLevel,
    SafetyLevel,
    TrendFlags,
)
from .core.glucose_predictor import GlucosePredictor
from .data.food_database import FoodTable, DEFAULT_FOOD_TABLE, load_food_table
from .utils.config import ConfigManager, load_config

__all__ = [
    # Main API
    "DigitalTwin",

    # Engines
    "GlucosePredictor",
    "FoodSafetyAnalyzer",
    "MedicationEngine",

    # Data
    "UserProfile",
    "CurrentState",
    "DiabetesType",
    "ActivityLevel",
    "SafetyLevel",
    "TrendFlags",
    "FoodTable",
    "DEFAULT_FOOD_TABLE",
    "load_food_table",

    # Configuration
    "ConfigManager",
    "load_config",

    # Metadata
    "__version__",
    "__author__",
    "__license__",
]
