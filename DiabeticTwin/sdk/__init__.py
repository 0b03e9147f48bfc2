"""
DiabeticTwin SDK - Educational glucose forecasting and medication guidance

Quick Start:
    from DiabeticTwin.sdk import DigitalTwin, UserProfile, DiabetesType

    twin = DigitalTwin()
    profile = UserProfile(age=35, weight_kg=70,
                          diabetes_type=DiabetesType.TYPE_1,
                          current_bg=150)

    assessment = twin.assess(profile, planned_carbs=45)
    print(f"Suggested dose: {assessment.dose.total_insulin:.1f} units")

    verdict = twin.check_food(profile, "brown rice", 150)
    print(verdict.safety.value, verdict.projected_glucose)

All figures come from hand-tuned formulas for demonstration only. They are
not medical advice.
"""

from .data_types import (
    DiabetesType,
    ActivityLevel,
    SafetyLevel,
    AlertType,
    TrendDirection,
    UserProfile,
    CurrentState,
    ForecastPoint,
    Forecast,
    TrendSummary,
    RiskZone,
    Recommendation,
    RealTimeReading,
    SafetyVerdict,
    WeeklyDietPlan,
    DoseRecommendation,
    DoseWarning,
    TrendFlags,
    HealthAlert,
    Assessment
)
from .food_safety_analyzer import FoodSafetyAnalyzer
from .medication_engine import MedicationEngine
from .digital_twin import DigitalTwin

__all__ = [
    'DigitalTwin',
    'FoodSafetyAnalyzer',
    'MedicationEngine',
    'DiabetesType',
    'ActivityLevel',
    'SafetyLevel',
    'AlertType',
    'TrendDirection',
    'UserProfile',
    'CurrentState',
    'ForecastPoint',
    'Forecast',
    'TrendSummary',
    'RiskZone',
    'Recommendation',
    'RealTimeReading',
    'SafetyVerdict',
    'WeeklyDietPlan',
    'DoseRecommendation',
    'DoseWarning',
    'TrendFlags',
    'HealthAlert',
    'Assessment'
]
