"""
DiabeticTwin SDK Data Types
Plain data structures passed into and returned by the calculation engines
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Mapping
from datetime import datetime
from enum import Enum

import pandas as pd

class DiabetesType(Enum):
    """Diabetes type classification."""
    TYPE_1 = "type1"
    TYPE_2 = "type2"
    PREDIABETES = "prediabetes"

class ActivityLevel(Enum):
    """Habitual (or planned) physical activity level."""
    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    ATHLETE = "athlete"

class SafetyLevel(Enum):
    """Verdict levels for food checks and dose warnings."""
    SAFE = "safe"
    MODERATE = "moderate"
    WARNING = "warning"
    DANGER = "danger"
    UNKNOWN = "unknown"

class AlertType(Enum):
    """Health alert urgency."""
    EMERGENCY = "emergency"
    WARNING = "warning"

class TrendDirection(Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"

# Keys accepted by UserProfile.from_dict besides the field names themselves
_PROFILE_KEY_ALIASES = {
    "diabetesType": "diabetes_type",
    "currentBG": "current_bg",
    "weight": "weight_kg",
    "height": "height_cm",
    "sleep": "sleep_hours",
    "stress": "stress_level",
}

@dataclass(frozen=True)
class UserProfile:
    """User profile collected once and passed into every calculation.

    Engines never mutate a profile; callers derive updated copies with
    `dataclasses.replace`.
    """
    age: int
    weight_kg: float
    diabetes_type: DiabetesType
    activity: Optional[ActivityLevel] = None
    height_cm: Optional[int] = None
    hba1c: Optional[float] = None
    current_bg: int = 120

    # Lifestyle inputs used as forecast defaults
    sleep_hours: float = 7.0
    stress_level: int = 5

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserProfile":
        """Builds a profile from a plain mapping (e.g. a parsed YAML file).

        Both snake_case field names and the camelCase form keys
        (``diabetesType``, ``currentBG``, ``weight``, ``height``) are
        accepted. Unknown keys are ignored.

        Raises:
            ValueError: If a required field is missing or an enum value
                is not recognised.
        """
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _PROFILE_KEY_ALIASES.get(key, key)
            if name in cls.__dataclass_fields__:
                values[name] = value

        missing = [name for name in ("age", "weight_kg", "diabetes_type") if name not in values]
        if missing:
            raise ValueError(f"Profile is missing required fields: {', '.join(missing)}")

        values["diabetes_type"] = DiabetesType(values["diabetes_type"])
        if values.get("activity") is not None:
            values["activity"] = ActivityLevel(values["activity"])
        return cls(**values)

@dataclass
class CurrentState:
    """Present conditions and planned actions for a forecast."""
    glucose: float = 100.0
    planned_carbs: float = 0.0
    planned_insulin: float = 0.0
    activity: Optional[ActivityLevel] = None  # None -> profile activity
    hour_of_day: Optional[int] = None  # None -> wall clock hour
    stress_level: float = 5.0  # 0-10
    sleep_hours: float = 7.0

@dataclass
class ForecastPoint:
    """One hourly step of a glucose forecast."""
    hour: int
    glucose: float
    factors: Dict[str, float] = field(default_factory=dict)

@dataclass
class GlucoseExtreme:
    value: float
    hour: int

@dataclass
class TrendSummary:
    """Derived statistics over a 24-point forecast."""
    current: float
    peak: GlucoseExtreme
    nadir: GlucoseExtreme
    short_term_trend: TrendDirection
    long_term_trend: TrendDirection
    variability: int  # population SD, mg/dL
    time_in_range: int  # percent of points in 70-180
    time_below_range: float = 0.0
    time_above_range: float = 0.0

@dataclass
class RiskZone:
    hour: int
    type: str  # hypoglycemia, hyperglycemia, elevated
    severity: str  # severe, moderate, mild
    duration: int = 1

@dataclass
class Recommendation:
    type: str
    priority: str
    title: str
    message: str
    action: str

@dataclass
class Forecast:
    """Complete output of `GlucosePredictor.predict`."""
    points: List[ForecastPoint]
    confidence: float
    trends: TrendSummary
    risk_zones: List[RiskZone] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)

    @property
    def glucose_values(self) -> List[float]:
        return [point.glucose for point in self.points]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per hour: ``hour``, ``glucose`` and one column per factor."""
        rows = [{"hour": p.hour, "glucose": p.glucose, **p.factors} for p in self.points]
        return pd.DataFrame(rows).set_index("hour")

@dataclass
class RealTimeReading:
    """A single simulated sensor reading for periodic refresh."""
    glucose: int
    timestamp: datetime
    trend: TrendDirection
    confidence: float = 0.85

@dataclass
class SafetyVerdict:
    """Result of a food safety check.

    Numeric fields are None when the food was not found in the table.
    """
    food: str
    quantity: float
    safety: SafetyLevel
    confidence: float
    message: str
    net_carbs: Optional[float] = None
    glycemic_load: Optional[float] = None
    glucose_impact: Optional[float] = None
    projected_glucose: Optional[float] = None
    recommendations: List[str] = field(default_factory=list)
    category: Optional[str] = None
    glycemic_index: Optional[int] = None

@dataclass
class MealSuggestion:
    protein: str
    carb_source: str
    vegetables: List[str]
    estimated_carbs: float
    carb_target: float = 0.0

@dataclass
class SnackSuggestion:
    items: List[str]
    estimated_carbs: float
    carb_target: float = 0.0

@dataclass
class DayPlan:
    breakfast: MealSuggestion
    lunch: MealSuggestion
    dinner: MealSuggestion
    snacks: SnackSuggestion

@dataclass
class WeeklyDietPlan:
    """Seven day plans keyed by weekday name (Monday first)."""
    daily_carb_target: int
    days: Dict[str, DayPlan]

    def to_dataframe(self) -> pd.DataFrame:
        """Flattens the plan to one row per (day, slot)."""
        rows = []
        for day, plan in self.days.items():
            for slot in ("breakfast", "lunch", "dinner"):
                meal: MealSuggestion = getattr(plan, slot)
                rows.append({
                    "day": day,
                    "slot": slot,
                    "items": ", ".join([meal.protein, meal.carb_source, *meal.vegetables]),
                    "estimated_carbs": meal.estimated_carbs,
                })
            rows.append({
                "day": day,
                "slot": "snacks",
                "items": ", ".join(plan.snacks.items),
                "estimated_carbs": plan.snacks.estimated_carbs,
            })
        return pd.DataFrame(rows, columns=["day", "slot", "items", "estimated_carbs"])

@dataclass
class DoseWarning:
    level: SafetyLevel
    message: str

@dataclass
class DoseRecommendation:
    """Insulin dose breakdown in units, rounded to 0.1 U."""
    correction_dose: float
    carb_dose: float
    iob_adjustment: float
    total_insulin: float
    timing: str
    warnings: List[DoseWarning] = field(default_factory=list)
    sensitivity_factor: float = 1.0

@dataclass
class TrendFlags:
    """Rate-of-change flags supplied by the caller for health alerts."""
    is_rising_rapidly: bool = False
    is_falling_rapidly: bool = False

@dataclass
class HealthAlert:
    type: AlertType
    title: str
    message: str
    action: str
    priority: int

@dataclass
class Assessment:
    """Composite result of `DigitalTwin.assess`."""
    profile: UserProfile
    dose: Optional[DoseRecommendation]
    forecast: Forecast
    alerts: List[HealthAlert]
    diet_score: int
