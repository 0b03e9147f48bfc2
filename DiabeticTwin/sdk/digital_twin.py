"""
DiabeticTwin SDK - Digital Twin
High-level composition of the predictor, food analyzer and medication engine
"""

import dataclasses
from typing import Any, Dict, Optional, Tuple
import logging

import numpy as np

from .data_types import (
    Assessment, CurrentState, RealTimeReading, SafetyVerdict, TrendFlags,
    UserProfile, WeeklyDietPlan
)
from .food_safety_analyzer import FoodSafetyAnalyzer
from .medication_engine import MedicationEngine
from ..core.glucose_predictor import GlucosePredictor
from ..data.food_database import FoodTable

# Plausible input ranges checked before any calculation
GLUCOSE_INPUT_RANGE = (20, 600)
WEIGHT_INPUT_RANGE = (20, 300)


class DigitalTwin:
    """
    Main DiabeticTwin interface.

    Wires the three calculation engines together the way an application
    uses them: an initial assessment, periodic refreshes from simulated
    readings, ad-hoc food checks and a weekly diet plan. The engines stay
    independent; this class only passes results from one to the next.

    Example:
        twin = DigitalTwin()
        profile = UserProfile(age=35, weight_kg=72,
                              diabetes_type=DiabetesType.TYPE_1,
                              activity=ActivityLevel.MODERATE,
                              current_bg=160)
        assessment = twin.assess(profile)
        print(assessment.dose.total_insulin, assessment.forecast.trends.time_in_range)
    """

    def __init__(
        self,
        config: Optional[Dict] = None,
        food_table: Optional[FoodTable] = None,
        rng: Optional[Any] = None
    ):
        """
        Initialize the digital twin.

        Args:
            config: Optional configuration with ``predictor``,
                ``food_safety`` and ``medication`` sections
            food_table: Optional food table for the analyzer
            rng: Shared random source; pass a seeded
                ``numpy.random.Generator`` for reproducible output
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.rng = rng if rng is not None else np.random.default_rng()

        self.predictor = GlucosePredictor(config=self.config.get('predictor'), rng=self.rng)
        self.food_analyzer = FoodSafetyAnalyzer(
            food_table=food_table, config=self.config.get('food_safety'), rng=self.rng
        )
        self.medication_engine = MedicationEngine(config=self.config.get('medication'))

        self.logger.info("DiabeticTwin initialized")

    @staticmethod
    def validate_profile(profile: UserProfile) -> None:
        """
        Check profile inputs against plausible physiological ranges.

        Raises:
            ValueError: If current glucose is outside 20-600 mg/dL or weight
                outside 20-300 kg
        """
        low, high = GLUCOSE_INPUT_RANGE
        if not low <= profile.current_bg <= high:
            raise ValueError(
                f"Please enter a valid blood glucose value ({low}-{high} mg/dL), got {profile.current_bg}"
            )
        low, high = WEIGHT_INPUT_RANGE
        if not low <= profile.weight_kg <= high:
            raise ValueError(
                f"Please enter a valid weight ({low}-{high} kg), got {profile.weight_kg}"
            )

    def assess(
        self,
        profile: UserProfile,
        planned_carbs: float = 0.0,
        trend_flags: Optional[TrendFlags] = None,
        hour_of_day: Optional[int] = None
    ) -> Assessment:
        """
        Run a full assessment for the profile's current glucose.

        The recommended dose (if any) is fed into the forecast as planned
        insulin. Trend alerts only fire when the caller supplies
        `trend_flags`.

        Args:
            profile: User profile
            planned_carbs: Carbohydrates about to be eaten (grams)
            trend_flags: Caller-computed rate-of-change flags
            hour_of_day: Clock hour the forecast starts at (defaults to now)

        Returns:
            Assessment: dose, forecast, alerts and diet score
        """
        self.validate_profile(profile)

        dose = self.medication_engine.calculate_insulin_dose(
            profile, profile.current_bg, planned_carbs
        )
        forecast = self.predictor.predict(profile, CurrentState(
            glucose=profile.current_bg,
            planned_carbs=planned_carbs,
            planned_insulin=dose.total_insulin if dose else 0.0,
            activity=profile.activity,
            hour_of_day=hour_of_day,
            stress_level=profile.stress_level,
            sleep_hours=profile.sleep_hours
        ))
        alerts = self.medication_engine.generate_health_alerts(
            profile, profile.current_bg, trend_flags
        )

        return Assessment(
            profile=profile,
            dose=dose,
            forecast=forecast,
            alerts=alerts,
            diet_score=self.calculate_diet_score(forecast.trends.time_in_range)
        )

    def refresh(
        self,
        profile: UserProfile,
        trend_flags: Optional[TrendFlags] = None
    ) -> Tuple[RealTimeReading, Assessment]:
        """
        Take a simulated reading and re-assess with it.

        The input profile is left untouched; the returned assessment
        carries a copy whose ``current_bg`` is the new reading.
        """
        reading = self.predictor.simulate_real_time_data(profile)
        updated = dataclasses.replace(profile, current_bg=reading.glucose)
        self.logger.info(f"Refreshed reading: {reading.glucose} mg/dL ({reading.trend.value})")
        return reading, self.assess(updated, trend_flags=trend_flags, hour_of_day=reading.timestamp.hour)

    def check_food(
        self,
        profile: UserProfile,
        food_name: str,
        quantity_grams: float,
        current_glucose: Optional[float] = None,
        insulin_on_board: float = 0.0
    ) -> SafetyVerdict:
        """Food safety check, defaulting to the profile's current glucose."""
        glucose = profile.current_bg if current_glucose is None else current_glucose
        return self.food_analyzer.analyze(food_name, quantity_grams, glucose, insulin_on_board)

    def weekly_diet_plan(self, profile: UserProfile) -> WeeklyDietPlan:
        return self.food_analyzer.generate_weekly_diet_plan(profile)

    @staticmethod
    def calculate_diet_score(time_in_range: float) -> int:
        """Score out of 100 peaking at 85% time in range, floored at 60."""
        return int(max(60, 100 - abs(time_in_range - 85)))
