# DiabeticTwin Glucose Predictor
# 24-hour glucose forecast built from additive arithmetic passes over a base curve

import math
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from ..sdk.data_types import (
    ActivityLevel, CurrentState, DiabetesType, Forecast, ForecastPoint,
    GlucoseExtreme, RealTimeReading, Recommendation, RiskZone, TrendDirection,
    TrendSummary, UserProfile
)
from ..utils.metrics import (
    round_half_up, calculate_tir, calculate_variability,
    calculate_time_below_range, calculate_time_above_range
)

FORECAST_HOURS = 24

# (effect mg/dL at hour 0, duration in hours); effect decays linearly to 0
DEFAULT_ACTIVITY_IMPACTS = {
    "sedentary": (0.0, 0),
    "light": (-15.0, 2),
    "moderate": (-30.0, 4),
    "active": (-50.0, 6),
    "athlete": (-40.0, 8),
}

# diabetes type -> multiplier applied to the accumulated glucose value
PERSONAL_MULTIPLIERS = {
    DiabetesType.TYPE_1: 0.9,
    DiabetesType.TYPE_2: 1.2,
}


class GlucosePredictor:
    """
    Heuristic 24-hour glucose forecaster.

    A forecast is a base curve (carb absorption, insulin action, drift
    toward a setpoint and small hourly noise, folded hour over hour)
    followed by independent passes for activity, circadian rhythm,
    lifestyle, a personal multiplier and final biological noise.

    Randomness comes from `rng`, any object with ``uniform(low, high)``.
    Pass a seeded ``numpy.random.Generator`` to make forecasts
    reproducible; two calls on an unseeded predictor differ.
    """

    def __init__(self, config: Optional[Dict] = None, rng: Optional[Any] = None):
        """Initialize the predictor."""
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.rng = rng if rng is not None else np.random.default_rng()

        # Base curve constants
        self.carb_effect_per_gram = self.config.get('carb_effect_per_gram', 5.0)
        self.insulin_effect_per_unit = self.config.get('insulin_effect_per_unit', 50.0)
        self.carb_effect_hours = self.config.get('carb_effect_hours', 4)
        self.insulin_effect_hours = self.config.get('insulin_effect_hours', 6)
        self.drift_setpoint = self.config.get('drift_setpoint', 100.0)
        self.drift_rate = self.config.get('drift_rate', 0.02)

        self.activity_impacts = dict(DEFAULT_ACTIVITY_IMPACTS)
        self.activity_impacts.update(self.config.get('activity_impacts', {}))

        self.base_confidence = self.config.get('base_confidence', 0.85)

    def predict(
        self,
        profile: UserProfile,
        current: Optional[CurrentState] = None,
        planned_actions: Optional[Mapping[str, Any]] = None,
        rng: Optional[Any] = None
    ) -> Forecast:
        """
        Produce a 24-point hourly glucose forecast.

        Args:
            profile: User profile (read only)
            current: Current glucose and planned actions; defaults to
                `CurrentState()` with the profile's lifestyle values
            planned_actions: Optional overrides for ``planned_carbs``,
                ``planned_insulin`` and ``activity``
            rng: Noise source for this call only

        Returns:
            Forecast: points, confidence, trend summary, risk zones and
                recommendations
        """
        if current is None:
            current = CurrentState(
                glucose=profile.current_bg,
                stress_level=profile.stress_level,
                sleep_hours=profile.sleep_hours
            )
        rng = rng if rng is not None else self.rng

        planned = dict(planned_actions or {})
        planned_carbs = planned.get('planned_carbs', current.planned_carbs)
        planned_insulin = planned.get('planned_insulin', current.planned_insulin)
        activity = planned.get('activity', current.activity) or profile.activity
        hour_of_day = current.hour_of_day
        if hour_of_day is None:
            hour_of_day = datetime.now().hour

        points = self._calculate_base_prediction(
            current.glucose, planned_carbs, planned_insulin, rng
        )
        points = self._apply_activity_adjustments(points, activity)
        points = self._apply_circadian_rhythm(points, hour_of_day)
        points = self._apply_lifestyle_factors(points, current.stress_level, current.sleep_hours)
        # Multiplies the already adjusted values, so earlier offsets compound
        points = self._apply_personalized_trends(points, profile)
        points = self._add_biological_variability(points, rng)

        trends = self.analyze_trends(points)
        risk_zones = self.identify_risk_zones(points)
        forecast = Forecast(
            points=points,
            confidence=self.calculate_confidence(profile),
            trends=trends,
            risk_zones=risk_zones,
            recommendations=self._generate_recommendations(trends, risk_zones)
        )

        self.logger.info(
            f"Forecast: peak {trends.peak.value:.0f} mg/dL at +{trends.peak.hour}h, "
            f"TIR {trends.time_in_range}%, {len(risk_zones)} risk hours"
        )
        return forecast

    def _calculate_base_prediction(
        self,
        current_glucose: float,
        planned_carbs: float,
        planned_insulin: float,
        rng: Any
    ) -> List[ForecastPoint]:
        points = []
        current = float(current_glucose)

        for hour in range(FORECAST_HOURS):
            # Carb absorption: bell shaped over the carb window
            carb_impact = 0.0
            if hour < self.carb_effect_hours:
                curve = math.sin(hour / self.carb_effect_hours * math.pi)
                carb_impact = planned_carbs * self.carb_effect_per_gram * curve * 0.25

            # Insulin action: flatter, later peak over the insulin window
            insulin_impact = 0.0
            if hour < self.insulin_effect_hours:
                curve = math.sin(hour / self.insulin_effect_hours * math.pi) ** 0.8
                insulin_impact = planned_insulin * self.insulin_effect_per_unit * curve * 0.3

            natural_drift = self._calculate_natural_drift(current, hour)
            variation = float(rng.uniform(-7.5, 7.5))

            current = current + carb_impact - insulin_impact + natural_drift + variation
            current = max(50.0, min(400.0, current))

            points.append(ForecastPoint(
                hour=hour,
                glucose=round_half_up(current),
                factors={
                    'carb_impact': round_half_up(carb_impact),
                    'insulin_impact': round_half_up(insulin_impact),
                    'natural_drift': round_half_up(natural_drift),
                    'variation': round_half_up(variation),
                }
            ))

        return points

    def _calculate_natural_drift(self, current_glucose: float, hour: int) -> float:
        drift = (self.drift_setpoint - current_glucose) * self.drift_rate

        if 4 <= hour <= 8:  # dawn phenomenon
            return drift + 8
        if 14 <= hour <= 16:  # afternoon dip
            return drift - 5
        return drift

    def _apply_activity_adjustments(
        self,
        points: List[ForecastPoint],
        activity: Optional[ActivityLevel]
    ) -> List[ForecastPoint]:
        level = activity.value if isinstance(activity, ActivityLevel) else activity
        effect, duration = self.activity_impacts.get(level, self.activity_impacts['sedentary'])

        adjusted = []
        for point in points:
            if duration > 0 and point.hour <= duration:
                activity_effect = effect * (1 - point.hour / duration)
                point = ForecastPoint(
                    hour=point.hour,
                    glucose=max(60.0, point.glucose + activity_effect),
                    factors={**point.factors, 'activity_effect': round_half_up(activity_effect)}
                )
            adjusted.append(point)
        return adjusted

    def _apply_circadian_rhythm(
        self,
        points: List[ForecastPoint],
        start_hour: int
    ) -> List[ForecastPoint]:
        adjusted = []
        for point in points:
            clock_hour = (start_hour + point.hour) % 24
            circadian_effect = 0.0

            if 4 <= clock_hour <= 8:
                circadian_effect = 8.0 + (clock_hour - 4) * 2
            elif 12 <= clock_hour <= 14:
                circadian_effect = 5.0
            elif 17 <= clock_hour <= 19:
                circadian_effect = 3.0
            elif 0 <= clock_hour <= 4:
                circadian_effect = -2.0

            adjusted.append(ForecastPoint(
                hour=point.hour,
                glucose=point.glucose + circadian_effect,
                factors={**point.factors, 'circadian_effect': round_half_up(circadian_effect)}
            ))
        return adjusted

    def _apply_lifestyle_factors(
        self,
        points: List[ForecastPoint],
        stress_level: float,
        sleep_hours: float
    ) -> List[ForecastPoint]:
        stress_effect = (stress_level - 5) * 2
        sleep_effect = (7 - sleep_hours) * 3

        return [
            ForecastPoint(
                hour=point.hour,
                glucose=point.glucose + stress_effect + sleep_effect,
                factors={
                    **point.factors,
                    'stress_effect': round_half_up(stress_effect),
                    'sleep_effect': round_half_up(sleep_effect),
                }
            )
            for point in points
        ]

    def _apply_personalized_trends(
        self,
        points: List[ForecastPoint],
        profile: UserProfile
    ) -> List[ForecastPoint]:
        multiplier = PERSONAL_MULTIPLIERS.get(profile.diabetes_type, 1.0)
        multiplier *= profile.weight_kg / 70.0

        return [
            ForecastPoint(
                hour=point.hour,
                glucose=round_half_up(point.glucose * multiplier),
                factors={
                    **point.factors,
                    'personal_adjustment': round_half_up(point.glucose * (multiplier - 1)),
                }
            )
            for point in points
        ]

    def _add_biological_variability(
        self,
        points: List[ForecastPoint],
        rng: Any
    ) -> List[ForecastPoint]:
        adjusted = []
        for point in points:
            noise = float(rng.uniform(-10.0, 10.0))
            adjusted.append(ForecastPoint(
                hour=point.hour,
                glucose=max(60.0, min(400.0, point.glucose + noise)),
                factors={**point.factors, 'biological_noise': round_half_up(noise)}
            ))
        return adjusted

    def analyze_trends(self, points: List[ForecastPoint]) -> TrendSummary:
        """Summarise a forecast: extremes, short/long-term direction, TIR."""
        values = [point.glucose for point in points]
        current = values[0]
        peak = max(values)
        nadir = min(values)

        short_term_change = values[2] - current
        long_term_change = values[12] - current

        return TrendSummary(
            current=current,
            peak=GlucoseExtreme(value=peak, hour=values.index(peak)),
            nadir=GlucoseExtreme(value=nadir, hour=values.index(nadir)),
            short_term_trend=_classify_change(short_term_change, 10),
            long_term_trend=_classify_change(long_term_change, 20),
            variability=int(round_half_up(calculate_variability(values))),
            time_in_range=int(round_half_up(calculate_tir(values, 70, 180))),
            time_below_range=calculate_time_below_range(values, 70),
            time_above_range=calculate_time_above_range(values, 180)
        )

    def identify_risk_zones(self, points: List[ForecastPoint]) -> List[RiskZone]:
        """Flag every hour outside the safe band, one zone per hour."""
        risk_zones = []
        for point in points:
            if point.glucose < 70:
                severity = 'severe' if point.glucose < 55 else 'moderate'
                risk_zones.append(RiskZone(point.hour, 'hypoglycemia', severity))
            elif point.glucose > 250:
                severity = 'severe' if point.glucose > 300 else 'moderate'
                risk_zones.append(RiskZone(point.hour, 'hyperglycemia', severity))
            elif point.glucose > 180:
                risk_zones.append(RiskZone(point.hour, 'elevated', 'mild'))
        return risk_zones

    def calculate_confidence(self, profile: UserProfile) -> float:
        """Confidence from data completeness and clinical risk factors."""
        confidence = self.base_confidence

        if profile.hba1c:
            confidence += 0.05
        if profile.weight_kg and profile.height_cm:
            confidence += 0.03
        if profile.activity:
            confidence += 0.02

        if profile.diabetes_type == DiabetesType.TYPE_1:
            confidence -= 0.05  # more volatile
        if profile.age > 65:
            confidence -= 0.03

        return round(max(0.5, min(0.95, confidence)), 2)

    def _generate_recommendations(
        self,
        trends: TrendSummary,
        risk_zones: List[RiskZone]
    ) -> List[Recommendation]:
        recommendations = []

        hypo_risks = [zone for zone in risk_zones if zone.type == 'hypoglycemia']
        if hypo_risks:
            recommendations.append(Recommendation(
                type='safety',
                priority='high',
                title='Hypoglycemia Risk Detected',
                message=f"Predicted low glucose at {hypo_risks[0].hour}:00. Have fast-acting carbs ready.",
                action='Consider reducing insulin dose or having a snack beforehand.'
            ))

        hyper_risks = [zone for zone in risk_zones if zone.type == 'hyperglycemia']
        if hyper_risks:
            recommendations.append(Recommendation(
                type='safety',
                priority='high',
                title='Hyperglycemia Risk Detected',
                message=f"Predicted high glucose at {hyper_risks[0].hour}:00.",
                action='Consider additional insulin or reducing carb intake.'
            ))

        if trends.time_in_range < 80:
            recommendations.append(Recommendation(
                type='optimization',
                priority='medium',
                title='Improve Time in Range',
                message=f"Only {trends.time_in_range}% of predictions are in target range.",
                action='Adjust meal timing or insulin doses for better control.'
            ))

        if trends.peak.value > 200:
            recommendations.append(Recommendation(
                type='lifestyle',
                priority='medium',
                title='Activity Suggestion',
                message='Light activity after meals could help reduce glucose peaks.',
                action='Consider a 15-minute walk after eating.'
            ))

        return recommendations

    def simulate_real_time_data(
        self,
        profile: UserProfile,
        now: Optional[datetime] = None,
        rng: Optional[Any] = None
    ) -> RealTimeReading:
        """
        Synthesize one new sensor reading for periodic refresh.

        Unrelated to `predict`: the reading comes from the profile's
        current glucose, time-of-day offsets, noise and a slow sinusoidal
        pseudo-trend, clamped to 70-250 mg/dL.
        """
        now = now or datetime.now()
        rng = rng if rng is not None else self.rng
        hour = now.hour

        glucose = float(profile.current_bg or 120)
        if 4 <= hour <= 8:
            glucose += 15
        elif 12 <= hour <= 14:
            glucose += 10
        elif 0 <= hour <= 4:
            glucose -= 5

        glucose += float(rng.uniform(-10.0, 10.0))

        trend = math.sin(hour * 0.2) * 8
        glucose += trend
        glucose = max(70.0, min(250.0, glucose))

        reading = RealTimeReading(
            glucose=int(round_half_up(glucose)),
            timestamp=now,
            trend=_classify_change(trend, 2),
            confidence=0.85
        )
        self.logger.debug(f"Simulated reading {reading.glucose} mg/dL ({reading.trend.value})")
        return reading


def _classify_change(change: float, threshold: float) -> TrendDirection:
    if change > threshold:
        return TrendDirection.RISING
    if change < -threshold:
        return TrendDirection.FALLING
    return TrendDirection.STABLE
