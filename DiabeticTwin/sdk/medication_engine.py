"""
DiabeticTwin SDK - Medication Engine
Insulin dose estimates and glucose-threshold health alerts
"""

from typing import Any, Dict, List, Mapping, Optional, Union
import logging

from .data_types import (
    ActivityLevel, AlertType, DiabetesType, DoseRecommendation, DoseWarning,
    HealthAlert, SafetyLevel, TrendFlags, UserProfile
)
from ..utils.metrics import round_half_up

DEFAULT_INSULIN_RULES = {
    'type1': {
        'correction_factor': 50,  # 1 unit lowers glucose by 50 mg/dL
        'carb_ratio': 15,         # 1 unit covers 15 g carbs
        'target_glucose': 100
    },
    'type2': {
        'correction_factor': 30,
        'carb_ratio': 10,
        'target_glucose': 120
    }
}

DEFAULT_MAX_SINGLE_DOSE = {'type1': 10.0, 'default': 6.0}

DEFAULT_SENSITIVITY_FACTORS = {
    'age': {
        '18-30': 1.0,
        '31-50': 0.9,
        '51-70': 0.8,
        '71+': 0.7
    },
    'activity': {
        'sedentary': 1.0,
        'light': 0.9,
        'moderate': 0.8,
        'active': 0.7,
        'athlete': 0.6
    },
    'reference_weight_kg': 70.0
}

INSULIN_TIMING = {
    DiabetesType.TYPE_1: "Take 15-20 minutes before eating",
    DiabetesType.TYPE_2: "Take with your meal or immediately after",
    DiabetesType.PREDIABETES: "Consult your doctor for timing instructions",
}


class MedicationEngine:
    """
    Rule-based insulin dose calculator.

    Doses combine a correction term, a carb-coverage term and a
    conservative insulin-on-board reduction, all scaled by a
    sensitivity factor derived from age, activity and weight, then
    capped at a per-type maximum single dose.
    """

    def __init__(self, config: Optional[Dict] = None):
        """Initialize the medication engine."""
        self.config = config or {}
        self.logger = logging.getLogger(__name__)

        # Partial sections are merged over the defaults, key by key
        insulin_rules = {**DEFAULT_INSULIN_RULES, **self.config.get('insulin_rules', {})}
        self.insulin_rules = {
            diabetes_type: {**DEFAULT_INSULIN_RULES.get(diabetes_type, {}), **rules}
            for diabetes_type, rules in insulin_rules.items()
        }
        self.max_single_dose = {**DEFAULT_MAX_SINGLE_DOSE, **self.config.get('max_single_dose', {})}

        sensitivity = self.config.get('sensitivity_factors', {})
        self.sensitivity_factors = {
            **DEFAULT_SENSITIVITY_FACTORS,
            **sensitivity,
            'age': {**DEFAULT_SENSITIVITY_FACTORS['age'], **sensitivity.get('age', {})},
            'activity': {**DEFAULT_SENSITIVITY_FACTORS['activity'], **sensitivity.get('activity', {})},
        }

    def calculate_insulin_dose(
        self,
        profile: UserProfile,
        current_glucose: float,
        planned_carbs: float,
        insulin_on_board: float = 0.0
    ) -> Optional[DoseRecommendation]:
        """
        Estimate an insulin dose.

        Args:
            profile: User profile
            current_glucose: Current glucose (mg/dL)
            planned_carbs: Carbohydrates about to be eaten (grams)
            insulin_on_board: Active insulin (units)

        Returns:
            Optional[DoseRecommendation]: None when no dose rule is
                configured for the profile's diabetes type (e.g.
                prediabetes); that means "no recommendation", not an error
        """
        rules = self.insulin_rules.get(profile.diabetes_type.value)
        if not rules:
            self.logger.info(
                f"No insulin rule configured for {profile.diabetes_type.value}; "
                f"no dose recommendation"
            )
            return None

        sensitivity = self.calculate_sensitivity_factor(profile)
        adjusted_correction_factor = rules['correction_factor'] * sensitivity
        adjusted_carb_ratio = rules['carb_ratio'] * sensitivity

        correction_dose = 0.0
        if current_glucose > rules['target_glucose']:
            correction_dose = max(
                0.0, (current_glucose - rules['target_glucose']) / adjusted_correction_factor
            )

        carb_dose = planned_carbs / adjusted_carb_ratio

        # Conservative: only half of the active insulin is credited
        iob_adjustment = max(0.0, insulin_on_board * 0.5)

        total_insulin = max(0.0, correction_dose + carb_dose - iob_adjustment)
        total_insulin = self.apply_safety_limits(total_insulin, profile)

        recommendation = DoseRecommendation(
            correction_dose=round_half_up(correction_dose, 1),
            carb_dose=round_half_up(carb_dose, 1),
            iob_adjustment=round_half_up(iob_adjustment, 1),
            total_insulin=round_half_up(total_insulin, 1),
            timing=self.get_insulin_timing(profile),
            warnings=self.generate_warnings(total_insulin, current_glucose, planned_carbs),
            sensitivity_factor=round_half_up(sensitivity, 2)
        )

        self.logger.info(
            f"Insulin dose: total {recommendation.total_insulin:.1f}U "
            f"(correction {recommendation.correction_dose:.1f}U, carbs {recommendation.carb_dose:.1f}U, "
            f"IOB -{recommendation.iob_adjustment:.1f}U), {len(recommendation.warnings)} warnings"
        )
        return recommendation

    def calculate_sensitivity_factor(self, profile: UserProfile) -> float:
        """Age x activity x weight sensitivity multiplier, clamped to [0.3, 2.0]."""
        age_factors = self.sensitivity_factors['age']
        age = profile.age
        # Under-18s fall through to the 31-50 bracket
        if 18 <= age <= 30:
            sensitivity = age_factors['18-30']
        elif age <= 50:
            sensitivity = age_factors['31-50']
        elif age <= 70:
            sensitivity = age_factors['51-70']
        else:
            sensitivity = age_factors['71+']

        activity = profile.activity.value if isinstance(profile.activity, ActivityLevel) else profile.activity
        sensitivity *= self.sensitivity_factors['activity'].get(activity, 1.0)

        reference_weight = self.sensitivity_factors.get('reference_weight_kg', 70.0)
        sensitivity *= profile.weight_kg / reference_weight

        return max(0.3, min(2.0, sensitivity))

    def apply_safety_limits(self, insulin_dose: float, profile: UserProfile) -> float:
        """Cap a dose at the maximum single dose for the diabetes type."""
        max_dose = self.max_single_dose.get(
            profile.diabetes_type.value, self.max_single_dose['default']
        )
        return min(max_dose, insulin_dose)

    @staticmethod
    def get_insulin_timing(profile: UserProfile) -> str:
        return INSULIN_TIMING.get(profile.diabetes_type, "Take as prescribed by your doctor")

    @staticmethod
    def generate_warnings(
        insulin_dose: float,
        current_glucose: float,
        planned_carbs: float
    ) -> List[DoseWarning]:
        """Independent threshold checks; every applicable warning is returned."""
        warnings = []

        if current_glucose < 80 and insulin_dose > 0:
            warnings.append(DoseWarning(
                level=SafetyLevel.DANGER,
                message="HYPOGLYCEMIA RISK: Glucose is low. Consider reducing insulin or having carbs first."
            ))

        if insulin_dose > 8:
            warnings.append(DoseWarning(
                level=SafetyLevel.WARNING,
                message="HIGH DOSE: This is a significant insulin dose. Double-check your calculations."
            ))

        if planned_carbs > 75:
            warnings.append(DoseWarning(
                level=SafetyLevel.WARNING,
                message="HIGH CARB MEAL: Consider spreading carbs throughout the day."
            ))

        if current_glucose > 300:
            warnings.append(DoseWarning(
                level=SafetyLevel.DANGER,
                message="EMERGENCY: Very high glucose. Contact your healthcare provider immediately."
            ))

        return warnings

    def generate_health_alerts(
        self,
        profile: UserProfile,
        current_glucose: float,
        trends: Optional[Union[TrendFlags, Mapping[str, Any]]] = None
    ) -> List[HealthAlert]:
        """
        Threshold alerts on the current glucose value.

        Args:
            profile: User profile
            current_glucose: Current glucose (mg/dL)
            trends: Rate-of-change flags computed by the caller. This
                engine never derives them; without flags no trend alert
                is raised.

        Returns:
            List[HealthAlert]: Alerts in band order, trend alerts last
        """
        alerts = []

        if current_glucose < 70:
            alerts.append(HealthAlert(
                type=AlertType.EMERGENCY,
                title="Hypoglycemia Alert",
                message="Your glucose is dangerously low. Consume 15g fast-acting carbs immediately.",
                action="Take glucose tablets, juice, or regular soda. Recheck in 15 minutes.",
                priority=1
            ))
        elif current_glucose < 90:
            alerts.append(HealthAlert(
                type=AlertType.WARNING,
                title="Low Glucose Warning",
                message="Your glucose is approaching low levels. Have a small snack if active.",
                action="Monitor closely and have carbs available.",
                priority=2
            ))

        if current_glucose > 250:
            ketone_hint = " Check for ketones." if profile.diabetes_type == DiabetesType.TYPE_1 else ""
            alerts.append(HealthAlert(
                type=AlertType.EMERGENCY,
                title="Hyperglycemia Alert",
                message=f"Your glucose is very high.{ketone_hint}",
                action="Drink water, take correction dose, contact doctor if persistent.",
                priority=1
            ))
        elif current_glucose > 180:
            alerts.append(HealthAlert(
                type=AlertType.WARNING,
                title="Elevated Glucose",
                message="Your glucose is above target range.",
                action="Consider light activity and avoid high-carb foods.",
                priority=2
            ))

        flags = _coerce_trend_flags(trends)
        if flags.is_rising_rapidly:
            alerts.append(HealthAlert(
                type=AlertType.WARNING,
                title="Rapid Rise Detected",
                message="Your glucose is rising quickly.",
                action="Consider taking rapid-acting insulin if prescribed.",
                priority=2
            ))

        if flags.is_falling_rapidly:
            alerts.append(HealthAlert(
                type=AlertType.WARNING,
                title="Rapid Drop Detected",
                message="Your glucose is falling quickly.",
                action="Have fast-acting carbs ready and monitor closely.",
                priority=2
            ))

        if alerts:
            self.logger.warning(
                f"{len(alerts)} health alert(s) at {current_glucose:.0f} mg/dL: "
                f"{', '.join(alert.title for alert in alerts)}"
            )
        return alerts


def _coerce_trend_flags(trends: Optional[Union[TrendFlags, Mapping[str, Any]]]) -> TrendFlags:
    if trends is None:
        return TrendFlags()
    if isinstance(trends, TrendFlags):
        return trends
    return TrendFlags(
        is_rising_rapidly=bool(trends.get('is_rising_rapidly', trends.get('isRisingRapidly', False))),
        is_falling_rapidly=bool(trends.get('is_falling_rapidly', trends.get('isFallingRapidly', False)))
    )
