"""
DiabeticTwin SDK - Food Safety Analyzer
Glucose impact of a food portion and illustrative weekly meal plans
"""

import math
import logging
from typing import Any, Dict, List, Optional

import numpy as np

from .data_types import (
    ActivityLevel, DayPlan, MealSuggestion, SafetyLevel, SafetyVerdict,
    SnackSuggestion, UserProfile, WeeklyDietPlan
)
from ..data.food_database import (
    DEFAULT_FOOD_TABLE, FoodEntry, FoodSafetyFlag, FoodTable, load_food_table
)
from ..utils.metrics import round_half_up

WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']

# Share of the daily carb target per meal slot
MEAL_CARB_SHARES = {'breakfast': 0.25, 'lunch': 0.35, 'dinner': 0.30, 'snacks': 0.10}

DEFAULT_THRESHOLDS = {
    'hypoglycemia': 70,
    'target_max': 180,
    'hyperglycemia': 250
}

ACTIVITY_CARB_FACTORS = {
    'sedentary': 0.9,
    'light': 1.0,
    'moderate': 1.1,
    'active': 1.2,
    'athlete': 1.3,
}

ALTERNATIVES = {
    'grain': 'quinoa or barley',
    'fruit': 'berries or apple',
    'starch': 'sweet potato or legumes',
    'sweet': 'sugar-free options',
    'drink': 'water or unsweetened tea',
}

LEVEL_ADVICE = {
    SafetyLevel.DANGER: [
        "AVOID this food in current conditions",
        "Check glucose immediately if consumed",
        "Have fast-acting carbs ready if glucose drops",
    ],
    SafetyLevel.WARNING: [
        "Reduce quantity to stay in safe range",
        "Consume with protein/fat to slow absorption",
        "Monitor glucose 1-2 hours after eating",
    ],
    SafetyLevel.MODERATE: [
        "Consider pairing with lean protein",
        "Drink plenty of water",
        "Light activity after eating may help",
    ],
    SafetyLevel.SAFE: [
        "Excellent choice for stable glucose",
        "Continue with your regular monitoring",
        "Perfect for maintaining healthy levels",
    ],
}


class FoodSafetyAnalyzer:
    """
    Food safety checks against a static nutrition table.

    The analyzer holds no user state: the food table is fixed at
    construction and the profile is passed to each call that needs it.
    """

    def __init__(
        self,
        food_table: Optional[FoodTable] = None,
        config: Optional[Dict] = None,
        rng: Optional[Any] = None
    ):
        """Initialize the analyzer.

        Args:
            food_table: Reference table; defaults to the built-in table, or
                the YAML file named by ``food_table_path`` in `config`
            config: Optional ``food_safety`` configuration section
            rng: Random source for meal planning (``integers(low, high)``)
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.rng = rng if rng is not None else np.random.default_rng()

        if food_table is None and self.config.get('food_table_path'):
            food_table = load_food_table(self.config['food_table_path'])
        self.food_table = food_table if food_table is not None else DEFAULT_FOOD_TABLE

        self.thresholds = {**DEFAULT_THRESHOLDS, **self.config.get('thresholds', {})}
        self.high_carb_threshold = self.config.get('high_carb_threshold', 30)
        self.max_snack_draws = self.config.get('max_snack_draws', 200)

    def analyze(
        self,
        food_name: str,
        quantity_grams: float,
        current_glucose: float,
        insulin_on_board: float = 0.0
    ) -> SafetyVerdict:
        """
        Project the glucose impact of a food portion and classify its safety.

        Args:
            food_name: Free-text food name
            quantity_grams: Portion size in grams
            current_glucose: Current glucose (mg/dL)
            insulin_on_board: Active insulin, subtracted 1:1 from the
                projection

        Returns:
            SafetyVerdict: ``unknown`` with zero confidence when the food is
                not in the table, otherwise the full verdict
        """
        food = self.food_table.find(food_name)
        if food is None:
            self.logger.info(f"Food '{food_name}' not found in table")
            return SafetyVerdict(
                food=food_name,
                quantity=quantity_grams,
                safety=SafetyLevel.UNKNOWN,
                confidence=0.0,
                message="Food not found in database. Please consult your nutritionist."
            )

        net_carbs = self.calculate_net_carbs(food, quantity_grams)
        glycemic_load = net_carbs * food.glycemic_index / 100
        glucose_impact = self.calculate_glucose_impact(glycemic_load)
        projected_glucose = current_glucose + glucose_impact - insulin_on_board

        level, confidence, message = self._determine_safety_level(projected_glucose, food, net_carbs)
        recommendations = self._generate_recommendations(level, food, quantity_grams, net_carbs)

        self.logger.info(
            f"Food check '{food.name}' {quantity_grams}g: net carbs {net_carbs:.1f}g, "
            f"projected {projected_glucose:.0f} mg/dL, {level.value}"
        )

        return SafetyVerdict(
            food=food_name,
            quantity=quantity_grams,
            safety=level,
            confidence=confidence,
            message=message,
            net_carbs=round_half_up(net_carbs, 1),
            glycemic_load=round_half_up(glycemic_load, 1),
            glucose_impact=round_half_up(glucose_impact),
            projected_glucose=round_half_up(projected_glucose),
            recommendations=recommendations,
            category=food.category,
            glycemic_index=food.glycemic_index
        )

    @staticmethod
    def calculate_net_carbs(food: FoodEntry, quantity_grams: float) -> float:
        """Net carbs (total minus fiber) in grams for the given portion."""
        return food.net_carbs_per_100g * quantity_grams / 100

    @staticmethod
    def calculate_glucose_impact(glycemic_load: float) -> float:
        """Glucose rise (mg/dL) from a glycemic load, tiered by load size."""
        if glycemic_load < 10:
            impact = glycemic_load * 1.5
        elif glycemic_load < 20:
            impact = glycemic_load * 2.0
        else:
            impact = glycemic_load * 2.5
        return max(0.0, impact)

    def _determine_safety_level(self, projected_glucose: float, food: FoodEntry, net_carbs: float):
        # First match wins
        if projected_glucose < self.thresholds['hypoglycemia']:
            return (SafetyLevel.DANGER, 0.95,
                    "DANGER: This may cause hypoglycemia! Avoid or pair with slower carbs.")
        if projected_glucose > self.thresholds['hyperglycemia']:
            return (SafetyLevel.DANGER, 0.90,
                    "HIGH RISK: This will likely cause dangerous hyperglycemia!")
        if projected_glucose > self.thresholds['target_max']:
            return (SafetyLevel.WARNING, 0.85,
                    "CAUTION: This may raise glucose above target range.")
        if food.safety_flag is FoodSafetyFlag.UNSAFE:
            return (SafetyLevel.WARNING, 0.80,
                    "LIMITED: High GI food. Consume in very small quantities.")
        if net_carbs > self.high_carb_threshold:
            return (SafetyLevel.MODERATE, 0.75,
                    "MODERATE: High carb content. Monitor your glucose carefully.")
        return (SafetyLevel.SAFE, 0.90,
                "SAFE: This food fits well within your target range.")

    def _generate_recommendations(
        self,
        level: SafetyLevel,
        food: FoodEntry,
        quantity_grams: float,
        net_carbs: float
    ) -> List[str]:
        recommendations = list(LEVEL_ADVICE[level])

        if net_carbs > 15 and level is not SafetyLevel.SAFE:
            safe_quantity = math.floor(15 / net_carbs * quantity_grams)
            recommendations.append(
                f"Try {safe_quantity}g instead of {quantity_grams:g}g for better control"
            )

        if food.glycemic_index > 55:
            alternative = ALTERNATIVES.get(food.category, "lower GI options")
            recommendations.append(f"Alternative: Try {alternative}")

        return recommendations

    def calculate_daily_carb_target(self, profile: UserProfile) -> int:
        """Daily carb budget (g): 45 g per main meal scaled by weight and activity."""
        weight_factor = profile.weight_kg / 70.0
        activity = profile.activity.value if isinstance(profile.activity, ActivityLevel) else profile.activity
        activity_factor = ACTIVITY_CARB_FACTORS.get(activity, 1.0)
        return int(round_half_up(45 * weight_factor * activity_factor * 3))

    def generate_weekly_diet_plan(
        self,
        profile: UserProfile,
        rng: Optional[Any] = None
    ) -> WeeklyDietPlan:
        """
        Build seven independently sampled day plans.

        Each main meal draws a protein, a carb source and two vegetables
        uniformly from the low-GI safe foods; snacks are filled greedily at
        random up to a tenth of the daily carb target. There is no
        guarantee of variety across days.

        Raises:
            ValueError: If the table has no candidates for a meal slot.
        """
        rng = rng if rng is not None else self.rng
        daily_carbs = self.calculate_daily_carb_target(profile)

        days = {}
        for day in WEEKDAYS:
            days[day] = DayPlan(
                breakfast=self._generate_meal(daily_carbs * MEAL_CARB_SHARES['breakfast'], rng),
                lunch=self._generate_meal(daily_carbs * MEAL_CARB_SHARES['lunch'], rng),
                dinner=self._generate_meal(daily_carbs * MEAL_CARB_SHARES['dinner'], rng),
                snacks=self._generate_snacks(daily_carbs * MEAL_CARB_SHARES['snacks'], rng)
            )

        self.logger.info(f"Generated weekly diet plan with {daily_carbs}g daily carb target")
        return WeeklyDietPlan(daily_carb_target=daily_carbs, days=days)

    def _generate_meal(self, carb_target: float, rng: Any) -> MealSuggestion:
        low_gi_foods = self.food_table.filter(max_gi=55, safety_flag=FoodSafetyFlag.SAFE)

        proteins = [f for f in low_gi_foods if f.category == 'protein']
        carb_sources = [f for f in low_gi_foods if 5 < f.carbs_per_100g <= 25]
        vegetables = [f for f in low_gi_foods if f.category == 'vegetable']
        for slot, pool in (('protein', proteins), ('carb source', carb_sources), ('vegetable', vegetables)):
            if not pool:
                raise ValueError(f"Food table has no low-GI {slot} candidates for meal planning")

        protein = _pick(proteins, rng)
        carb_source = _pick(carb_sources, rng)
        vegetable1 = _pick(vegetables, rng)
        vegetable2 = _pick(vegetables, rng)

        estimated = sum(f.carbs_per_100g for f in (protein, carb_source, vegetable1, vegetable2))
        return MealSuggestion(
            protein=protein.name,
            carb_source=carb_source.name,
            vegetables=[vegetable1.name, vegetable2.name],
            estimated_carbs=round_half_up(estimated, 2),
            carb_target=round_half_up(carb_target, 1)
        )

    def _generate_snacks(self, carb_target: float, rng: Any) -> SnackSuggestion:
        snack_foods = self.food_table.filter(max_gi=40, max_carbs=15)

        snacks = []
        remaining = carb_target
        draws = 0
        while remaining > 5 and snack_foods and draws < self.max_snack_draws:
            # Stop once nothing left in the pool could lower the budget
            if not any(0 < f.carbs_per_100g <= remaining for f in snack_foods):
                break
            draws += 1
            snack = _pick(snack_foods, rng)
            if snack.carbs_per_100g <= remaining:
                snacks.append(snack.name)
                remaining -= snack.carbs_per_100g

        return SnackSuggestion(
            items=snacks,
            estimated_carbs=round_half_up(carb_target - remaining, 1),
            carb_target=round_half_up(carb_target, 1)
        )


def _pick(pool: List[FoodEntry], rng: Any) -> FoodEntry:
    return pool[int(rng.integers(0, len(pool)))]
