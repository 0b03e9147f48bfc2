#!/usr/bin/env python3
"""
Simple Assessment for DiabeticTwin
Runs the three engines for one profile and prints the highlights
"""

import sys
import os
import numpy as np

# Add the package to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from DiabeticTwin import DigitalTwin, UserProfile, DiabetesType, ActivityLevel


def simple_assessment(seed: int = 7):
    """Assess a sample type 2 profile and check a couple of foods."""
    print("DIABETICTWIN SAMPLE ASSESSMENT")
    print("=" * 50)

    twin = DigitalTwin(rng=np.random.default_rng(seed))
    profile = UserProfile(
        age=52,
        weight_kg=84,
        height_cm=172,
        diabetes_type=DiabetesType.TYPE_2,
        activity=ActivityLevel.LIGHT,
        current_bg=168,
    )

    assessment = twin.assess(profile, planned_carbs=45, hour_of_day=8)
    dose = assessment.dose
    trends = assessment.forecast.trends

    print(f"Suggested insulin: {dose.total_insulin:.1f} U ({dose.timing})")
    print(f"Forecast peak: {trends.peak.value:.0f} mg/dL at +{trends.peak.hour}h")
    print(f"Time in range: {trends.time_in_range}%  Diet score: {assessment.diet_score}/100")

    for food, grams in (("chicken breast", 150), ("white rice", 180), ("pizza", 120)):
        verdict = twin.check_food(profile, food, grams)
        print(f"  {food:<15} {grams:>4}g -> {verdict.safety.value}")

    return assessment


if __name__ == "__main__":
    simple_assessment()
