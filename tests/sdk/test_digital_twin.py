# Tests for DiabeticTwin.sdk.digital_twin

import dataclasses

import pytest
import numpy as np

from DiabeticTwin.sdk.digital_twin import DigitalTwin
from DiabeticTwin.sdk.data_types import (
    ActivityLevel, DiabetesType, SafetyLevel, TrendFlags, UserProfile
)

@pytest.fixture
def twin():
    return DigitalTwin(rng=np.random.default_rng(2024))

@pytest.fixture
def type1_profile():
    return UserProfile(age=34, weight_kg=72, height_cm=178, hba1c=7.2,
                       diabetes_type=DiabetesType.TYPE_1,
                       activity=ActivityLevel.MODERATE, current_bg=200)

@pytest.mark.parametrize("changes, message", [
    ({'current_bg': 10}, "valid blood glucose"),
    ({'current_bg': 650}, "valid blood glucose"),
    ({'weight_kg': 15}, "valid weight"),
    ({'weight_kg': 400}, "valid weight"),
])
def test_validate_profile_rejects_implausible_inputs(twin, type1_profile, changes, message):
    profile = dataclasses.replace(type1_profile, **changes)
    with pytest.raises(ValueError, match=message):
        twin.assess(profile)

def test_validate_profile_accepts_bounds(type1_profile):
    DigitalTwin.validate_profile(dataclasses.replace(type1_profile, current_bg=20, weight_kg=300))
    DigitalTwin.validate_profile(dataclasses.replace(type1_profile, current_bg=600, weight_kg=20))

def test_assess_combines_engines(twin, type1_profile):
    assessment = twin.assess(type1_profile, planned_carbs=45, hour_of_day=12)
    assert assessment.profile is type1_profile
    assert assessment.dose is not None
    assert assessment.dose.total_insulin > 0
    assert len(assessment.forecast.points) == 24
    assert all(60 <= v <= 400 for v in assessment.forecast.glucose_values)
    assert [a.title for a in assessment.alerts] == ["Elevated Glucose"]
    assert 60 <= assessment.diet_score <= 100
    print("test_assess_combines_engines: PASSED")

def test_assess_feeds_dose_into_forecast(twin, type1_profile):
    assessment = twin.assess(type1_profile, planned_carbs=45, hour_of_day=12)
    expected_units = assessment.dose.total_insulin
    # Insulin curve peaks at hour 3: units * 50 * 0.3
    assert assessment.forecast.points[3].factors['insulin_impact'] == pytest.approx(
        round(expected_units * 15), abs=1
    )

def test_assess_without_dose_rule(twin):
    profile = UserProfile(age=50, weight_kg=80, diabetes_type=DiabetesType.PREDIABETES,
                          current_bg=110)
    assessment = twin.assess(profile, planned_carbs=30, hour_of_day=9)
    assert assessment.dose is None
    assert all(p.factors['insulin_impact'] == 0 for p in assessment.forecast.points)
    assert assessment.alerts == []

def test_assess_passes_trend_flags(twin, type1_profile):
    profile = dataclasses.replace(type1_profile, current_bg=120)
    assessment = twin.assess(profile, trend_flags=TrendFlags(is_falling_rapidly=True), hour_of_day=8)
    assert [a.title for a in assessment.alerts] == ["Rapid Drop Detected"]

def test_refresh_returns_updated_copy(twin, type1_profile):
    reading, assessment = twin.refresh(type1_profile)
    assert 70 <= reading.glucose <= 250
    assert assessment.profile.current_bg == reading.glucose
    assert assessment.profile.age == type1_profile.age
    assert type1_profile.current_bg == 200

def test_check_food_defaults_to_profile_glucose(twin, type1_profile):
    verdict = twin.check_food(type1_profile, "chicken breast", 150)
    assert verdict.projected_glucose == 200
    assert verdict.safety == SafetyLevel.WARNING  # already above target

    calmer = twin.check_food(type1_profile, "chicken breast", 150, current_glucose=110)
    assert calmer.safety == SafetyLevel.SAFE

def test_weekly_diet_plan(twin, type1_profile):
    plan = twin.weekly_diet_plan(type1_profile)
    assert len(plan.days) == 7
    assert plan.daily_carb_target == twin.food_analyzer.calculate_daily_carb_target(type1_profile)

@pytest.mark.parametrize("tir, score", [
    (85, 100),
    (100, 85),
    (70, 85),
    (45, 60),
    (0, 60),
])
def test_calculate_diet_score(tir, score):
    assert DigitalTwin.calculate_diet_score(tir) == score

def test_config_sections_reach_engines(type1_profile):
    twin = DigitalTwin(
        config={
            'medication': {'max_single_dose': {'type1': 1.5, 'default': 1.0}},
            'food_safety': {'thresholds': {'hypoglycemia': 70, 'target_max': 250, 'hyperglycemia': 300}},
            'predictor': {'base_confidence': 0.6},
        },
        rng=np.random.default_rng(5)
    )
    assessment = twin.assess(type1_profile, planned_carbs=90, hour_of_day=12)
    assert assessment.dose.total_insulin == 1.5
    assert assessment.forecast.confidence == 0.65  # 0.6 + 0.1 - 0.05
    assert twin.check_food(type1_profile, "chicken breast", 100).safety == SafetyLevel.SAFE

def test_same_seed_same_assessment(type1_profile):
    first = DigitalTwin(rng=np.random.default_rng(9)).assess(type1_profile, hour_of_day=7)
    second = DigitalTwin(rng=np.random.default_rng(9)).assess(type1_profile, hour_of_day=7)
    assert first.forecast.glucose_values == second.forecast.glucose_values
