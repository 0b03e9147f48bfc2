# DiabeticTwin Assessment Report
# Console entry point: load a profile, run an assessment and print the results

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import numpy as np
import yaml

from ..sdk.data_types import Assessment, SafetyVerdict, UserProfile, WeeklyDietPlan
from ..sdk.digital_twin import DigitalTwin
from ..utils.config import ConfigManager

ENGINE_SECTIONS = ("predictor", "food_safety", "medication")

DISCLAIMER = (
    "Educational demo only. Not medical advice; follow your clinician's instructions."
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a DiabeticTwin assessment for a profile stored in YAML."
    )
    parser.add_argument("profile", help="Path to a YAML file describing the user profile.")
    parser.add_argument("--config", default=None, help="Optional YAML/JSON configuration file.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible output.")
    parser.add_argument("--carbs", type=float, default=0.0, help="Planned carbohydrates (g).")
    parser.add_argument("--hour", type=int, default=None, help="Clock hour the forecast starts at.")
    parser.add_argument("--food", default=None, help="Food to check, e.g. 'brown rice'.")
    parser.add_argument("--grams", type=float, default=100.0, help="Portion size for --food.")
    parser.add_argument("--diet-plan", action="store_true", help="Print a weekly diet plan.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def load_profile(path: str) -> UserProfile:
    """Reads a YAML profile; parse errors and non-mapping documents raise ValueError."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Could not parse profile '{path}': {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Profile '{path}' must be a mapping of field names to values")
    return UserProfile.from_dict(data)


def load_engine_config(path: str) -> Dict[str, Dict[str, Any]]:
    """Engine sections (``predictor``, ``food_safety``, ``medication``) from a config file."""
    manager = ConfigManager(path)
    return {section: manager.get_section(section) for section in ENGINE_SECTIONS}


def format_assessment(assessment: Assessment) -> str:
    profile = assessment.profile
    forecast = assessment.forecast
    trends = forecast.trends
    lines = [
        f"Profile: {profile.diabetes_type.value}, age {profile.age}, {profile.weight_kg:g} kg",
        f"Current glucose: {profile.current_bg} mg/dL",
        "",
    ]

    if assessment.dose is None:
        lines.append("Insulin: no dose rule for this diabetes type")
    else:
        dose = assessment.dose
        lines.append(
            f"Insulin: {dose.total_insulin:.1f} U (correction {dose.correction_dose:.1f}, "
            f"carbs {dose.carb_dose:.1f}, IOB -{dose.iob_adjustment:.1f}) - {dose.timing}"
        )
        for warning in dose.warnings:
            lines.append(f"  [{warning.level.value}] {warning.message}")

    lines += [
        "",
        f"Forecast confidence: {forecast.confidence:.2f}",
        f"Peak {trends.peak.value:.0f} mg/dL at +{trends.peak.hour}h, "
        f"nadir {trends.nadir.value:.0f} mg/dL at +{trends.nadir.hour}h",
        f"Trend: short term {trends.short_term_trend.value}, long term {trends.long_term_trend.value}",
        f"Time in range {trends.time_in_range}% (below {trends.time_below_range:.0f}%, "
        f"above {trends.time_above_range:.0f}%), variability {trends.variability} mg/dL",
        f"Diet score: {assessment.diet_score}/100",
        "",
        forecast.to_dataframe()[["glucose"]].T.to_string(),
    ]

    for recommendation in forecast.recommendations:
        lines.append(f"* {recommendation.title}: {recommendation.message} {recommendation.action}")
    for alert in assessment.alerts:
        lines.append(f"! [{alert.type.value}] {alert.title}: {alert.message} {alert.action}")
    return "\n".join(lines)


def format_verdict(verdict: SafetyVerdict) -> str:
    if verdict.net_carbs is None:
        return f"{verdict.food}: {verdict.message}"
    lines = [
        f"{verdict.food} ({verdict.quantity:g} g): {verdict.safety.value} "
        f"(confidence {verdict.confidence:.2f})",
        f"  net carbs {verdict.net_carbs:g} g, impact +{verdict.glucose_impact:.0f} mg/dL, "
        f"projected {verdict.projected_glucose:.0f} mg/dL",
        f"  {verdict.message}",
    ]
    lines += [f"  - {advice}" for advice in verdict.recommendations]
    return "\n".join(lines)


def format_diet_plan(plan: WeeklyDietPlan) -> str:
    return (
        f"Daily carb target: {plan.daily_carb_target} g\n"
        + plan.to_dataframe().to_string(index=False)
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s"
    )

    try:
        config = load_engine_config(args.config) if args.config else {}
        twin = DigitalTwin(config=config, rng=np.random.default_rng(args.seed))
        profile = load_profile(args.profile)
        assessment = twin.assess(profile, planned_carbs=args.carbs, hour_of_day=args.hour)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(DISCLAIMER)
    print()
    print(format_assessment(assessment))

    if args.food:
        print()
        print(format_verdict(twin.check_food(profile, args.food, args.grams)))

    if args.diet_plan:
        print()
        print(format_diet_plan(twin.weekly_diet_plan(profile)))

    return 0


if __name__ == "__main__":
    sys.exit(main())
