"""Energy model: daily calorie target from a profile.

Uses the Mifflin-St Jeor equation for basal metabolic rate, scales it by
an activity factor to get total daily energy expenditure, and applies a
fixed goal adjustment.
"""

import math

from calorie_tracker.domain.profile import (
    ActivityLevel,
    EnergyBreakdown,
    Gender,
    Goal,
    Profile,
)

ACTIVITY_FACTORS: dict[ActivityLevel, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.VERY_ACTIVE: 1.9,
}

GOAL_ADJUSTMENTS: dict[Goal, int] = {
    Goal.LOSE: -500,
    Goal.MAINTAIN: 0,
    Goal.GAIN: 500,
}

_MALE_OFFSET = 5
_FEMALE_OFFSET = -161


def compute_bmr(profile: Profile) -> float:
    """Return basal metabolic rate in kcal/day."""
    offset = _MALE_OFFSET if profile.gender is Gender.MALE else _FEMALE_OFFSET
    return 10 * profile.weight + 6.25 * profile.height - 5 * profile.age + offset


def compute_tdee(profile: Profile) -> float:
    """Return total daily energy expenditure in kcal/day."""
    return compute_bmr(profile) * ACTIVITY_FACTORS[profile.activity_level]


def compute_daily_target(profile: Profile) -> int:
    """Return the rounded daily calorie target for the profile's goal."""
    return compute_energy(profile).target


def compute_energy(profile: Profile) -> EnergyBreakdown:
    """Return BMR, TDEE and target together."""
    bmr = compute_bmr(profile)
    tdee = bmr * ACTIVITY_FACTORS[profile.activity_level]
    target = _round_half_up(tdee) + GOAL_ADJUSTMENTS[profile.goal]
    return EnergyBreakdown(bmr=bmr, tdee=tdee, target=target)


def _round_half_up(value: float) -> int:
    # The goal adjustment is an integer, so rounding before adding it
    # equals rounding the adjusted sum.
    return math.floor(value + 0.5)
