"""Natural-language insights derived from weight statistics.

Insights only classify numbers already present in a Statistics object; they
never go back to the raw entries. Rate bands for bulking follow the ranges
commonly recommended for natural lifters (Garthe et al., Helms, McDonald),
expressed in kg per week.
"""

from __future__ import annotations

from typing import Optional

from bodytrack.numeric import round_int
from bodytrack.tracking.models import GoalType, Statistics, WeightEntry

# Consistency thresholds (percent of tracked days with an entry)
HIGH_CONSISTENCY = 90.0
LOW_CONSISTENCY = 50.0

# Fraction of flagged entries that starts to distort averages
MAX_CHEAT_MEAL_SHARE = 0.20
MAX_RETENTION_SHARE = 0.15

# Gap between short and long moving averages worth mentioning (kg)
TREND_DIVERGENCE_KG = 1.0

# Days-to-goal thresholds
NEAR_GOAL_DAYS = 30
MID_GOAL_DAYS = 90

# Estimated share of lean mass in a bulk's weight gain, by weekly rate.
# Upper bound of each band (inclusive) -> muscle percentage.
MUSCLE_SHARE_BANDS = (
    (0.15, 85),
    (0.25, 72),
    (0.35, 67),
    (0.50, 62),
)
MUSCLE_SHARE_FAST = 55
MUSCLE_SHARE_MIN_RATE = 0.1
MUSCLE_SHARE_DEFAULT = 50  # below the ultra-clean band


def bulk_pace_insight(weekly_change: float, monthly_change: float) -> str:
    """Classify a bulking rate (kg/week) into exactly one band."""
    if 0.1 <= weekly_change <= 0.15:
        return (
            "PERFECT - ultra-clean bulk (0.1-0.15 kg/week). Maximum muscle gain "
            "with minimal fat. Ideal for advanced lifters."
        )
    if 0.15 < weekly_change <= 0.25:
        return (
            "OPTIMAL - clean bulk (0.15-0.25 kg/week). Roughly 70-75% muscle. "
            "Ideal for intermediate and advanced lifters."
        )
    if 0.25 < weekly_change <= 0.35:
        return (
            "VERY GOOD - moderate bulk (0.25-0.35 kg/week). Roughly 65-70% muscle. "
            "Suitable for beginners in their first year."
        )
    if 0.35 < weekly_change <= 0.5:
        return (
            "GOOD - aggressive bulk (0.35-0.5 kg/week). Roughly 60-65% muscle. "
            "Only for complete beginners or a deliberately fast bulk."
        )
    if 0.5 < weekly_change <= 0.75:
        return (
            f"FAST - gaining {weekly_change:.2f} kg/week. Moderate risk of fat gain. "
            "Consider reducing calories slightly."
        )
    if weekly_change > 0.75:
        return (
            f"TOO FAST - gaining {weekly_change:.2f} kg/week "
            f"(>{monthly_change:.1f} kg/month). High share of fat. Reduce calories now."
        )
    if 0.05 <= weekly_change < 0.1:
        return (
            "Slow gain (0.05-0.1 kg/week). Very conservative but functional. "
            "Increase calories if you want more mass."
        )
    if 0 <= weekly_change < 0.05:
        return (
            "Minimal gain (<0.05 kg/week, about 0.2 kg/month). "
            "Increase calories for better bulking results."
        )
    return (
        f"You are LOSING weight on a bulk ({weekly_change:.2f} kg/week). "
        "Increase calories now."
    )


def cut_pace_insight(weekly_change: float) -> str:
    """Classify a cutting rate (kg/week) into exactly one band."""
    if -1 <= weekly_change <= -0.5:
        return "IDEAL fat-loss pace for preserving muscle (-0.5 to -1 kg/week). Perfect!"
    if -1.5 <= weekly_change < -1:
        return (
            "Fast loss (-1 to -1.5 kg/week). Risk of losing muscle. "
            "Consider increasing calories."
        )
    if weekly_change < -1.5:
        return (
            f"VERY fast loss (>{abs(weekly_change):.1f} kg/week). "
            "High risk to muscle. Increase calories now."
        )
    if -0.5 < weekly_change <= -0.25:
        return "Moderate loss (-0.25 to -0.5 kg/week). Safe but slow pace."
    if -0.25 < weekly_change < 0:
        return "Very slow loss (<0.25 kg/week). Consider reducing calories slightly."
    return "You are not losing weight. Reduce calories or increase activity."


def estimate_muscle_share(weekly_change: float) -> int:
    """Estimated percentage of a bulk's weight gain that is lean mass."""
    if weekly_change < MUSCLE_SHARE_MIN_RATE:
        return MUSCLE_SHARE_DEFAULT
    for upper, share in MUSCLE_SHARE_BANDS:
        if weekly_change <= upper:
            return share
    return MUSCLE_SHARE_FAST


def get_smart_insights(
    entries: list[WeightEntry],
    statistics: Statistics,
    goal_type: GoalType,
) -> list[str]:
    """Generate ordered insight strings from precomputed statistics.

    Args:
        entries: The weight history (not re-analysed; kept for callers that
            render insights next to the entries)
        statistics: Output of calculate_statistics
        goal_type: The user's current goal

    Returns:
        Insight sentences, most general first
    """
    insights: list[str] = []

    if statistics.consistency_score >= HIGH_CONSISTENCY:
        insights.append("Excellent consistency! You are logging your weight almost every day.")
    elif statistics.consistency_score < LOW_CONSISTENCY:
        insights.append("Try to log your weight more often to get more accurate data.")

    weekly_change = statistics.weekly_average_change
    monthly_change = statistics.monthly_average_change

    if goal_type is GoalType.BULK:
        insights.append(bulk_pace_insight(weekly_change, monthly_change))

        if monthly_change > 0:
            share = estimate_muscle_share(weekly_change)
            insights.append(
                f"Projection: ~{monthly_change:.1f} kg/month "
                f"({monthly_change * 3:.1f} kg in 3 months). "
                f"Estimated ~{share}% lean mass."
            )
    elif goal_type is GoalType.CUT:
        insights.append(cut_pace_insight(weekly_change))
    elif goal_type is GoalType.MAINTENANCE:
        pass
    else:
        raise ValueError(f"Unknown goal type: {goal_type}")

    if statistics.total_entries > 0:
        if statistics.cheat_meal_count / statistics.total_entries > MAX_CHEAT_MEAL_SHARE:
            insights.append("High share of cheat meals. This can skew your averages.")
        if statistics.retention_count / statistics.total_entries > MAX_RETENTION_SHARE:
            insights.append("Many retention entries. Review your sodium and water intake.")

    ma7 = statistics.moving_average_7
    ma30 = statistics.moving_average_30
    if abs(ma7 - ma30) > TREND_DIVERGENCE_KG:
        direction = "rising" if ma7 > ma30 else "falling"
        insights.append(f"Short-term trend is {direction} relative to the monthly average.")

    goal_insight = _goal_distance_insight(statistics.estimated_days_to_goal)
    if goal_insight:
        insights.append(goal_insight)

    return insights


def _goal_distance_insight(estimated_days: Optional[float]) -> Optional[str]:
    if not estimated_days:
        return None
    days = round_int(estimated_days)
    if days <= NEAR_GOAL_DAYS:
        return f"You're close! About {days} days to reach your goal."
    if days <= MID_GOAL_DAYS:
        return f"About {round_int(days / 7)} weeks to reach your goal."
    return None
