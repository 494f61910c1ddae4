"""
Multi-day rain outlook for the dashboard.

Turns a DayRain forecast into a 5-100 outlook risk score, a level label,
a breakdown of the contributing factors and a list of advisories.

Score formula:
    score = min(round(mean_daily * 8 + wettest_day * 1.5 + heavy_days * 10), 100)
    score = max(score, 5)                     (0 when there is no forecast)
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

from src import config
from src.flood.rain import DayRain


@dataclass(frozen=True)
class RainAdvisory:
    """A dashboard advisory derived from the forecast."""

    title: str
    body: str
    severity: str  # "danger", "warn" or "info"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _heavy_days(days: Sequence[DayRain]) -> List[DayRain]:
    return [d for d in days if d.total_mm >= config.HEAVY_RAIN_MM]


def _moderate_days(days: Sequence[DayRain]) -> List[DayRain]:
    return [d for d in days if config.MODERATE_RAIN_MM <= d.total_mm < config.HEAVY_RAIN_MM]


def outlook_risk_score(days: Sequence[DayRain]) -> int:
    """Outlook risk score in [5, 100], or 0 for an empty forecast."""
    if not days:
        return 0
    total = sum(d.total_mm for d in days)
    wettest = max(d.total_mm for d in days)
    heavy = len(_heavy_days(days))
    score = min(_round_half_up((total / len(days)) * 8 + wettest * 1.5 + heavy * 10), 100)
    return max(score, 5)


def outlook_risk_label(score: float) -> str:
    """Low up to 30, Moderate up to 60, High up to 80, otherwise Severe."""
    if score <= 30:
        return "Low"
    if score <= 60:
        return "Moderate"
    if score <= 80:
        return "High"
    return "Severe"


def risk_factor_breakdown(days: Sequence[DayRain]) -> dict[str, int]:
    """Percentages (0-100) for each factor shown in the risk breakdown."""
    total = sum(d.total_mm for d in days)
    wettest = max((d.total_mm for d in days), default=0.0)
    mean_daily = total / len(days) if days else 0.0
    peak_hour = max((d.peak_mm for d in days), default=0.0)

    return {
        "Rainfall Intensity": min(_round_half_up(wettest * 3), 100),
        "Cumulative Volume": min(_round_half_up(total / 2), 100),
        "Heavy Day Frequency": min(len(_heavy_days(days)) * 20, 100),
        "Storm Consistency": min(_round_half_up(mean_daily * 10), 100),
        "Peak Hour Severity": min(_round_half_up(peak_hour * 5), 100),
    }


def generate_rain_alerts(days: Sequence[DayRain]) -> List[RainAdvisory]:
    """
    Build dashboard advisories from the forecast.

    Always returns at least one advisory.
    """
    alerts = []
    heavy = _heavy_days(days)
    moderate = _moderate_days(days)
    total = sum(d.total_mm for d in days)

    wettest = None
    for d in days:
        # Later day wins ties
        if wettest is None or d.total_mm >= wettest.total_mm:
            wettest = d

    if heavy:
        nxt = heavy[0]
        day_name = f"{nxt.date:%A}, {nxt.date:%b} {nxt.date.day}"
        alerts.append(RainAdvisory(
            title=f"Heavy rainfall expected on {day_name}",
            body=f"{nxt.total_mm:.1f} mm forecast. Prepare for potential waterlogging in low-lying areas.",
            severity="danger",
        ))

    if wettest is not None and wettest.peak_mm > 5:
        alerts.append(RainAdvisory(
            title=f"Intense hourly peak: {wettest.peak_mm:.1f} mm/hr",
            body="Storm intensity detected. Short-duration flooding risk elevated for urban drainage zones.",
            severity="danger",
        ))

    if len(moderate) >= 3:
        alerts.append(RainAdvisory(
            title=f"{len(moderate)} days of sustained rainfall ahead",
            body="Cumulative saturation risk. Soil absorption capacity may reduce over the period.",
            severity="warn",
        ))

    if total > 50:
        alerts.append(RainAdvisory(
            title=f"High cumulative rainfall: {total:.0f} mm over {len(days)} days",
            body="Consider alternate routes and monitor water levels near rivers and lakes.",
            severity="warn",
        ))

    if not alerts:
        alerts.append(RainAdvisory(
            title="No significant flood risk detected",
            body=f"Rainfall remains low over the next {len(days)} days.",
            severity="info",
        ))

    return alerts
