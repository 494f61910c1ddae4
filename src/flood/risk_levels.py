"""
Discrete flood risk classification.

Maps a normalized score to one of four risk levels. Each level carries a
fixed swatch color for badges and legends; unlike the continuous color
ramp these are not interpolated.
"""

import math
from dataclasses import dataclass
from enum import Enum

from src import config
from src.flood.color_ramp import GREEN, ORANGE, RED, YELLOW, RGBColor, rgb_to_css


class RiskLevel(Enum):
    """Flood risk level with its display swatch."""

    LOW = ("Low", GREEN)
    MODERATE = ("Moderate", YELLOW)
    HIGH = ("High", ORANGE)
    SEVERE = ("Severe", RED)

    def __init__(self, label: str, color: RGBColor):
        self.label = label
        self.color = color

    @property
    def css_color(self) -> str:
        return rgb_to_css(self.color)

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class RiskClassification:
    """Result of classify(): the level label and its swatch color."""

    label: str
    color: RGBColor
    level: RiskLevel


def risk_level_for(score: float, thresholds: dict = None) -> RiskLevel:
    """
    Return the RiskLevel for a normalized score.

    Upper bounds are inclusive: 0.5 is Low, 0.67 is Moderate, 0.85 is High.
    Any real number maps to a level; negatives are Low and values above 1
    are Severe. NaN is Low, matching the ramp and the score function.
    """
    if math.isnan(score):
        return RiskLevel.LOW
    t = thresholds or config.RISK_THRESHOLDS
    if score <= t["low_max"]:
        return RiskLevel.LOW
    if score <= t["moderate_max"]:
        return RiskLevel.MODERATE
    if score <= t["high_max"]:
        return RiskLevel.HIGH
    return RiskLevel.SEVERE


def classify(score: float, thresholds: dict = None) -> RiskClassification:
    """
    Classify a normalized flood score.

    Args:
        score: Normalized flood score
        thresholds: Optional override of config.RISK_THRESHOLDS

    Returns:
        RiskClassification with label, swatch color and level
    """
    level = risk_level_for(score, thresholds)
    return RiskClassification(label=level.label, color=level.color, level=level)


def legend_entries() -> list[tuple[str, str]]:
    """(label, css color) pairs for a legend panel, lowest risk first."""
    return [(level.label, level.css_color) for level in RiskLevel]
