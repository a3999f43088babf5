"""Eco level table.

A level is derived from the point total alone; it is recomputed on every
point change and never patched incrementally.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class EcoLevel:
    level: int
    name: str
    min_points: int


ECO_LEVELS: List[EcoLevel] = [
    EcoLevel(1, "Eco Beginner", 0),
    EcoLevel(2, "Eco Explorer", 100),
    EcoLevel(3, "Eco Enthusiast", 300),
    EcoLevel(4, "Eco Champion", 600),
    EcoLevel(5, "Eco Hero", 1000),
    EcoLevel(6, "Eco Guardian", 1500),
    EcoLevel(7, "Eco Warrior", 2500),
    EcoLevel(8, "Eco Legend", 4000),
]

MAX_LEVEL = ECO_LEVELS[-1].level


def calculate_level(points: int) -> int:
    """Highest tier whose minimum is <= ``points`` (negative totals stay at level 1)."""
    for tier in reversed(ECO_LEVELS):
        if points >= tier.min_points:
            return tier.level
    return 1


def get_level_name(level: int) -> str:
    for tier in ECO_LEVELS:
        if tier.level == level:
            return tier.name
    return ECO_LEVELS[0].name


def next_level(points: int) -> Optional[EcoLevel]:
    current = calculate_level(points)
    for tier in ECO_LEVELS:
        if tier.level == current + 1:
            return tier
    return None


def points_to_next_level(points: int) -> int:
    upcoming = next_level(points)
    return upcoming.min_points - points if upcoming else 0
