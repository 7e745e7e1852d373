from __future__ import annotations

from random import Random

SEASON_PERIOD = 100

# Ordered seasonal cycle; a tree's palette index picks one group.
SEASONAL_PALETTES: tuple[tuple[str, str, str], ...] = (
    ("#4CAF50", "#66BB6A", "#81C784"),  # spring greens
    ("#8BC34A", "#9CCC65", "#AED581"),  # summer greens
    ("#FFC107", "#FFD54F", "#FFEE58"),  # autumn yellows
    ("#FF9800", "#FFB74D", "#FFCC02"),  # autumn oranges
    ("#F44336", "#EF5350", "#E57373"),  # autumn reds
)

FLOWER_PETAL_COLOR = "#FFB6C1"


def palette_for(index: int) -> tuple[str, ...]:
    return SEASONAL_PALETTES[index % len(SEASONAL_PALETTES)]


def leaf_color(rng: Random, palette_index: int) -> str:
    return rng.choice(palette_for(palette_index))


def branch_color(level: int) -> str:
    """Darker browns near the trunk, lighter towards the tips."""

    hue = 25 + level * 5
    saturation = max(20, 60 - level * 8)
    lightness = max(15, 25 - level * 2)
    return f"hsl({hue}, {saturation}%, {lightness}%)"
