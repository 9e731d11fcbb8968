"""Resistor color code table.

``COLOR_CODES`` is the single source of truth for what every band color
means: its digit, multiplier, tolerance, temperature coefficient, the RGB
centroid used by the swatch classifier and the display color.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .exceptions import ValidationError


class ColorLabel(str, Enum):
    """The twelve resistor band colors, in table order."""
    BLACK = "black"
    BROWN = "brown"
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    VIOLET = "violet"
    GRAY = "gray"
    WHITE = "white"
    GOLD = "gold"
    SILVER = "silver"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ColorCode:
    digit: Optional[int]
    multiplier: Optional[float]
    tolerance_percent: Optional[float]
    temp_coeff_ppm: Optional[float]
    centroid: Tuple[int, int, int]  # RGB 0..255
    radius: float                   # max distance from centroid to still match
    hex: str

    def __post_init__(self):
        if self.digit is None and self.multiplier is None:
            raise ValueError("Color code needs a digit or a multiplier")


_TABLE = {
    ColorLabel.BLACK:  ColorCode(0, 1,    None, None, (0, 0, 0),       50, "#000000"),
    ColorLabel.BROWN:  ColorCode(1, 10,   1,    100,  (139, 69, 19),   60, "#8B4513"),
    ColorLabel.RED:    ColorCode(2, 1e2,  2,    50,   (255, 0, 0),     70, "#FF0000"),
    ColorLabel.ORANGE: ColorCode(3, 1e3,  None, 15,   (255, 165, 0),   70, "#FFA500"),
    ColorLabel.YELLOW: ColorCode(4, 1e4,  None, 25,   (255, 255, 0),   80, "#FFFF00"),
    ColorLabel.GREEN:  ColorCode(5, 1e5,  0.5,  20,   (0, 158, 0),     70, "#009E00"),
    ColorLabel.BLUE:   ColorCode(6, 1e6,  0.25, 10,   (0, 0, 255),     70, "#0000FF"),
    ColorLabel.VIOLET: ColorCode(7, 1e7,  0.1,  5,    (139, 0, 255),   70, "#8B00FF"),
    ColorLabel.GRAY:   ColorCode(8, 1e8,  0.05, 1,    (128, 128, 128), 60, "#808080"),
    ColorLabel.WHITE:  ColorCode(9, 1e9,  None, None, (255, 255, 255), 50, "#FFFFFF"),
    ColorLabel.GOLD:   ColorCode(None, 0.1,  5,  None, (181, 151, 0),   70, "#B59700"),
    ColorLabel.SILVER: ColorCode(None, 0.01, 10, None, (192, 192, 192), 60, "#C0C0C0"),
}


def _check_complete(table: Mapping[ColorLabel, ColorCode]) -> None:
    missing = set(ColorLabel) - set(table)
    if missing:
        raise ValueError(f"Color table is missing {sorted(label.value for label in missing)}")


_check_complete(_TABLE)

COLOR_CODES: Mapping[ColorLabel, ColorCode] = MappingProxyType(_TABLE)

# Class index order of the band color model (alphabetical, as trained)
MODEL_CLASS_ORDER: Tuple[ColorLabel, ...] = (
    ColorLabel.BLACK, ColorLabel.BLUE, ColorLabel.BROWN, ColorLabel.GOLD,
    ColorLabel.GREEN, ColorLabel.GRAY, ColorLabel.ORANGE, ColorLabel.VIOLET,
    ColorLabel.RED, ColorLabel.SILVER, ColorLabel.WHITE, ColorLabel.YELLOW,
)

_ALIASES = {"grey": ColorLabel.GRAY, "purple": ColorLabel.VIOLET}


def parse_color(name: str) -> ColorLabel:
    """Parse a user-typed color name (case-insensitive, a few aliases)."""
    key = name.strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return ColorLabel(key)
    except ValueError:
        valid = ", ".join(label.value for label in ColorLabel)
        raise ValidationError(f"Unknown band color '{name}'. Expected one of: {valid}")
