"""Decode a band color sequence into resistance, tolerance and tempco.

Band roles per mode::

    3 bands: digit digit multiplier
    4 bands: digit digit multiplier tolerance
    5 bands: digit digit digit multiplier tolerance
    6 bands: digit digit digit multiplier tolerance tempco
"""
import math
from typing import Optional, Sequence, Union

from ..core.colors import COLOR_CODES, ColorLabel, parse_color
from ..core.entities import BandCountMode, ResistanceReading
from ..core.exceptions import ValidationError

_UNITS = (
    (1e9, "GΩ"),
    (1e6, "MΩ"),
    (1e3, "kΩ"),
)


def _digit(color: ColorLabel) -> int:
    digit = COLOR_CODES[color].digit
    return 0 if digit is None else digit


def _multiplier(color: ColorLabel) -> float:
    multiplier = COLOR_CODES[color].multiplier
    return 1 if multiplier is None else multiplier


def _coerce_colors(colors: Sequence[Union[ColorLabel, str]]):
    return [c if isinstance(c, ColorLabel) else parse_color(c) for c in colors]


def decode_resistance(colors: Sequence[Union[ColorLabel, str]],
                      mode: Union[BandCountMode, int]) -> ResistanceReading:
    """Compute the reading for ``colors`` interpreted as a ``mode``-band resistor.

    Only the first ``mode`` colors are read.

    Raises:
        ValidationError: Unknown mode, unknown color name, or fewer colors than the mode needs
    """
    try:
        mode = BandCountMode(int(mode))
    except ValueError:
        raise ValidationError(f"Band count must be 3, 4, 5 or 6, got {mode}")

    bands = _coerce_colors(colors)
    if len(bands) < mode:
        raise ValidationError(f"{int(mode)}-band resistor needs {int(mode)} colors, got {len(bands)}")

    n_digits = mode.significant_digits
    significand = 0
    for color in bands[:n_digits]:
        significand = significand * 10 + _digit(color)
    ohms = significand * _multiplier(bands[n_digits])

    tolerance = None
    temp_coeff = None
    if mode.has_tolerance:
        tolerance = COLOR_CODES[bands[n_digits + 1]].tolerance_percent
    if mode.has_temp_coeff:
        temp_coeff = COLOR_CODES[bands[n_digits + 2]].temp_coeff_ppm

    return ResistanceReading(ohms=ohms, mode=mode, tolerance_percent=tolerance,
                             temp_coeff_ppm=temp_coeff)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_ohms(ohms: float) -> str:
    """Scale to Ω/kΩ/MΩ/GΩ and render with at most two decimals.

    The raw value is first rounded to 10 decimals to drop float noise
    (10.200000000001 -> "10.2Ω").
    """
    value = round(ohms, 10)
    unit = "Ω"
    for threshold, name in _UNITS:
        if value >= threshold:
            value = value / threshold
            unit = name
            break

    value = math.floor(value * 100 + 0.5) / 100
    return f"{_format_number(value)}{unit}"


def format_resistance(ohms: float, tolerance_percent: Optional[float] = None,
                      temp_coeff_ppm: Optional[float] = None) -> str:
    """Display string such as ``"1kΩ ±5%"`` or ``"100Ω ±1% 50ppm/°C"``."""
    text = format_ohms(ohms)
    if tolerance_percent is not None:
        text += f" ±{tolerance_percent:g}%"
    if temp_coeff_ppm is not None:
        text += f" {temp_coeff_ppm:g}ppm/°C"
    return text
