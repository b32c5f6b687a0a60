"""Weight/volume unit normalization and conversion utilities."""

from __future__ import annotations

import re
from types import MappingProxyType

# Weight units → grams
WEIGHT_CONVERSIONS = MappingProxyType({
    "g": 1.0,
    "oz": 28.3495,
    "lb": 453.592,
    "kg": 1000.0,
    "mg": 0.001,
})

# Volume units → millilitres
VOLUME_CONVERSIONS = MappingProxyType({
    "ml": 1.0,
    "cup": 240.0,
    "tbsp": 15.0,
    "tsp": 5.0,
    "fl oz": 29.5735,
    "l": 1000.0,
    "pint": 473.176,
    "quart": 946.353,
    "gallon": 3785.41,
})

# USDA unit codes, spellings and plurals → canonical unit
_UNIT_ALIASES = MappingProxyType({
    # weight
    "grm": "g",
    "gram": "g",
    "grams": "g",
    "g": "g",
    "ounce": "oz",
    "ounces": "oz",
    "oz": "oz",
    "onz": "oz",
    "pound": "lb",
    "pounds": "lb",
    "lbs": "lb",
    "lb": "lb",
    "kilogram": "kg",
    "kilograms": "kg",
    "kg": "kg",
    "milligram": "mg",
    "milligrams": "mg",
    "mg": "mg",
    # volume
    "mlt": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "ml": "ml",
    "cup": "cup",
    "cups": "cup",
    "c": "cup",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbsp": "tbsp",
    "tbs": "tbsp",
    "tb": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsp": "tsp",
    "ts": "tsp",
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "fl oz": "fl oz",
    "floz": "fl oz",
    "fl. oz": "fl oz",
    "fl. oz.": "fl oz",
    "fl oz.": "fl oz",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    "l": "l",
    "pint": "pint",
    "pints": "pint",
    "pt": "pint",
    "quart": "quart",
    "quarts": "quart",
    "qt": "quart",
    "gallon": "gallon",
    "gallons": "gallon",
    "gal": "gallon",
})

_DISPLAY_NAMES = MappingProxyType({
    "l": "L",
    "gallon": "gal",
})

# User-facing subsets offered in unit pickers
STANDARD_WEIGHT_UNITS = ("g", "oz", "lb", "kg")
STANDARD_VOLUME_UNITS = ("ml", "cup", "tbsp", "tsp", "fl oz", "l")

_FRACTION_MAP: dict[str, float] = {
    "1/2": 0.5,
    "1/3": 1 / 3,
    "2/3": 2 / 3,
    "1/4": 0.25,
    "3/4": 0.75,
    "½": 0.5,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 0.25,
    "¾": 0.75,
}

# Leading number (decimal, fraction, mixed "1 1/2" or vulgar fraction) + unit text
_AMOUNT_PATTERN = re.compile(
    r"^\s*(\d+\s+\d+/\d+|\d+(?:\.\d+)?(?:/\d+)?|\.\d+|[½⅓⅔¼¾])?\s*(.*?)\s*$"
)


def normalize_unit(unit: str | None) -> str | None:
    """Map a unit spelling to its canonical token.

    Unrecognized units are returned lower-cased and trimmed so that they
    simply have no conversions. Empty input is returned as-is; callers
    pick their own default.
    """
    if not unit:
        return unit
    lowered = unit.strip().lower()
    return _UNIT_ALIASES.get(lowered, lowered)


def is_weight_unit(unit: str | None) -> bool:
    return normalize_unit(unit) in WEIGHT_CONVERSIONS


def is_volume_unit(unit: str | None) -> bool:
    return normalize_unit(unit) in VOLUME_CONVERSIONS


def unit_display_name(unit: str) -> str:
    return _DISPLAY_NAMES.get(unit, unit)


def convert_unit(value: float, from_unit: str | None, to_unit: str | None) -> float | None:
    """Convert a value between two units of the same dimension.

    Args:
        value: Quantity expressed in ``from_unit``.
        from_unit: Source unit (any known spelling).
        to_unit: Target unit (any known spelling).

    Returns:
        The converted quantity, or None when the units are in different
        dimensions or either one is unknown.
    """
    src = normalize_unit(from_unit)
    dst = normalize_unit(to_unit)

    if src == dst:
        return value

    if src in WEIGHT_CONVERSIONS and dst in WEIGHT_CONVERSIONS:
        grams = value * WEIGHT_CONVERSIONS[src]
        return grams / WEIGHT_CONVERSIONS[dst]

    if src in VOLUME_CONVERSIONS and dst in VOLUME_CONVERSIONS:
        ml = value * VOLUME_CONVERSIONS[src]
        return ml / VOLUME_CONVERSIONS[dst]

    return None


def get_compatible_units(unit: str) -> list[str]:
    """Units a quantity in ``unit`` can be displayed in."""
    normalized = normalize_unit(unit)
    if normalized in WEIGHT_CONVERSIONS:
        return list(STANDARD_WEIGHT_UNITS)
    if normalized in VOLUME_CONVERSIONS:
        return list(STANDARD_VOLUME_UNITS)
    return [unit]


def format_conversion_factor(ratio: float | None) -> str:
    """Render a conversion ratio as ``A:B`` for display."""
    if ratio is None or ratio <= 0:
        return ""
    if ratio == 1:
        return "1:1"
    if ratio < 0.01:
        return f"1:{_round_half_up(1 / ratio)}"
    if ratio < 1:
        return f"{ratio:.2f}:1"
    return f"{_trim_number(_round_half_up(ratio * 100) / 100)}:1"


def _round_half_up(x: float) -> int:
    # Math.round semantics; Python's round() is banker's rounding
    return int(x + 0.5) if x >= 0 else -int(-x + 0.5)


def _trim_number(x: float) -> str:
    if x == int(x):
        return str(int(x))
    return repr(x)


def parse_amount(text: str) -> tuple[float, str]:
    """Parse a display amount such as "1/2 cup" or "100g".

    Args:
        text: e.g. "1.5 oz", "½ cup", "1 1/2 tbsp", "2"

    Returns:
        (amount, unit) tuple, unit normalized. Defaults to (1.0, "") if
        unparseable.
    """
    text = text.strip()
    if not text:
        return (1.0, "")

    m = _AMOUNT_PATTERN.match(text)
    if not m:
        return (1.0, "")

    num_str, unit = m.group(1), m.group(2)
    amount = _parse_number(num_str) if num_str else 1.0
    return (amount, normalize_unit(unit) or "")


def _parse_number(s: str) -> float:
    """Parse a number string that may contain fractions."""
    s = s.strip()
    if not s:
        return 1.0

    if s in _FRACTION_MAP:
        return _FRACTION_MAP[s]

    if " " in s:
        whole, frac = s.split(None, 1)
        return _parse_number(whole) + _parse_number(frac)

    if "/" in s:
        parts = s.split("/")
        try:
            return float(parts[0]) / float(parts[1])
        except (ValueError, ZeroDivisionError):
            return 1.0

    try:
        return float(s)
    except ValueError:
        return 1.0
