"""Construction quantity and unit-conversion calculations.

``calculate`` never raises for well-typed input: failures come back as
``CalculationError`` values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from construction_ai.tools.expression import ExpressionError, evaluate


class CalculationType(StrEnum):
    AREA = "area"
    VOLUME = "volume"
    LINEAR = "linear"
    WEIGHT = "weight"
    CONVERSION = "conversion"
    CUSTOM = "custom"


# Factor tables keyed "{from}_to_{to}"; first category containing a key wins
CONVERSION_FACTORS: dict[str, dict[str, float]] = {
    "length": {
        "ft_to_m": 0.3048,
        "m_to_ft": 3.28084,
        "in_to_cm": 2.54,
        "cm_to_in": 0.393701,
        "yd_to_m": 0.9144,
        "m_to_yd": 1.09361,
    },
    "area": {
        "sqft_to_sqm": 0.092903,
        "sqm_to_sqft": 10.7639,
        "sqyd_to_sqm": 0.836127,
        "sqm_to_sqyd": 1.19599,
        "acre_to_sqm": 4046.86,
        "sqm_to_acre": 0.000247105,
    },
    "volume": {
        "cuft_to_cum": 0.0283168,
        "cum_to_cuft": 35.3147,
        "cuyd_to_cum": 0.764555,
        "cum_to_cuyd": 1.30795,
        "gal_to_l": 3.78541,
        "l_to_gal": 0.264172,
    },
    "weight": {
        "lb_to_kg": 0.453592,
        "kg_to_lb": 2.20462,
        "ton_to_kg": 907.185,
        "kg_to_ton": 0.00110231,
        "tonne_to_kg": 1000,
        "kg_to_tonne": 0.001,
    },
}


@dataclass(frozen=True)
class CalculationResult:
    result: float
    explanation: str
    calculation_type: str
    input_values: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "result": self.result,
            "explanation": self.explanation,
            "calculation_type": self.calculation_type,
            "input_values": self.input_values,
        }


@dataclass(frozen=True)
class CalculationError:
    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error}


def _fmt(value: float) -> str:
    """Render a number without float noise (20.0 -> "20")."""
    if float(value).is_integer():
        return str(int(value))
    return format(value, ".10g")


def _number(values: dict[str, Any], key: str) -> float | None:
    """Numeric value for ``key``; zero, missing or non-numeric counts as absent."""
    raw = values.get(key)
    if raw is None or isinstance(raw, bool):
        return None
    try:
        number = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return number


def _area(values: dict[str, Any]) -> CalculationResult | CalculationError:
    length, width, radius = _number(values, "length"), _number(values, "width"), _number(values, "radius")
    if length is not None and width is not None:
        result = length * width
        explanation = f"Area = {_fmt(length)} × {_fmt(width)} = {_fmt(result)} square units"
    elif radius is not None:
        result = math.pi * radius**2
        explanation = f"Area = π × {_fmt(radius)}² = {result:.4f} square units"
    else:
        return CalculationError("Missing required values for area calculation (length/width or radius)")
    return CalculationResult(result, explanation, CalculationType.AREA, values)


def _volume(values: dict[str, Any]) -> CalculationResult | CalculationError:
    length, width, height = _number(values, "length"), _number(values, "width"), _number(values, "height")
    area, depth = _number(values, "area"), _number(values, "depth")
    if length is not None and width is not None and height is not None:
        result = length * width * height
        explanation = f"Volume = {_fmt(length)} × {_fmt(width)} × {_fmt(height)} = {_fmt(result)} cubic units"
    elif area is not None and depth is not None:
        result = area * depth
        explanation = f"Volume = {_fmt(area)} × {_fmt(depth)} = {_fmt(result)} cubic units"
    else:
        return CalculationError("Missing required values for volume calculation")
    return CalculationResult(result, explanation, CalculationType.VOLUME, values)


def _linear(values: dict[str, Any]) -> CalculationResult | CalculationError:
    quantity, unit_length = _number(values, "quantity"), _number(values, "unit_length")
    if quantity is None or unit_length is None:
        return CalculationError("Missing required values for linear calculation")
    result = quantity * unit_length
    explanation = f"Total length = {_fmt(quantity)} × {_fmt(unit_length)} = {_fmt(result)} linear units"
    return CalculationResult(result, explanation, CalculationType.LINEAR, values)


def _weight(values: dict[str, Any]) -> CalculationResult | CalculationError:
    volume, density = _number(values, "volume"), _number(values, "density")
    quantity, unit_weight = _number(values, "quantity"), _number(values, "unit_weight")
    if volume is not None and density is not None:
        result = volume * density
        explanation = f"Weight = {_fmt(volume)} × {_fmt(density)} = {_fmt(result)} weight units"
    elif quantity is not None and unit_weight is not None:
        result = quantity * unit_weight
        explanation = f"Total weight = {_fmt(quantity)} × {_fmt(unit_weight)} = {_fmt(result)} weight units"
    else:
        return CalculationError("Missing required values for weight calculation")
    return CalculationResult(result, explanation, CalculationType.WEIGHT, values)


def find_conversion_factor(unit_from: str, unit_to: str) -> float | None:
    key = f"{unit_from}_to_{unit_to}"
    for factors in CONVERSION_FACTORS.values():
        if key in factors:
            return factors[key]
    return None


def _conversion(
    values: dict[str, Any],
    unit_from: str | None,
    unit_to: str | None,
) -> CalculationResult | CalculationError:
    value = _number(values, "value")
    if not unit_from or not unit_to or value is None:
        return CalculationError("Missing required values for conversion (value, unit_from, unit_to)")
    factor = find_conversion_factor(unit_from, unit_to)
    if factor is None:
        return CalculationError(f"Conversion from {unit_from} to {unit_to} not supported")
    result = value * factor
    explanation = f"{_fmt(value)} {unit_from} = {result:.4f} {unit_to}"
    return CalculationResult(result, explanation, CalculationType.CONVERSION, values)


def _custom(values: dict[str, Any], formula: str | None) -> CalculationResult | CalculationError:
    if not formula:
        return CalculationError("Custom calculation requires a formula")
    bindings = {}
    for name, raw in values.items():
        if isinstance(raw, bool):
            continue
        try:
            bindings[name] = float(raw)
        except (TypeError, ValueError, OverflowError):
            continue
    try:
        result = evaluate(formula, bindings)
    except ExpressionError:
        return CalculationError("Invalid formula or values")
    if not math.isfinite(result):
        return CalculationError("Invalid formula or values")
    return CalculationResult(
        result, f"Custom calculation: {formula} = {_fmt(result)}", CalculationType.CUSTOM, values
    )


def calculate(
    calculation_type: str,
    values: dict[str, Any],
    formula: str | None = None,
    unit_from: str | None = None,
    unit_to: str | None = None,
) -> CalculationResult | CalculationError:
    """Run one construction calculation.

    Args:
        calculation_type: area, volume, linear, weight, conversion or custom
        values: Named numeric inputs
        formula: Arithmetic expression for ``custom``
        unit_from: Source unit for ``conversion`` (e.g. "ft")
        unit_to: Target unit for ``conversion`` (e.g. "m")
    """
    values = dict(values or {})
    match calculation_type:
        case CalculationType.AREA:
            outcome = _area(values)
        case CalculationType.VOLUME:
            outcome = _volume(values)
        case CalculationType.LINEAR:
            outcome = _linear(values)
        case CalculationType.WEIGHT:
            outcome = _weight(values)
        case CalculationType.CONVERSION:
            outcome = _conversion(values, unit_from, unit_to)
        case CalculationType.CUSTOM:
            outcome = _custom(values, formula)
        case _:
            return CalculationError(f"Unknown calculation type: {calculation_type}")

    if isinstance(outcome, CalculationResult) and not math.isfinite(outcome.result):
        return CalculationError(f"Result of {calculation_type} calculation is out of range")
    return outcome
