"""Unit conversion for display.

All stored values are metric (kg, cm). These helpers only convert for
display when the user prefers imperial units.
"""

import math

from calorie_tracker.rounding import round_half_up

KG_TO_LBS = 2.20462
LBS_TO_KG = 0.453592
CM_PER_INCH = 2.54
INCHES_PER_FOOT = 12


def kg_to_lbs(kg: float) -> float:
    """Convert kilograms to pounds (1 decimal)."""
    return round_half_up(kg * KG_TO_LBS, 1)


def lbs_to_kg(lbs: float) -> float:
    """Convert pounds to kilograms (1 decimal)."""
    return round_half_up(lbs * LBS_TO_KG, 1)


def cm_to_ft_in(cm: float) -> tuple[int, int]:
    """Convert centimeters to whole feet and rounded inches."""
    total_inches = cm / CM_PER_INCH
    feet = math.floor(total_inches / INCHES_PER_FOOT)
    inches = round_half_up(total_inches % INCHES_PER_FOOT)
    # 11.5+ inches rounds up to a full foot.
    if inches >= INCHES_PER_FOOT:
        feet += 1
        inches -= INCHES_PER_FOOT
    return int(feet), int(inches)


def ft_in_to_cm(feet: float, inches: float) -> int:
    """Convert feet and inches to whole centimeters."""
    total_inches = feet * INCHES_PER_FOOT + inches
    return round_half_up(total_inches * CM_PER_INCH)


def format_weight(weight_kg: float, is_imperial: bool) -> str:
    """Format a stored weight for display with its unit suffix."""
    if is_imperial:
        return f"{kg_to_lbs(weight_kg)} lbs"
    return f"{round_half_up(weight_kg)} kg"


def format_weight_value(weight_kg: float, is_imperial: bool) -> float:
    """Return the display weight without a unit suffix."""
    if is_imperial:
        return kg_to_lbs(weight_kg)
    return round_half_up(weight_kg)


def format_height(height_cm: float, is_imperial: bool) -> str:
    """Format a stored height for display."""
    if is_imperial:
        feet, inches = cm_to_ft_in(height_cm)
        return f"{feet}'{inches}\""
    return f"{round_half_up(height_cm)} cm"


def weight_unit(is_imperial: bool) -> str:
    """Return the weight unit label."""
    return "lbs" if is_imperial else "kg"


def height_unit(is_imperial: bool) -> str:
    """Return the height unit label."""
    return "ft/in" if is_imperial else "cm"


def weight_to_metric(display_value: float, is_imperial: bool) -> float:
    """Convert a user-entered weight to kilograms for storage."""
    if is_imperial:
        return lbs_to_kg(display_value)
    return display_value


def weight_from_metric(metric_value: float, is_imperial: bool) -> float:
    """Convert a stored weight (kg) to the display unit."""
    if is_imperial:
        return kg_to_lbs(metric_value)
    return metric_value
