"""
Parsers for interactive answers.

Each parser takes the raw text typed by the user and either returns the
typed value or raises ValidationFailure with a message suitable for showing
directly under the prompt.
"""
import math
from typing import Tuple


class ValidationFailure(ValueError):
    """Raised when an answer is the wrong type or out of range."""


def parse_float_in_range(raw: str, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    try:
        value = float(raw.strip())
    except ValueError:
        raise ValidationFailure("Please enter a valid number (e.g. 7.5)")
    if math.isnan(value) or not low <= value <= high:
        raise ValidationFailure(f"Please enter a value between {low:g} and {high:g}")
    return value


def parse_int_in_range(raw: str, bounds: Tuple[int, int]) -> int:
    low, high = bounds
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValidationFailure("Please enter a whole number")
    if not low <= value <= high:
        raise ValidationFailure(f"Please enter a number between {low} and {high}")
    return value


def parse_yes_no(raw: str) -> bool:
    answer = raw.strip().lower()
    if answer in ("y", "yes"):
        return True
    if answer in ("n", "no"):
        return False
    raise ValidationFailure("Please answer y or n")
