"""
Numeric parsing for submitted bounds and correct answers.

Teams type their intervals by hand, so values arrive as free text in
decimal or scientific notation ("3500", "3e6", "1.5e-3", "4.2E10").
"""

import math


def parse_number(text) -> float | None:
    """
    Parse a textual value into a finite float.

    Args:
        text: Raw value (usually a string; None and numbers are accepted)

    Returns:
        The parsed float, or None if the value is empty or not a finite number
    """
    if text is None:
        return None

    value = str(text).strip()
    if not value:
        return None

    try:
        number = float(value)
    except ValueError:
        return None

    # float() also accepts "nan" and "inf"; neither is a usable bound
    if not math.isfinite(number):
        return None
    return number
