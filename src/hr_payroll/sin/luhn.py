"""Luhn mod-10 validation for 9-digit SINs."""

from __future__ import annotations

import re

SIN_PATTERN = re.compile(r"[0-9]{9}")


def luhn_checksum(digits: str) -> int:
    """Return the Luhn sum mod 10 for a string of digits."""
    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = int(char)
        if position % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10


def is_valid_sin(value: object) -> bool:
    """Check that a value is exactly nine digits with a valid Luhn checksum."""
    if not isinstance(value, str) or not SIN_PATTERN.fullmatch(value):
        return False
    return luhn_checksum(value) == 0


def format_sin(value: str) -> str:
    """Format nine digits as DDD-DDD-DDD."""
    return f"{value[0:3]}-{value[3:6]}-{value[6:9]}"


def mask_sin(last3: str) -> str:
    """Masked display form showing only the last three digits."""
    return f"XXX-XXX-{last3}"
