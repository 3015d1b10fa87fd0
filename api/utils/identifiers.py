"""
Carrier identifier utilities.

Pure functions for cleaning, validating and canonicalising MC docket numbers
and USDOT numbers as they arrive from users and from the SAFER page.
"""

import re
from typing import Tuple


MC_DIGITS_MIN = 4
MC_DIGITS_MAX = 8
DOT_DIGITS_MIN = 5
DOT_DIGITS_MAX = 9

_NON_DIGITS = re.compile(r"[^0-9]")
_MC_DOCKET = re.compile(r"\bMC[-\s]*(\d+)", re.IGNORECASE)


class IdentifierError(ValueError):
    """Raised when an MC or DOT number fails validation."""


def digits_only(value) -> str:
    """
    Strip everything but digits from a value.

    Handles:
    - "MC-1777037" -> "1777037"
    - " 123 456 " -> "123456"
    - None -> ""

    Args:
        value: Raw identifier, any type

    Returns:
        String containing only the digit characters of the input
    """
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def normalize_mc(value) -> str:
    """
    Canonicalise an MC number to "MC" followed by its digits.

    Handles:
    - "mc-1777037" -> "MC1777037"
    - "MC1777037" -> "MC1777037"
    - "1777037" -> "MC1777037"
    - "", None -> ""

    Args:
        value: MC number with optional prefix, hyphens or whitespace

    Returns:
        Canonical MC number, or empty string when there are no digits
    """
    digits = digits_only(value)
    return f"MC{digits}" if digits else ""


def normalize_dot(value) -> str:
    """
    Canonicalise a USDOT number to its bare digit string.

    Args:
        value: USDOT number with optional prefix or noise

    Returns:
        Digit string, or empty string when there are no digits
    """
    return digits_only(value)


def validate_mc(value) -> str:
    """
    Validate an MC number and return its digits.

    Args:
        value: Raw MC number from the caller

    Returns:
        The 4-8 digit MC number without prefix

    Raises:
        IdentifierError: If the cleaned number has the wrong length
    """
    digits = digits_only(value)
    if not MC_DIGITS_MIN <= len(digits) <= MC_DIGITS_MAX:
        raise IdentifierError(
            f"Invalid MC number format: expected {MC_DIGITS_MIN}-{MC_DIGITS_MAX} digits"
        )
    return digits


def validate_dot(value) -> str:
    """
    Validate a USDOT number and return its digits.

    Args:
        value: Raw USDOT number from the caller

    Returns:
        The 5-9 digit USDOT number

    Raises:
        IdentifierError: If the cleaned number has the wrong length
    """
    digits = digits_only(value)
    if not DOT_DIGITS_MIN <= len(digits) <= DOT_DIGITS_MAX:
        raise IdentifierError(
            f"Invalid DOT number format: expected {DOT_DIGITS_MIN}-{DOT_DIGITS_MAX} digits"
        )
    return digits


def mc_from_docket(text: str) -> str:
    """
    Pull the MC docket out of SAFER's "MC/MX/FF Number(s)" cell.

    Handles:
    - "MC-1777037" -> "MC1777037"
    - "FF-12345 MC-998877" -> "MC998877"
    - "FF-12345" -> ""

    Args:
        text: Cleaned text of the docket cell

    Returns:
        Canonical MC number, or empty string when no MC docket is listed
    """
    if not text:
        return ""
    match = _MC_DOCKET.search(text)
    return f"MC{match.group(1)}" if match else ""


def validate_lookup(mc=None, dot=None) -> Tuple[str, str]:
    """
    Validate the MC/DOT pair of a verification request.

    Blank values count as absent. Every value that is present must be valid,
    even when the other one would be used for the lookup.

    Args:
        mc: Raw MC number or None
        dot: Raw USDOT number or None

    Returns:
        Tuple (mc_digits, dot_digits); an absent identifier is ""

    Raises:
        IdentifierError: If neither is given or a given one is malformed
    """
    mc = str(mc).strip() if mc is not None else ""
    dot = str(dot).strip() if dot is not None else ""
    if not mc and not dot:
        raise IdentifierError("MC or DOT number is required")
    mc_digits = validate_mc(mc) if mc else ""
    dot_digits = validate_dot(dot) if dot else ""
    return mc_digits, dot_digits
