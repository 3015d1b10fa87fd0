"""
HTML text cleaning helpers.

Pages and fragments are parsed with BeautifulSoup's "html.parser"; every
value taken from a SAFER page goes through these helpers before it becomes
a field value.
"""

import re
from typing import List, Union

from bs4 import BeautifulSoup, Comment, NavigableString, Tag


_WHITESPACE = re.compile(r"\s+")
_NON_INT = re.compile(r"[^0-9]")
_NON_FLOAT = re.compile(r"[^0-9.]")


def to_soup(page: Union[str, Tag, None]) -> Tag:
    """Parse HTML into a tree. Already-parsed trees are returned unchanged.

    Comments are dropped so commented-out markup never leaks into values.
    """
    if isinstance(page, Tag):
        return page
    soup = BeautifulSoup(page or "", "html.parser")
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    return soup


def normalize_space(text: str) -> str:
    """Non-breaking spaces to spaces, whitespace runs collapsed, trimmed."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text.replace("\xa0", " ")).strip()


def clean_text(fragment: Union[str, Tag, None]) -> str:
    """
    Turn an HTML fragment or parsed element into a single line of plain text.

    Handles:
    - "ACME&nbsp;TRUCKING <b>LLC</b>" -> "ACME TRUCKING LLC"
    - "A &amp; B<!-- x -->" -> "A & B"
    - None -> ""

    Args:
        fragment: Raw HTML captured from the page, or a parsed element

    Returns:
        Trimmed plain text
    """
    if fragment is None or fragment == "":
        return ""
    return normalize_space(to_soup(fragment).get_text(" ", strip=True))


def text_lines(node: Tag) -> List[str]:
    """Split an element's text on <br> tags into cleaned lines.

    Text inside nested inline tags stays on its line; empty lines are kept
    so callers can rely on line positions.
    """
    lines = [[]]
    for child in node.descendants:
        if isinstance(child, Tag) and child.name == "br":
            lines.append([])
        elif isinstance(child, NavigableString) and not isinstance(child, Comment):
            lines[-1].append(str(child))
    return [normalize_space("".join(parts)) for parts in lines]


def parse_int(text) -> int:
    """
    Parse a count from page text.

    Handles:
    - "1,234" -> 1234
    - "", "None", None -> 0

    Args:
        text: Cell text

    Returns:
        Non-negative integer, 0 when no digits are present
    """
    if text is None:
        return 0
    digits = _NON_INT.sub("", str(text))
    return int(digits) if digits else 0


def parse_float(text) -> float:
    """
    Parse a percentage or decimal from page text.

    Handles:
    - "22.5%" -> 22.5
    - "0%" -> 0.0
    - "", "N/A", None -> 0.0

    Args:
        text: Cell text

    Returns:
        Non-negative float, 0.0 when the text does not parse
    """
    if text is None:
        return 0.0
    cleaned = _NON_FLOAT.sub("", str(text))
    try:
        return float(cleaned) if cleaned else 0.0
    except ValueError:
        # More than one decimal point, e.g. "1.2.3"
        return 0.0
