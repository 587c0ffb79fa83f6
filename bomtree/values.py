"""Cell value helpers shared by ingestion, the tree view and the exporter."""

import math
import re
from typing import Any, Optional

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def cell_text(value: Any) -> str:
    """Render a cell value as text.

    None renders as an empty string and integral floats lose their
    trailing ".0" (spreadsheet readers hand back 2.0 for a cell showing 2).
    """
    if value is None:
        return ""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def is_blank(value: Any) -> bool:
    return cell_text(value).strip() == ""


def clean_id(value: Any) -> str:
    """Return an id cell stripped of surrounding whitespace."""
    return cell_text(value).strip()


def parse_sequence(value: Any) -> Optional[int]:
    """Parse a sequence number.

    Integers and integral floats ("10", 10, 10.0, "10.0") are accepted;
    anything else (blank, text, 1.5) is treated as missing.

    Returns:
        The integer sequence, or None when missing or unparsable
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value

    text = cell_text(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return None


def parse_level(label: Any) -> Optional[int]:
    """Return the leading integer of a level label ("2" -> 2, "2R" -> 2).

    Returns:
        The numeric level, or None when the label has no leading integer
    """
    match = _LEADING_INT.match(cell_text(label))
    if match is None:
        return None
    return int(match.group(1))


def level_depth(label: Any) -> float:
    """Numeric level used for depth comparisons; unparsable labels are infinitely deep."""
    level = parse_level(label)
    return math.inf if level is None else level
