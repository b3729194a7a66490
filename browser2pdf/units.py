"""Unit conversion helpers for page geometry given on the command line."""
from __future__ import annotations

import re
from typing import Dict

MM_PER_INCH = 25.4
CM_PER_INCH = 2.54
PX_PER_INCH = 96
PT_PER_INCH = 72
PC_PER_INCH = 6

_PER_INCH = {
    "mm": MM_PER_INCH,
    "cm": CM_PER_INCH,
    "in": 1.0,
    "px": PX_PER_INCH,
    "pt": PT_PER_INCH,
    "pc": PC_PER_INCH,
}

# A bare number is millimetres, as in the legacy margin flags.
_UNIT_REAL = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)(mm|cm|in|px|pt|pc)?\s*$", re.IGNORECASE)
_VIEWPORT = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")


def unit_real_to_inches(value: str) -> float:
    """Convert a length such as ``"25.4mm"`` or ``"96px"`` to inches.

    Raises ``ValueError`` for anything that is not a non-negative number
    followed by an optional known unit.
    """
    match = _UNIT_REAL.match(value)
    if not match:
        raise ValueError(f"invalid length: {value!r}")
    number, unit = match.groups()
    return float(number) / _PER_INCH[(unit or "mm").lower()]


def parse_viewport_size(value: str) -> Dict[str, int]:
    """Parse ``"WIDTHxHEIGHT"`` into a Playwright viewport mapping."""
    match = _VIEWPORT.match(value)
    if not match:
        raise ValueError(f"invalid viewport size: {value!r}")
    width, height = (int(part) for part in match.groups())
    if width == 0 or height == 0:
        raise ValueError(f"viewport dimensions must be positive: {value!r}")
    return {"width": width, "height": height}


def inches_css(value: float) -> str:
    """Format inches as a CSS length accepted by ``page.pdf``."""
    return f"{value:.4f}in"
