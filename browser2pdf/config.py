"""Rendering directives and the invocation model.

A ``RenderConfig`` is built once per invocation by layering the options a
command line (or batch line) explicitly set on top of a base config.  List
fields accumulate, every other field is replaced.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Dict, Mapping, Optional, Tuple

from browser2pdf.errors import UsageError

DEFAULT_MARGIN_INCHES = 10 / 25.4
DEFAULT_JAVASCRIPT_DELAY_MS = 200

# Paper formats understood by Chromium's print backend
PAGE_SIZES = (
    "Letter",
    "Legal",
    "Tabloid",
    "Ledger",
    "A0",
    "A1",
    "A2",
    "A3",
    "A4",
    "A5",
    "A6",
)

ORIENTATIONS = ("Portrait", "Landscape")

LIST_FIELDS = frozenset({"custom_headers", "cookies", "run_scripts", "proxy_bypass"})


def parse_page_size(value: str) -> str:
    """Return the canonical spelling of a paper format name."""
    for name in PAGE_SIZES:
        if name.lower() == value.strip().lower():
            return name
    raise ValueError(f"unsupported page size: {value!r}")


def parse_orientation(value: str) -> str:
    for name in ORIENTATIONS:
        if name.lower() == value.strip().lower():
            return name
    raise ValueError(f"orientation must be Portrait or Landscape, not {value!r}")


@dataclass(frozen=True)
class RenderConfig:
    """Immutable set of rendering directives for one invocation."""

    orientation: str = "Portrait"
    page_size: str = "A4"
    page_width: Optional[float] = None
    page_height: Optional[float] = None
    margin_top: float = DEFAULT_MARGIN_INCHES
    margin_bottom: float = DEFAULT_MARGIN_INCHES
    margin_left: float = DEFAULT_MARGIN_INCHES
    margin_right: float = DEFAULT_MARGIN_INCHES
    background: bool = True
    viewport: Optional[Tuple[int, int]] = None
    enable_javascript: bool = True
    javascript_delay: int = DEFAULT_JAVASCRIPT_DELAY_MS
    zoom: float = 1.0
    proxy: Optional[str] = None
    proxy_bypass: Tuple[str, ...] = ()
    custom_headers: Tuple[Tuple[str, str], ...] = ()
    cookies: Tuple[Tuple[str, str], ...] = ()
    user_style_sheet: Optional[str] = None
    run_scripts: Tuple[str, ...] = ()
    print_media_type: bool = False
    window_status: Optional[str] = None
    stop_slow_scripts: bool = True
    toc: bool = False
    xsl_style_sheet: Optional[str] = None
    title: Optional[str] = None
    outline: bool = True

    @property
    def landscape(self) -> bool:
        return self.orientation == "Landscape"

    @property
    def margins(self) -> Dict[str, float]:
        return {
            "top": self.margin_top,
            "bottom": self.margin_bottom,
            "left": self.margin_left,
            "right": self.margin_right,
        }


_FIELD_NAMES = frozenset(f.name for f in fields(RenderConfig))


def merge_config(base: RenderConfig, overrides: Mapping[str, object]) -> RenderConfig:
    """Layer explicitly-set options onto ``base`` without mutating it."""
    changes = {}
    for name, value in overrides.items():
        if name not in _FIELD_NAMES:
            raise KeyError(f"unknown render option: {name}")
        if name in LIST_FIELDS:
            changes[name] = getattr(base, name) + _as_tuple(value)
        else:
            changes[name] = value
    return replace(base, **changes)


def _as_tuple(value):
    # argparse hands over lists, and nargs=2 pairs as lists too
    return tuple(tuple(item) if isinstance(item, list) else item for item in value)


@dataclass(frozen=True)
class RenderJob:
    """One logical conversion: ordered inputs rendered into one output."""

    inputs: Tuple[str, ...]
    output: str
    config: RenderConfig = field(default_factory=RenderConfig)

    def __post_init__(self) -> None:
        if not self.inputs:
            raise UsageError("at least one input is required")
        if not self.output:
            raise UsageError("an output path is required")
