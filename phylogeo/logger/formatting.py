"""Text formatting utilities for logging."""

import html
import math
from typing import Any, Optional, Set

from phylogeo.map.types import Point


class SafeHtml(str):
    """Markup that report tables insert without escaping."""


def format_set(s: Set[Any]) -> str:
    """Format set for consistent display."""
    if not s:
        return "∅"
    return "{" + ", ".join(str(x) for x in sorted(s)) + "}"


def format_point(p: Optional[Point], precision: int = 1) -> str:
    if p is None:
        return "-"
    return f"({p.x:.{precision}f}, {p.y:.{precision}f})"


def format_degrees(angle: float) -> str:
    """Format a radian angle in degrees."""
    return f"{math.degrees(angle):.1f}°"


def format_color_swatch(color: str) -> SafeHtml:
    """HTML swatch followed by the color code."""
    escaped = html.escape(color)
    return SafeHtml(
        f'<span class="color-swatch" style="background:{escaped}"></span>{escaped}'
    )
